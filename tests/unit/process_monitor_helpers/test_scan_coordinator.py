"""Tests for ScanCoordinator serialization and coalescing."""

import asyncio

import pytest

from slaynode.errors import CommandExecutionFailed, MalformedOutput
from slaynode.process_monitor_helpers.scan_coordinator import ScanCoordinator

from tests.helpers.fakes import FakeCollector, make_record


def _coordinator(collector, **kwargs):
    published = []
    errors = []
    coordinator = ScanCoordinator(collector, published.append, errors.append, **kwargs)
    return coordinator, published, errors


@pytest.mark.asyncio
async def test_single_request_publishes_once():
    collector = FakeCollector([[make_record(1)]])
    coordinator, published, errors = _coordinator(collector)

    assert await coordinator.request_collection() is True

    assert collector.calls == 1
    assert [[record.pid for record in batch] for batch in published] == [[1]]
    assert errors == []


@pytest.mark.asyncio
async def test_requests_during_collection_coalesce_into_one_follow_up():
    collector = FakeCollector([[make_record(1)], [make_record(2)]])
    collector.gate = asyncio.Event()
    coordinator, published, _ = _coordinator(collector)

    first = asyncio.create_task(coordinator.request_collection())
    await collector.started.wait()

    coalesced = [await coordinator.request_collection() for _ in range(5)]
    assert coalesced == [False] * 5
    assert coordinator.has_pending_refresh

    collector.gate.set()
    assert await first is True

    assert collector.calls == 2
    assert len(published) == 2
    assert not coordinator.is_collecting
    assert not coordinator.has_pending_refresh


@pytest.mark.asyncio
async def test_failure_is_published_and_next_request_proceeds():
    collector = FakeCollector([CommandExecutionFailed("ps", 1), [make_record(3)]])
    coordinator, published, errors = _coordinator(collector)

    await coordinator.request_collection()
    await coordinator.request_collection()

    assert len(errors) == 1
    assert errors[0].exit_status == 1
    assert [[record.pid for record in batch] for batch in published] == [[3]]


@pytest.mark.asyncio
async def test_timeout_is_published_as_command_failure():
    collector = FakeCollector([[make_record(1)]])
    collector.gate = asyncio.Event()
    coordinator, published, errors = _coordinator(collector, collection_timeout=0.01)

    await coordinator.request_collection()

    assert published == []
    assert len(errors) == 1
    assert isinstance(errors[0], CommandExecutionFailed)


@pytest.mark.asyncio
async def test_cancelled_collection_publishes_nothing():
    collector = FakeCollector([[make_record(1)]])
    collector.gate = asyncio.Event()
    coordinator, published, errors = _coordinator(collector)

    task = asyncio.create_task(coordinator.request_collection())
    await collector.started.wait()
    task.cancel()
    with pytest.raises(asyncio.CancelledError):
        await task

    assert published == []
    assert errors == []
    assert not coordinator.is_collecting


@pytest.mark.asyncio
async def test_mark_pending_only_while_collecting():
    coordinator, _, _ = _coordinator(FakeCollector())

    assert coordinator.mark_pending() is False
    assert not coordinator.has_pending_refresh


@pytest.mark.asyncio
async def test_unexpected_collector_error_is_published_as_malformed_output():
    collector = FakeCollector([ValueError("bad digit"), [make_record(4)]])
    coordinator, published, errors = _coordinator(collector)

    assert await coordinator.request_collection() is True
    await coordinator.request_collection()

    assert len(errors) == 1
    assert isinstance(errors[0], MalformedOutput)
    assert isinstance(errors[0].__cause__, ValueError)
    assert not coordinator.is_collecting
    assert [[record.pid for record in batch] for batch in published] == [[4]]
