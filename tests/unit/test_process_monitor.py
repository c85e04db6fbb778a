"""Tests for the ProcessMonitor scheduler facade."""

import asyncio

import pytest

from slaynode.errors import CommandExecutionFailed, ErrorKind
from slaynode.process_monitor import ProcessMonitor

from tests.helpers.fakes import FakeCollector, make_record


@pytest.mark.asyncio
async def test_refresh_publishes_to_subscribers():
    monitor = ProcessMonitor(FakeCollector([[make_record(1), make_record(2)]]))
    received = []
    monitor.subscribe_processes(received.append)

    await monitor.refresh()

    assert [[record.pid for record in batch] for batch in received] == [[1, 2]]
    assert [record.pid for record in monitor.latest_processes] == [1, 2]


@pytest.mark.asyncio
async def test_errors_are_published_as_kind_and_message():
    monitor = ProcessMonitor(FakeCollector([CommandExecutionFailed("ps", 1)]))
    errors = []
    monitor.subscribe_errors(lambda kind, message: errors.append((kind, message)))

    await monitor.refresh()

    assert errors == [(ErrorKind.COMMAND_EXECUTION_FAILED, "Command ps failed with status 1")]
    assert monitor.latest_processes == []


@pytest.mark.asyncio
async def test_unsubscribe_stops_delivery():
    monitor = ProcessMonitor(FakeCollector([[make_record(1)], [make_record(2)]]))
    received = []
    unsubscribe = monitor.subscribe_processes(received.append)

    await monitor.refresh()
    unsubscribe()
    unsubscribe()
    await monitor.refresh()

    assert len(received) == 1


@pytest.mark.asyncio
async def test_n_refresh_requests_during_collection_run_one_follow_up():
    collector = FakeCollector([[make_record(1)], [make_record(2)], [make_record(3)]])
    collector.gate = asyncio.Event()
    monitor = ProcessMonitor(collector)
    received = []
    monitor.subscribe_processes(received.append)

    first = monitor.request_refresh()
    assert first is not None
    await collector.started.wait()

    assert [monitor.request_refresh() for _ in range(4)] == [None] * 4

    collector.gate.set()
    await first

    assert collector.calls == 2
    assert [[record.pid for record in batch] for batch in received] == [[1], [2]]


@pytest.mark.asyncio
async def test_periodic_schedule_survives_failures():
    collector = FakeCollector([CommandExecutionFailed("ps", 1), [make_record(7)]])
    monitor = ProcessMonitor(collector, interval_seconds=0.01)
    monitor._background_worker.initial_delay_seconds = 0
    published = asyncio.Event()
    errors = []
    monitor.subscribe_errors(lambda kind, message: errors.append(kind))
    monitor.subscribe_processes(lambda records: published.set())

    monitor.start()
    assert monitor.is_running
    await asyncio.wait_for(published.wait(), timeout=1)
    await monitor.stop()

    assert errors == [ErrorKind.COMMAND_EXECUTION_FAILED]
    assert not monitor.is_running


@pytest.mark.asyncio
async def test_stop_cancels_refresh_without_publishing():
    collector = FakeCollector([[make_record(1)]])
    collector.gate = asyncio.Event()
    monitor = ProcessMonitor(collector)
    received = []
    monitor.subscribe_processes(received.append)

    task = monitor.request_refresh()
    await collector.started.wait()
    await monitor.stop()

    assert task.cancelled()
    assert received == []
    assert not monitor.is_collecting


def test_update_interval_ignores_jitter():
    monitor = ProcessMonitor(FakeCollector(), interval_seconds=5.0)

    assert monitor.update_interval(5.005) is False
    assert monitor.interval_seconds == 5.0
    assert monitor.update_interval(7.0) is True
    assert monitor.interval_seconds == 7.0


def test_update_interval_rejects_non_positive():
    with pytest.raises(ValueError):
        ProcessMonitor(FakeCollector()).update_interval(0)


@pytest.mark.asyncio
async def test_periodic_schedule_survives_unexpected_collector_errors():
    collector = FakeCollector([ValueError("invalid literal"), [make_record(8)]])
    monitor = ProcessMonitor(collector, interval_seconds=0.01)
    monitor._background_worker.initial_delay_seconds = 0
    published = asyncio.Event()
    errors = []
    monitor.subscribe_errors(lambda kind, message: errors.append(kind))
    monitor.subscribe_processes(lambda records: published.set())

    monitor.start()
    await asyncio.wait_for(published.wait(), timeout=1)
    await monitor.stop()

    assert errors == [ErrorKind.MALFORMED_OUTPUT]
    assert [record.pid for record in monitor.latest_processes] == [8]
