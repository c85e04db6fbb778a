"""Tests for CommandRunner."""

import asyncio
from unittest.mock import AsyncMock, MagicMock

import pytest

from slaynode.errors import CommandExecutionFailed
from slaynode.process_monitor_helpers.command_runner import CommandRunner


def _stream(data=b"", eof=True):
    reader = asyncio.StreamReader()
    if data:
        reader.feed_data(data)
    if eof:
        reader.feed_eof()
    return reader


def _fake_process(stdout=b"", stderr=b"", returncode=0, hang=False):
    process = MagicMock()
    process.pid = 999
    process.returncode = returncode
    process.stdout = _stream(stdout, eof=not hang)
    process.stderr = _stream(stderr)
    process.wait = AsyncMock(return_value=returncode)
    return process


@pytest.fixture
def spawn(monkeypatch):
    def _install(process=None, error=None):
        mock = AsyncMock(return_value=process, side_effect=error)
        monkeypatch.setattr(
            "slaynode.process_monitor_helpers.command_runner.asyncio.create_subprocess_exec", mock
        )
        return mock

    return _install


@pytest.mark.asyncio
async def test_run_returns_decoded_output(spawn):
    mock = spawn(_fake_process(stdout=b"  1 01:00 node\n"))

    result = await CommandRunner().run("ps", ["-axo", "pid=,etime=,command="])

    assert result.status == 0
    assert result.stdout == "  1 01:00 node\n"
    assert mock.await_args.args[:3] == ("ps", "-axo", "pid=,etime=,command=")


@pytest.mark.asyncio
async def test_run_caps_output(spawn):
    spawn(_fake_process(stdout=b"x" * 100))

    result = await CommandRunner(max_output_bytes=10).run("ps", [])

    assert result.stdout == "x" * 10


@pytest.mark.asyncio
async def test_nonzero_status_raises_unless_allowed(spawn):
    spawn(_fake_process(returncode=1, stderr=b"nothing found"))

    with pytest.raises(CommandExecutionFailed) as exc_info:
        await CommandRunner().run("/usr/sbin/lsof", ["-p", "1"])
    assert exc_info.value.exit_status == 1

    result = await CommandRunner().run("/usr/sbin/lsof", ["-p", "1"], allow_failure=True)
    assert result.status == 1
    assert result.stderr == "nothing found"


@pytest.mark.asyncio
async def test_missing_tool_raises_command_failure(spawn):
    spawn(error=FileNotFoundError(2, "No such file", "ps"))

    with pytest.raises(CommandExecutionFailed) as exc_info:
        await CommandRunner().run("/nope/ps", [])

    assert exc_info.value.tool == "ps"
    assert exc_info.value.exit_status == -1


@pytest.mark.asyncio
async def test_timeout_kills_process(spawn):
    process = _fake_process(hang=True)
    spawn(process)

    with pytest.raises(CommandExecutionFailed, match="timed out"):
        await CommandRunner(timeout_seconds=0.01).run("ps", [])

    process.kill.assert_called_once()
    assert process.wait.await_count == 2


@pytest.mark.asyncio
async def test_cancellation_kills_process_and_propagates(spawn):
    process = _fake_process(hang=True)
    spawn(process)

    task = asyncio.create_task(CommandRunner().run("ps", []))
    await asyncio.sleep(0.01)
    task.cancel()

    with pytest.raises(asyncio.CancelledError):
        await task
    process.kill.assert_called_once()
    assert process.wait.await_count == 2


@pytest.mark.asyncio
async def test_oversized_output_is_drained_but_not_kept(spawn):
    process = _fake_process(stdout=b"y" * (200 * 1024))
    spawn(process)

    result = await CommandRunner(max_output_bytes=1024).run("ps", [])

    assert result.stdout == "y" * 1024
    assert process.stdout.at_eof()
