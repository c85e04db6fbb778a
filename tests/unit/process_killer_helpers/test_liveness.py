"""Tests for the liveness probe."""

from unittest.mock import patch

import psutil

from slaynode.process_killer_helpers.liveness import is_alive

_MODULE = "slaynode.process_killer_helpers.liveness.psutil"


def test_non_positive_pid_is_dead():
    assert is_alive(0) is False


def test_missing_pid_is_dead():
    with patch(f"{_MODULE}.pid_exists", return_value=False):
        assert is_alive(4242) is False


def test_zombie_is_dead():
    with patch(f"{_MODULE}.pid_exists", return_value=True), patch(f"{_MODULE}.Process") as process_cls:
        process_cls.return_value.status.return_value = psutil.STATUS_ZOMBIE
        assert is_alive(4242) is False


def test_running_process_is_alive():
    with patch(f"{_MODULE}.pid_exists", return_value=True), patch(f"{_MODULE}.Process") as process_cls:
        process_cls.return_value.status.return_value = psutil.STATUS_RUNNING
        assert is_alive(4242) is True


def test_uninspectable_existing_process_counts_as_alive():
    with patch(f"{_MODULE}.pid_exists", return_value=True), patch(
        f"{_MODULE}.Process", side_effect=psutil.AccessDenied(4242)
    ):
        assert is_alive(4242) is True
