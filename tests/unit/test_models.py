"""Tests for record and descriptor value types."""

from datetime import datetime

import pytest

from slaynode.models import ProcessRecord, ServerCategory, ServerDescriptor

from tests.helpers.fakes import make_record


def test_record_rejects_non_positive_pid():
    with pytest.raises(ValueError):
        ProcessRecord(
            pid=0,
            executable="node",
            command="node",
            arguments=(),
            ports=(),
            uptime=1.0,
            start_time=datetime(2024, 1, 1),
            descriptor=ServerDescriptor.UNKNOWN,
        )


def test_with_ports_merges_sorted_unique():
    record = make_record(3, ports=(5173, 3000))

    merged = record.with_ports([3000, 24678])

    assert merged.ports == (3000, 5173, 24678)
    assert merged.id == 3
    assert record.ports == (5173, 3000)


def test_summary_details_order():
    descriptor = ServerDescriptor(
        name="Next.js",
        display_name="Next.js",
        category=ServerCategory.WEB_FRAMEWORK,
        runtime="Node.js",
        package_manager="pnpm",
        script="dev",
        details="Mode: DEV",
    )

    assert descriptor.summary_details() == ["Web framework", "pnpm dev", "Node.js", "Mode: DEV"]


def test_summary_details_script_without_manager():
    descriptor = ServerDescriptor("x", "x", ServerCategory.UTILITY, script="server.js")

    assert descriptor.summary_details() == ["Utility", "server.js"]


def test_category_display_names_cover_every_category():
    assert {category.display_name for category in ServerCategory}.issuperset({"Bundler", "Runtime"})
    assert len({category.display_name for category in ServerCategory}) == len(ServerCategory)
