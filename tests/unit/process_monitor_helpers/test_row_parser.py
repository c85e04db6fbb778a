"""Tests for ps row parsing."""

from datetime import datetime, timedelta

import pytest

from slaynode.errors import MalformedOutput
from slaynode.models import ServerCategory
from slaynode.process_monitor_helpers import row_parser
from slaynode.process_monitor_helpers.row_parser import (
    parse_elapsed_time,
    parse_process_row,
    parse_process_table,
)

NOW = datetime(2024, 5, 1, 12, 0, 0)


@pytest.mark.parametrize(
    "etime, seconds",
    [
        ("42", 42.0),
        ("05:07", 307.0),
        ("01:00:00", 3600.0),
        ("2-03:04:05", 2 * 86400 + 3 * 3600 + 4 * 60 + 5.0),
        ("00:00", 0.0),
        ("abc", 0.0),
        ("1-02:03", 0.0),
        ("1:2:3:4", 0.0),
        ("", 0.0),
        ("²", 0.0),
        ("①-01:00:00", 0.0),
    ],
)
def test_parse_elapsed_time(etime, seconds):
    assert parse_elapsed_time(etime) == seconds


def test_parse_process_row_builds_classified_record():
    record = parse_process_row("1234 00:10:00 node /app/node_modules/.bin/vite preview --port 4173", NOW)

    assert record is not None
    assert record.pid == 1234
    assert record.uptime == 600.0
    assert record.start_time == NOW - timedelta(seconds=600)
    assert record.executable == "node"
    assert record.arguments == ("/app/node_modules/.bin/vite", "preview", "--port", "4173")
    assert record.ports == (4173,)
    assert record.descriptor.display_name == "Vite"
    assert record.descriptor.category is ServerCategory.BUNDLER
    assert record.descriptor.details == "Mode: PREVIEW"


def test_zero_uptime_rows_are_excluded():
    assert parse_process_row("77 00:00 node server.js", NOW) is None


@pytest.mark.parametrize("line", ["0 01:00 node a.js", "x 01:00 node", "12 01:00", "12 01:00   "])
def test_unusable_rows_are_skipped(line):
    assert parse_process_row(line, NOW) is None


def test_parse_process_table_skips_bad_rows():
    output = "\n".join(
        [
            "  101 01:00 node server.js",
            "garbage",
            "",
            "  102 00:00 node fresh.js",
            "  103 1-00:00:00 npm run dev",
        ]
    )

    records = parse_process_table(output, NOW)

    assert [record.pid for record in records] == [101, 103]


def test_parse_process_table_raises_when_nothing_has_row_shape():
    with pytest.raises(MalformedOutput):
        parse_process_table("ps: illegal option\nusage: ps [-AaCcEefhjlMmrSTvwXx]", NOW)


def test_parse_process_table_empty_output_is_empty():
    assert parse_process_table("", NOW) == []


def test_parse_process_table_caps_rows(monkeypatch):
    monkeypatch.setattr(row_parser, "MAX_ROWS_PER_CYCLE", 3)
    output = "\n".join(f"{pid} 01:00 node app{pid}.js" for pid in range(1, 10))

    records = parse_process_table(output, NOW)

    assert [record.pid for record in records] == [1, 2, 3]
