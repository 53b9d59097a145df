"""Tests for Collection and BatchCollection output parsing."""

from __future__ import annotations

import math

from composer.validator.collection import (
    WILDVALUE_PREFIX_REQUIRED,
    parse_collection_line,
    parse_collection_output,
)
from composer.validator.models import CollectionDatapoint, ValidationSeverity


def _fields(dp: CollectionDatapoint) -> list[tuple[str, str | None]]:
    return [(i.severity.value, i.field) for i in dp.issues]


class TestParseCollectionLine:
    def test_simple_datapoint(self) -> None:
        dp = parse_collection_line("cpu.load=0.75", 1, batch=False)
        assert dp is not None
        assert dp.name == "cpu.load"
        assert dp.value == 0.75
        assert dp.raw_value == "0.75"
        assert dp.wildvalue is None
        assert dp.issues == []

    def test_value_may_contain_equals(self) -> None:
        dp = parse_collection_line("expr=1=1", 1, batch=False)
        assert dp is not None
        assert dp.name == "expr"
        assert dp.raw_value == "1=1"
        assert dp.value == 1.0
        assert dp.issues == []

    def test_non_numeric_value(self) -> None:
        dp = parse_collection_line("status=UP", 2, batch=False)
        assert dp is not None
        assert dp.value is None
        assert dp.raw_value == "UP"
        assert len(dp.issues) == 1
        issue = dp.issues[0]
        assert issue.severity == ValidationSeverity.error
        assert issue.field == "value"
        assert issue.message == 'Value "UP" is not a valid number'
        assert issue.line_number == 2

    def test_empty_value(self) -> None:
        dp = parse_collection_line("metric=", 1, batch=False)
        assert dp is not None
        assert dp.value is None
        assert dp.issues[0].message == 'Value "" is not a valid number'

    def test_nan_is_not_a_number(self) -> None:
        dp = parse_collection_line("metric=NaN", 1, batch=False)
        assert dp is not None
        assert dp.value is None
        assert _fields(dp) == [("error", "value")]

    def test_numeric_forms(self) -> None:
        for raw, expected in (("-3", -3.0), ("1e3", 1000.0), (".5", 0.5), ("+2.5", 2.5)):
            dp = parse_collection_line(f"m={raw}", 1, batch=False)
            assert dp is not None
            assert dp.value == expected, raw
            assert dp.issues == []

    def test_infinity_spelling(self) -> None:
        dp = parse_collection_line("m=-Infinity", 1, batch=False)
        assert dp is not None
        assert dp.value is not None and math.isinf(dp.value)
        dp = parse_collection_line("m=inf", 1, batch=False)
        assert dp is not None
        assert dp.value is None

    def test_leading_number_with_suffix(self) -> None:
        result = parse_collection_output("latency=12ms\nbig=1_000\nratio= 2.5e1%")
        assert [dp.value for dp in result.datapoints] == [12.0, 1.0, 25.0]
        assert result.summary.errors == 0

    def test_non_standard_name_warning(self) -> None:
        dp = parse_collection_line("disk usage=5", 1, batch=False)
        assert dp is not None
        assert dp.value == 5
        assert _fields(dp) == [("warning", "name")]
        assert dp.issues[0].message == 'Datapoint name "disk usage" contains non-standard characters'

    def test_empty_key_not_parsed(self) -> None:
        assert parse_collection_line("=5", 1, batch=False) is None

    def test_non_records(self) -> None:
        assert parse_collection_line("", 1, batch=False) is None
        assert parse_collection_line("# x=1", 1, batch=False) is None
        assert parse_collection_line("// x=1", 1, batch=False) is None
        assert parse_collection_line("no delimiter", 1, batch=False) is None


class TestBatchLine:
    def test_wildvalue_prefix(self) -> None:
        dp = parse_collection_line("eth0.rxBytes=1024", 1, batch=True)
        assert dp is not None
        assert dp.wildvalue == "eth0"
        assert dp.name == "rxBytes"
        assert dp.value == 1024
        assert dp.issues == []

    def test_split_at_first_dot(self) -> None:
        dp = parse_collection_line("host.if.rx=1", 1, batch=True)
        assert dp is not None
        assert dp.wildvalue == "host"
        assert dp.name == "if.rx"

    def test_missing_wildvalue(self) -> None:
        dp = parse_collection_line("rxBytes=1024", 1, batch=True)
        assert dp is not None
        assert dp.name == "rxBytes"
        assert dp.wildvalue is None
        assert dp.value == 1024
        assert len(dp.issues) == 1
        assert dp.issues[0].field == "name"
        assert dp.issues[0].severity == ValidationSeverity.error
        assert dp.issues[0].message == WILDVALUE_PREFIX_REQUIRED

    def test_leading_dot_is_not_a_prefix(self) -> None:
        dp = parse_collection_line(".rx=1", 1, batch=True)
        assert dp is not None
        assert dp.wildvalue is None
        assert dp.name == ".rx"
        assert _fields(dp) == [("error", "name")]

    def test_invalid_wildvalue_chars(self) -> None:
        dp = parse_collection_line("a:b.rx=1", 1, batch=True)
        assert dp is not None
        assert dp.wildvalue == "a:b"
        assert _fields(dp) == [("error", "wildvalue")]
        assert dp.issues[0].message == (
            "Wildvalue contains invalid characters (spaces, =, :, \\, or #)"
        )

    def test_long_wildvalue(self) -> None:
        dp = parse_collection_line("w" * 1025 + ".rx=1", 1, batch=True)
        assert dp is not None
        assert [i.message for i in dp.issues] == [
            "Wildvalue exceeds maximum length of 1024 characters"
        ]

    def test_name_check_runs_on_stripped_name(self) -> None:
        dp = parse_collection_line("eth0.rx bytes=1", 1, batch=True)
        assert dp is not None
        assert dp.name == "rx bytes"
        assert _fields(dp) == [("warning", "name")]

    def test_issue_order(self) -> None:
        dp = parse_collection_line("bad wv.na me=x", 1, batch=True)
        assert dp is not None
        assert _fields(dp) == [
            ("error", "wildvalue"),
            ("error", "value"),
            ("warning", "name"),
        ]


class TestParseCollectionOutput:
    def test_collection_type(self) -> None:
        result = parse_collection_output("a=1\nb=2")
        assert result.type == "collection"
        assert [dp.name for dp in result.datapoints] == ["a", "b"]
        assert result.is_json_format is False

    def test_unparsed_lines(self) -> None:
        result = parse_collection_output("# c\na=1\nnoise\n=7\n// d")
        assert [(u.line_number, u.reason) for u in result.unparsed_lines] == [
            (1, "Comment line"),
            (3, "Does not match collection format (missing = delimiter)"),
            (4, "Does not match collection format (missing = delimiter)"),
            (5, "Comment line"),
        ]
        assert len(result.datapoints) == 1

    def test_batch_fixture(self, batch_output: str) -> None:
        result = parse_collection_output(batch_output, batch=True)
        assert result.type == "batchcollection"
        assert [dp.wildvalue for dp in result.datapoints] == ["eth0", "eth0", "eth1", None, "eth1"]
        assert result.summary.total == 5
        assert result.summary.valid == 3
        assert result.summary.errors == 2
        assert result.summary.warnings == 1
        # Both banner lines are plain text to the line parser.
        assert [u.line_number for u in result.unparsed_lines] == [1, 7]

    def test_batch_json_detected(self, batch_json_output: str) -> None:
        result = parse_collection_output(batch_json_output, batch=True)
        assert result.is_json_format is True

    def test_json_ignored_outside_batch(self, batch_json_output: str) -> None:
        result = parse_collection_output(batch_json_output, batch=False)
        assert result.is_json_format is False
        assert result.type == "collection"
