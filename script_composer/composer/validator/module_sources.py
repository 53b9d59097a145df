"""Parsers for collection scripts of non-datasource logic modules."""

from __future__ import annotations

import json
import re
import string
from datetime import datetime
from email.utils import parsedate_to_datetime
from typing import Any

from composer.validator.lines import COMMENT_REASON, is_comment, split_first
from composer.validator.models import (
    ConfigParseResult,
    EventEntry,
    EventParseResult,
    LogEntry,
    LogParseResult,
    ParseSummary,
    PropertyEntry,
    PropertyParseResult,
    TopologyEdge,
    TopologyParseResult,
    TopologyVertex,
    UnparsedLine,
    ValidationIssue,
    ValidationSeverity,
)
from composer.validator.summary import count_severity, summarize

VALID_EVENT_SEVERITIES = ("critical", "error", "warn", "info", "debug")

# Leading "2024-01-01T12:00:00.000Z message" style timestamp on plain-text logs
LOG_TIMESTAMP_RE = re.compile(r"^(\d{4}-\d{2}-\d{2}[T\s]\d{2}:\d{2}:\d{2}[.\d]*Z?)\s+(.*)$")

_PROPERTY_NAME_START = frozenset(string.ascii_letters + "_")
_PROPERTY_NAME_CHARS = frozenset(string.ascii_letters + string.digits + "_.-")

_PREVIEW_LENGTH = 100


def _preview(output: str) -> str:
    if len(output) > _PREVIEW_LENGTH:
        return output[:_PREVIEW_LENGTH] + "..."
    return output


def _invalid_json(output: str, exc: ValueError) -> UnparsedLine:
    return UnparsedLine(line_number=1, content=_preview(output), reason=f"Invalid JSON: {exc}")


def _optional_str(value: Any) -> str | None:
    if value is None or value == "":
        return None
    return value if isinstance(value, str) else str(value)


# -- PropertySource --


def _is_standard_property_name(name: str) -> bool:
    return name[0] in _PROPERTY_NAME_START and all(ch in _PROPERTY_NAME_CHARS for ch in name)


def parse_property_output(output: str) -> PropertyParseResult:
    """Parse ``name=value`` property lines, flagging odd and duplicate names."""
    properties: list[PropertyEntry] = []
    unparsed: list[UnparsedLine] = []
    seen: set[str] = set()

    for index, line in enumerate(output.split("\n")):
        line_number = index + 1
        trimmed = line.strip()
        if not trimmed:
            continue

        if is_comment(trimmed):
            unparsed.append(
                UnparsedLine(line_number=line_number, content=line, reason=COMMENT_REASON)
            )
            continue

        split = split_first(trimmed, "=")
        if split is None:
            unparsed.append(
                UnparsedLine(
                    line_number=line_number,
                    content=line,
                    reason="Does not match property format (missing = delimiter)",
                )
            )
            continue

        name, value = split
        entry = PropertyEntry(name=name, value=value, line_number=line_number, raw_line=line)

        if not _is_standard_property_name(name):
            entry.issues.append(
                ValidationIssue(
                    severity=ValidationSeverity.warning,
                    message=f'Property name "{name}" contains non-standard characters',
                    line_number=line_number,
                    field="name",
                )
            )
        if name in seen:
            entry.issues.append(
                ValidationIssue(
                    severity=ValidationSeverity.warning,
                    message=f'Duplicate property name "{name}"',
                    line_number=line_number,
                    field="name",
                )
            )
        seen.add(name)
        properties.append(entry)

    return PropertyParseResult(
        properties=properties, unparsed_lines=unparsed, summary=summarize(properties)
    )


# -- EventSource --


def parse_event_output(output: str) -> EventParseResult:
    """Parse a JSON event list (bare array or ``{"events": [...]}``)."""
    events: list[EventEntry] = []
    unparsed: list[UnparsedLine] = []

    try:
        parsed = json.loads(output.strip())
    except ValueError as e:
        unparsed.append(_invalid_json(output, e))
        return EventParseResult(unparsed_lines=unparsed)

    if isinstance(parsed, dict):
        event_list = parsed.get("events")
        if event_list is None:
            event_list = []
    else:
        event_list = parsed

    if not isinstance(event_list, list):
        unparsed.append(
            UnparsedLine(
                line_number=1,
                content=output[:_PREVIEW_LENGTH],
                reason="Expected an array of events",
            )
        )
        return EventParseResult(unparsed_lines=unparsed)

    for index, raw in enumerate(event_list):
        line_number = index + 1
        item = raw if isinstance(raw, dict) else {}
        properties = item.get("properties")
        event = EventEntry(
            happened_on=_optional_str(item.get("happenedOn") or item.get("timestamp")),
            severity=_optional_str(item.get("severity")),
            message=_optional_str(item.get("message")),
            source=_optional_str(item.get("source")),
            properties=properties if isinstance(properties, dict) else None,
            line_number=line_number,
            raw_line=json.dumps(raw),
        )

        if not event.message and not event.happened_on:
            event.issues.append(
                ValidationIssue(
                    severity=ValidationSeverity.warning,
                    message="Event should have a message or timestamp",
                    line_number=line_number,
                )
            )

        if event.severity and event.severity.lower() not in VALID_EVENT_SEVERITIES:
            event.issues.append(
                ValidationIssue(
                    severity=ValidationSeverity.warning,
                    message=(
                        f'Unknown severity "{event.severity}". '
                        f"Expected: {', '.join(VALID_EVENT_SEVERITIES)}"
                    ),
                    line_number=line_number,
                )
            )

        events.append(event)

    return EventParseResult(events=events, unparsed_lines=unparsed, summary=summarize(events))


# -- LogSource --


def _is_parseable_timestamp(value: str) -> bool:
    """ISO 8601 or RFC 2822 timestamps."""
    try:
        datetime.fromisoformat(value.replace("Z", "+00:00"))
        return True
    except ValueError:
        pass
    try:
        parsedate_to_datetime(value)
    except (TypeError, ValueError):
        return False
    return True


def _json_log_list(output: str) -> list | None:
    try:
        parsed = json.loads(output.strip())
    except ValueError:
        return None
    if isinstance(parsed, list):
        return parsed
    if isinstance(parsed, dict):
        logs = parsed.get("logs")
        if logs is None:
            logs = parsed.get("entries")
        if logs is None:
            logs = []
        return logs if isinstance(logs, list) else None
    return None


def parse_log_output(output: str) -> LogParseResult:
    """Parse log output, as a JSON list when possible, otherwise line by line."""
    entries: list[LogEntry] = []

    log_list = _json_log_list(output)
    if log_list is not None:
        for index, raw in enumerate(log_list):
            line_number = index + 1
            if isinstance(raw, str):
                entry = LogEntry(message=raw, line_number=line_number, raw_line=raw)
            else:
                item = raw if isinstance(raw, dict) else {}
                message = item.get("message") or item.get("msg") or json.dumps(raw)
                entry = LogEntry(
                    timestamp=_optional_str(item.get("timestamp") or item.get("time")),
                    message=message if isinstance(message, str) else json.dumps(message),
                    line_number=line_number,
                    raw_line=json.dumps(raw),
                )
            if entry.timestamp and not _is_parseable_timestamp(entry.timestamp):
                entry.issues.append(
                    ValidationIssue(
                        severity=ValidationSeverity.warning,
                        message=f'Timestamp "{entry.timestamp}" may not be in a standard format',
                        line_number=line_number,
                    )
                )
            entries.append(entry)
        return LogParseResult(entries=entries, summary=summarize(entries))

    for index, line in enumerate(output.split("\n")):
        trimmed = line.strip()
        if not trimmed:
            continue
        entry = LogEntry(message=trimmed, line_number=index + 1, raw_line=line)
        match = LOG_TIMESTAMP_RE.match(trimmed)
        if match:
            entry.timestamp = match.group(1)
            entry.message = match.group(2)
        entries.append(entry)

    return LogParseResult(entries=entries, summary=summarize(entries))


# -- TopologySource --


def _topology_vertex(raw: Any) -> TopologyVertex:
    item = raw if isinstance(raw, dict) else {}
    properties = item.get("properties")
    vertex = TopologyVertex(
        id=str(item.get("id") or item.get("name") or "unknown"),
        name=_optional_str(item.get("name")),
        type=_optional_str(item.get("type")),
        properties=properties if isinstance(properties, dict) else None,
    )
    if not item.get("id") and not item.get("name"):
        vertex.issues.append(
            ValidationIssue(
                severity=ValidationSeverity.error,
                message="Vertex must have an id or name",
                line_number=1,
            )
        )
    return vertex


def _topology_edge(raw: Any) -> TopologyEdge:
    item = raw if isinstance(raw, dict) else {}
    health = item.get("fromHealthData") or item.get("toHealthData")
    meta = item.get("metaData")
    edge = TopologyEdge(
        from_=str(item.get("from") or ""),
        to=str(item.get("to") or ""),
        type=_optional_str(item.get("type")),
        display_type=_optional_str(item.get("displayType")),
        from_instance=_optional_str(item.get("fromInstance")),
        to_instance=_optional_str(item.get("toInstance")),
        from_instance_edge_type=_optional_str(item.get("fromInstanceEdgeType")),
        to_instance_edge_type=_optional_str(item.get("toInstanceEdgeType")),
        instance_edge_type=_optional_str(item.get("instanceEdgeType")),
        health_data=health if isinstance(health, dict) else None,
        meta_data=meta if isinstance(meta, dict) else None,
        metric_reporting_node=_optional_str(item.get("metricReportingNode")),
    )
    for end in ("from", "to"):
        if not item.get(end):
            edge.issues.append(
                ValidationIssue(
                    severity=ValidationSeverity.error,
                    message=f'Edge must have a "{end}" field',
                    line_number=1,
                )
            )
    return edge


def parse_topology_output(output: str) -> TopologyParseResult:
    """Parse a ``{"vertices": [...], "edges": [...]}`` topology document."""
    vertices: list[TopologyVertex] = []
    edges: list[TopologyEdge] = []
    unparsed: list[UnparsedLine] = []

    try:
        parsed = json.loads(output.strip())
    except ValueError as e:
        unparsed.append(_invalid_json(output, e))
        return TopologyParseResult(unparsed_lines=unparsed)

    document = parsed if isinstance(parsed, dict) else {}

    if isinstance(document.get("vertices"), list):
        vertices = [_topology_vertex(v) for v in document["vertices"]]
    if isinstance(document.get("edges"), list):
        edges = [_topology_edge(e) for e in document["edges"]]

    for key in ("vertices", "edges"):
        if not isinstance(document.get(key), list):
            unparsed.append(
                UnparsedLine(
                    line_number=1,
                    content=output[:_PREVIEW_LENGTH],
                    reason=f'Missing "{key}" array in topology output',
                )
            )

    return TopologyParseResult(
        vertices=vertices,
        edges=edges,
        unparsed_lines=unparsed,
        summary=summarize([*vertices, *edges]),
    )


# -- ConfigSource (non-batch) --


def parse_config_output(output: str) -> ConfigParseResult:
    """ConfigSource output is raw configuration text; only emptiness is checked."""
    issues: list[ValidationIssue] = []
    if not output.strip():
        issues.append(
            ValidationIssue(
                severity=ValidationSeverity.warning,
                message="Configuration output is empty",
                line_number=1,
            )
        )

    errors = count_severity(issues, ValidationSeverity.error)
    return ConfigParseResult(
        content=output,
        issues=issues,
        summary=ParseSummary(
            total=1,
            valid=1 if errors == 0 else 0,
            errors=errors,
            warnings=count_severity(issues, ValidationSeverity.warning),
        ),
    )
