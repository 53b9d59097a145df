"""Uniform issue access across parse result shapes."""

from __future__ import annotations

from composer.validator.models import (
    ADParseResult,
    CollectionParseResult,
    ConfigParseResult,
    EventParseResult,
    LogParseResult,
    ParseResult,
    PropertyParseResult,
    ScriptErrorParseResult,
    TopologyParseResult,
    ValidationIssue,
    ValidationSeverity,
)


def has_errors(result: ParseResult) -> bool:
    return result.summary.errors > 0


def has_warnings(result: ParseResult) -> bool:
    return result.summary.warnings > 0


def get_all_issues(result: ParseResult) -> list[ValidationIssue]:
    """Flatten issues in record order, then issue order within each record."""
    if isinstance(result, ADParseResult):
        records = result.instances
    elif isinstance(result, CollectionParseResult):
        records = result.datapoints
    elif isinstance(result, TopologyParseResult):
        records = [*result.vertices, *result.edges]
    elif isinstance(result, EventParseResult):
        records = result.events
    elif isinstance(result, PropertyParseResult):
        records = result.properties
    elif isinstance(result, LogParseResult):
        records = result.entries
    elif isinstance(result, (ConfigParseResult, ScriptErrorParseResult)):
        return list(result.issues)
    else:
        return []
    return [issue for record in records for issue in record.issues]


def get_issues_by_severity(
    result: ParseResult, severity: ValidationSeverity
) -> list[ValidationIssue]:
    return [i for i in get_all_issues(result) if i.severity == severity]
