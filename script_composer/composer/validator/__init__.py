"""Validation of script execution output."""

from composer.validator.models import (
    ADInstance,
    ADParseResult,
    CollectionDatapoint,
    CollectionParseResult,
    ModuleType,
    ParseOptions,
    ParseResult,
    ParseSummary,
    ScriptMode,
    UnparsedLine,
    ValidationIssue,
    ValidationSeverity,
)
from composer.validator.pipeline import parse_output
from composer.validator.queries import (
    get_all_issues,
    get_issues_by_severity,
    has_errors,
    has_warnings,
)

__all__ = [
    "ADInstance",
    "ADParseResult",
    "CollectionDatapoint",
    "CollectionParseResult",
    "ModuleType",
    "ParseOptions",
    "ParseResult",
    "ParseSummary",
    "ScriptMode",
    "UnparsedLine",
    "ValidationIssue",
    "ValidationSeverity",
    "get_all_issues",
    "get_issues_by_severity",
    "has_errors",
    "has_warnings",
    "parse_output",
]
