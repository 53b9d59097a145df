"""Detection of script execution failures reported in place of output."""

from __future__ import annotations

import re

from composer.validator.models import (
    ParseSummary,
    ScriptErrorParseResult,
    ValidationIssue,
    ValidationSeverity,
)

# "Error when executing the script - <message>[\noutput:\n<output>]"
EXECUTION_ERROR_RE = re.compile(
    r"^Error when executing the script\s*[-\u2013\u2014]\s*(.*?)(?:\noutput:\n(.*))?$",
    re.IGNORECASE | re.DOTALL,
)

_FAILED_SUMMARY = {"total": 1, "valid": 0, "errors": 1, "warnings": 0}


def _failure(message: str, issue_message: str, output: str) -> ScriptErrorParseResult:
    return ScriptErrorParseResult(
        error_message=message,
        output=output,
        issues=[
            ValidationIssue(
                severity=ValidationSeverity.error,
                message=issue_message,
                line_number=1,
            )
        ],
        summary=ParseSummary(**_FAILED_SUMMARY),
    )


def detect_script_error(output: str) -> ScriptErrorParseResult | None:
    """Return a failure result if *output* is an execution error report."""
    trimmed = output.strip()

    match = EXECUTION_ERROR_RE.match(trimmed)
    if match:
        message = (match.group(1) or "").strip() or "Unknown error"
        script_output = (match.group(2) or "").strip()
        return _failure(message, f"Script execution failed: {message}", script_output)

    if trimmed.startswith("Error:") or trimmed.startswith("ERROR:"):
        message = trimmed[trimmed.index(":") + 1:].strip().split("\n")[0]
        return _failure(message, f"Script error: {message}", trimmed)

    return None
