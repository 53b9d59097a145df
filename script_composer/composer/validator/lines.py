"""Shared line predicates and identifier checks used by every output parser."""

from __future__ import annotations

import re
import string

from composer.validator.models import ValidationIssue, ValidationSeverity

AD_DELIMITER = "##"
AD_PROPERTIES_DELIMITER = "####"
COLLECTION_DELIMITER = "="

WARNING_BANNER_PREFIX = "[Warning:"

MAX_ID_LENGTH = 1024
MAX_NAME_LENGTH = 255

COMMENT_REASON = "Comment line"

_INVALID_ID_CHARS = frozenset("=:\\#")
_DATAPOINT_NAME_CHARS = frozenset(string.ascii_letters + string.digits + "_.-")
_LEADING_NUMBER_RE = re.compile(r"[+-]?(?:Infinity|(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?)")


def is_blank(line: str) -> bool:
    return not line.strip()


def is_comment(line: str) -> bool:
    """Return True for ``#`` and ``//`` comment lines."""
    trimmed = line.strip()
    return trimmed.startswith("#") or trimmed.startswith("//")


def is_ad_comment(line: str) -> bool:
    """Comment check for AD output.

    A line that opens with the ``##`` delimiter is an instance with an empty
    id, not a comment, so the author sees the missing-id error for it.
    """
    trimmed = line.strip()
    if trimmed.startswith(AD_DELIMITER):
        return False
    return is_comment(trimmed)


def has_ad_delimiter(line: str) -> bool:
    return AD_DELIMITER in line


def is_preamble_line(line: str) -> bool:
    """Blank lines and ``[Warning: ...]`` banners injected before script output."""
    trimmed = line.strip()
    return not trimmed or trimmed.startswith(WARNING_BANNER_PREFIX)


def strip_preamble(output: str) -> str:
    """Drop the leading run of blank and warning-banner lines.

    Stripping stops for good at the first line that is neither; any blank or
    banner line after that point is kept verbatim.
    """
    lines = output.split("\n")
    start = 0
    while start < len(lines) and is_preamble_line(lines[start]):
        start += 1
    return "\n".join(lines[start:])


def contains_invalid_id_chars(value: str) -> bool:
    """True if *value* holds whitespace, ``=``, ``:``, ``\\`` or ``#``."""
    return any(ch.isspace() or ch in _INVALID_ID_CHARS for ch in value)


def is_standard_datapoint_name(name: str) -> bool:
    """True if *name* is non-empty and made of ASCII word chars, ``.`` and ``-``."""
    return bool(name) and all(ch in _DATAPOINT_NAME_CHARS for ch in name)


def split_first(text: str, sep: str) -> tuple[str, str] | None:
    """Split *text* at the first *sep* when it sits past index 0."""
    idx = text.find(sep)
    if idx <= 0:
        return None
    return text[:idx], text[idx + len(sep):]


def parse_number(text: str) -> float | None:
    """Parse the longest leading decimal literal of *text*.

    Trailing text is ignored (``12ms`` is 12); None when no literal leads.
    """
    match = _LEADING_NUMBER_RE.match(text.lstrip())
    if match is None:
        return None
    return float(match.group(0))


def invalid_number_issue(raw_value: str, line_number: int) -> ValidationIssue:
    return ValidationIssue(
        severity=ValidationSeverity.error,
        message=f'Value "{raw_value}" is not a valid number',
        line_number=line_number,
        field="value",
    )


def check_identifier(value: str, label: str, field: str, line_number: int) -> list[ValidationIssue]:
    """Apply the instance-id character and length rules to a wildvalue-like identifier."""
    issues: list[ValidationIssue] = []
    if contains_invalid_id_chars(value):
        issues.append(
            ValidationIssue(
                severity=ValidationSeverity.error,
                message=f"{label} contains invalid characters (spaces, =, :, \\, or #)",
                line_number=line_number,
                field=field,
            )
        )
    if len(value) > MAX_ID_LENGTH:
        issues.append(
            ValidationIssue(
                severity=ValidationSeverity.error,
                message=f"{label} exceeds maximum length of {MAX_ID_LENGTH} characters",
                line_number=line_number,
                field=field,
            )
        )
    return issues
