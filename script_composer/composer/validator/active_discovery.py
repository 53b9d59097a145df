"""Active Discovery output parsing.

AD scripts print one instance per line::

    instance_id##instance_name
    instance_id##instance_name##description
    instance_id##instance_name##description####auto.prop=value&prop2=value
"""

from __future__ import annotations

from composer.validator.lines import (
    AD_DELIMITER,
    AD_PROPERTIES_DELIMITER,
    COMMENT_REASON,
    MAX_ID_LENGTH,
    MAX_NAME_LENGTH,
    contains_invalid_id_chars,
    has_ad_delimiter,
    is_ad_comment,
)
from composer.validator.models import (
    ADInstance,
    ADParseResult,
    UnparsedLine,
    ValidationIssue,
    ValidationSeverity,
)
from composer.validator.summary import summarize

MISSING_DELIMITER_REASON = "Does not match AD format (missing ## delimiter)"


def _issue(
    severity: ValidationSeverity, message: str, line_number: int, field: str
) -> ValidationIssue:
    return ValidationIssue(
        severity=severity, message=message, line_number=line_number, field=field
    )


def validate_ad_instance(instance: ADInstance) -> None:
    """Append field-level issues for *instance* in rule order."""
    line = instance.line_number
    issues = instance.issues

    if not instance.id or not instance.id.strip():
        issues.append(
            _issue(ValidationSeverity.error, "Instance ID is required", line, "id")
        )
    else:
        # Both id checks run; an id can carry two errors.
        if len(instance.id) > MAX_ID_LENGTH:
            issues.append(
                _issue(
                    ValidationSeverity.error,
                    f"Instance ID exceeds maximum length of {MAX_ID_LENGTH} characters",
                    line,
                    "id",
                )
            )
        if contains_invalid_id_chars(instance.id):
            issues.append(
                _issue(
                    ValidationSeverity.error,
                    "Instance ID contains invalid characters (spaces, =, :, \\, or #)",
                    line,
                    "id",
                )
            )

    if instance.name and len(instance.name) > MAX_NAME_LENGTH:
        issues.append(
            _issue(
                ValidationSeverity.warning,
                f"Instance name exceeds recommended length of {MAX_NAME_LENGTH} characters",
                line,
                "name",
            )
        )

    for key, value in (instance.properties or {}).items():
        if not key or not key.strip():
            issues.append(
                _issue(ValidationSeverity.error, "Property key cannot be empty", line, "properties")
            )
        if value is None:
            issues.append(
                _issue(
                    ValidationSeverity.error,
                    f'Property "{key}" is missing a value',
                    line,
                    "properties",
                )
            )


def _parse_properties(block: str, instance: ADInstance) -> None:
    properties: dict[str, str] = {}
    for pair in block.split("&"):
        stripped = pair.strip()
        # Empty pairs and trailing runs of '#' are padding, not properties.
        if not stripped or set(stripped) == {"#"}:
            continue
        eq = pair.find("=")
        if eq > 0:
            properties[pair[:eq]] = pair[eq + 1:]
        else:
            instance.issues.append(
                _issue(
                    ValidationSeverity.error,
                    f'Invalid property format: "{pair}" (expected key=value)',
                    instance.line_number,
                    "properties",
                )
            )
    instance.properties = properties


def parse_ad_line(line: str, line_number: int) -> ADInstance | None:
    """Parse and validate one AD line.

    Returns None for blank lines, comments and lines without ``##``; the
    caller records the latter two as unparsed.
    """
    trimmed = line.strip()
    if not trimmed or is_ad_comment(trimmed) or not has_ad_delimiter(trimmed):
        return None

    instance = ADInstance(line_number=line_number, raw_line=line)

    sections = trimmed.split(AD_PROPERTIES_DELIMITER)
    parts = sections[0].split(AD_DELIMITER)
    instance.id = parts[0]
    if len(parts) >= 2:
        instance.name = parts[1]
    if len(parts) >= 3:
        instance.description = parts[2]

    if len(sections) >= 2 and sections[1]:
        _parse_properties(sections[1], instance)

    validate_ad_instance(instance)
    return instance


def parse_ad_output(output: str) -> ADParseResult:
    """Parse Active Discovery output line by line."""
    instances: list[ADInstance] = []
    unparsed: list[UnparsedLine] = []

    for index, line in enumerate(output.split("\n")):
        line_number = index + 1
        trimmed = line.strip()
        if not trimmed:
            continue

        if is_ad_comment(trimmed):
            unparsed.append(
                UnparsedLine(line_number=line_number, content=line, reason=COMMENT_REASON)
            )
            continue

        if not has_ad_delimiter(trimmed):
            unparsed.append(
                UnparsedLine(
                    line_number=line_number, content=line, reason=MISSING_DELIMITER_REASON
                )
            )
            continue

        instance = parse_ad_line(line, line_number)
        if instance is not None:
            instances.append(instance)

    return ADParseResult(
        instances=instances,
        unparsed_lines=unparsed,
        summary=summarize(instances),
    )
