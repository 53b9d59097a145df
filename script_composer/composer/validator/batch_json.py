"""JSON BatchScript output parsing.

Batch scripts may print a single JSON document instead of ``key=value``
lines::

    {"data": {"<wildvalue>": {"values": {"metric": 1.5}}}}
    {"data": {"<wildvalue>": {"configuration": "..."}}}

The first form is a DataSource batch, the second a ConfigSource batch.
"""

from __future__ import annotations

import json
import logging
from typing import Any

from composer.validator.lines import check_identifier, invalid_number_issue, parse_number
from composer.validator.models import (
    CollectionDatapoint,
    CollectionParseResult,
    ValidationIssue,
    ValidationSeverity,
)
from composer.validator.summary import summarize

logger = logging.getLogger(__name__)

# JSON output has no per-metric source line; everything reports line 1.
JSON_LINE_NUMBER = 1

_CONFIG_WILDVALUE_INVALID_CHARS = frozenset(":#\\")


def _type_name(value: Any) -> str:
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, (int, float)):
        return "number"
    if isinstance(value, str):
        return "string"
    if isinstance(value, list):
        return "array"
    return "object"


def _raw_text(value: Any) -> str:
    return value if isinstance(value, str) else json.dumps(value)


def _metric_datapoint(wildvalue: str, metric: str, value: Any) -> CollectionDatapoint:
    issues = check_identifier(wildvalue, "Wildvalue", "wildvalue", JSON_LINE_NUMBER)
    number: float | None = None

    if isinstance(value, (int, float)) and not isinstance(value, bool):
        number = float(value)
    elif isinstance(value, str):
        number = parse_number(value)
        if number is None:
            issues.append(invalid_number_issue(value, JSON_LINE_NUMBER))
    else:
        issues.append(
            ValidationIssue(
                severity=ValidationSeverity.error,
                message=f"Value must be a number, got {_type_name(value)}",
                line_number=JSON_LINE_NUMBER,
                field="value",
            )
        )

    raw_value = _raw_text(value)
    return CollectionDatapoint(
        name=metric,
        value=number,
        raw_value=raw_value,
        wildvalue=wildvalue,
        issues=issues,
        line_number=JSON_LINE_NUMBER,
        raw_line=f"{wildvalue}.{metric}={raw_value}",
    )


def _config_datapoint(wildvalue: str, config: Any) -> CollectionDatapoint:
    issues: list[ValidationIssue] = []

    if any(ch.isspace() or ch in _CONFIG_WILDVALUE_INVALID_CHARS for ch in wildvalue):
        issues.append(
            ValidationIssue(
                severity=ValidationSeverity.error,
                message=f'Wildvalue "{wildvalue}" contains invalid characters (:, #, \\, or space)',
                line_number=JSON_LINE_NUMBER,
                field="wildvalue",
            )
        )

    if not isinstance(config, str):
        issues.append(
            ValidationIssue(
                severity=ValidationSeverity.error,
                message=f"Configuration must be a string, got {_type_name(config)}",
                line_number=JSON_LINE_NUMBER,
                field="value",
            )
        )
        preview = _raw_text(config)
    else:
        if not config.strip():
            issues.append(
                ValidationIssue(
                    severity=ValidationSeverity.warning,
                    message="Configuration is empty",
                    line_number=JSON_LINE_NUMBER,
                    field="value",
                )
            )
        preview = config[:50] + "..."

    return CollectionDatapoint(
        name="configuration",
        value=None,
        raw_value=_raw_text(config),
        wildvalue=wildvalue,
        issues=issues,
        line_number=JSON_LINE_NUMBER,
        raw_line=f"{wildvalue}.configuration={preview}",
    )


def parse_batch_json(output: str) -> CollectionParseResult | None:
    """Parse JSON BatchScript output.

    Returns None when *output* is not a JSON object with a ``data`` object,
    so the caller can fall back to line parsing.
    """
    trimmed = output.strip()
    if not trimmed.startswith("{"):
        return None

    try:
        parsed = json.loads(trimmed)
    except ValueError:
        return None

    data = parsed.get("data") if isinstance(parsed, dict) else None
    if not isinstance(data, dict):
        return None

    datapoints: list[CollectionDatapoint] = []
    for wildvalue, instance_data in data.items():
        if not isinstance(instance_data, dict):
            continue
        values = instance_data.get("values")
        if isinstance(values, dict):
            for metric, value in values.items():
                datapoints.append(_metric_datapoint(wildvalue, metric, value))
        elif "configuration" in instance_data:
            datapoints.append(_config_datapoint(wildvalue, instance_data["configuration"]))

    logger.debug(
        "Parsed JSON batch output: %d datapoints across %d instances",
        len(datapoints),
        len(data),
    )

    return CollectionParseResult(
        type="batchcollection",
        datapoints=datapoints,
        summary=summarize(datapoints),
        is_json_format=True,
    )
