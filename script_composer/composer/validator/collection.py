"""Collection and BatchCollection output parsing.

Collection scripts print ``datapoint=value`` per line; batch scripts prefix
every key with the instance wildvalue: ``wildvalue.datapoint=value``.
"""

from __future__ import annotations

from composer.validator.batch_json import parse_batch_json
from composer.validator.lines import (
    COLLECTION_DELIMITER,
    COMMENT_REASON,
    check_identifier,
    invalid_number_issue,
    is_comment,
    is_standard_datapoint_name,
    parse_number,
    split_first,
)
from composer.validator.models import (
    CollectionDatapoint,
    CollectionParseResult,
    UnparsedLine,
    ValidationIssue,
    ValidationSeverity,
)
from composer.validator.summary import summarize

MISSING_DELIMITER_REASON = "Does not match collection format (missing = delimiter)"
WILDVALUE_PREFIX_REQUIRED = (
    "Batchscript output requires wildvalue prefix (format: wildvalue.datapoint=value)"
)


def parse_collection_line(
    line: str, line_number: int, batch: bool
) -> CollectionDatapoint | None:
    """Parse and validate one collection line.

    Returns None for blank lines, comments and lines without a usable ``=``.
    """
    trimmed = line.strip()
    if not trimmed or is_comment(trimmed):
        return None

    split = split_first(trimmed, COLLECTION_DELIMITER)
    if split is None:
        return None
    key, raw_value = split

    datapoint = CollectionDatapoint(
        name=key, raw_value=raw_value, line_number=line_number, raw_line=line
    )

    if batch:
        prefixed = split_first(key, ".")
        if prefixed is not None:
            datapoint.wildvalue, datapoint.name = prefixed
            datapoint.issues.extend(
                check_identifier(datapoint.wildvalue, "Wildvalue", "wildvalue", line_number)
            )
        else:
            datapoint.issues.append(
                ValidationIssue(
                    severity=ValidationSeverity.error,
                    message=WILDVALUE_PREFIX_REQUIRED,
                    line_number=line_number,
                    field="name",
                )
            )

    value = parse_number(raw_value)
    if value is None:
        datapoint.issues.append(invalid_number_issue(raw_value, line_number))
    else:
        datapoint.value = value

    if not is_standard_datapoint_name(datapoint.name):
        datapoint.issues.append(
            ValidationIssue(
                severity=ValidationSeverity.warning,
                message=f'Datapoint name "{datapoint.name}" contains non-standard characters',
                line_number=line_number,
                field="name",
            )
        )

    return datapoint


def parse_collection_lines(output: str, batch: bool) -> CollectionParseResult:
    """Parse ``key=value`` output line by line."""
    datapoints: list[CollectionDatapoint] = []
    unparsed: list[UnparsedLine] = []

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

        datapoint = parse_collection_line(line, line_number, batch)
        if datapoint is None:
            # No '=' at all, or '=' in first position (empty key).
            unparsed.append(
                UnparsedLine(
                    line_number=line_number, content=line, reason=MISSING_DELIMITER_REASON
                )
            )
            continue
        datapoints.append(datapoint)

    return CollectionParseResult(
        type="batchcollection" if batch else "collection",
        datapoints=datapoints,
        unparsed_lines=unparsed,
        summary=summarize(datapoints),
    )


def parse_collection_output(output: str, batch: bool = False) -> CollectionParseResult:
    """Parse Collection output; batch output may also arrive as a JSON document."""
    if batch:
        json_result = parse_batch_json(output)
        if json_result is not None:
            return json_result
    return parse_collection_lines(output, batch)
