"""Summary aggregation over parsed records."""

from __future__ import annotations

from typing import Iterable, Protocol, Sequence

from composer.validator.models import ParseSummary, ValidationIssue, ValidationSeverity


class HasIssues(Protocol):
    issues: list[ValidationIssue]


def count_severity(issues: Iterable[ValidationIssue], severity: ValidationSeverity) -> int:
    return sum(1 for issue in issues if issue.severity == severity)


def summarize(records: Sequence[HasIssues]) -> ParseSummary:
    """Reduce *records* to totals.

    A record is valid when it carries no error-level issue; warnings and
    info never affect validity. Always computed from scratch.
    """
    valid = 0
    errors = 0
    warnings = 0
    for record in records:
        record_errors = count_severity(record.issues, ValidationSeverity.error)
        if record_errors == 0:
            valid += 1
        errors += record_errors
        warnings += count_severity(record.issues, ValidationSeverity.warning)

    return ParseSummary(total=len(records), valid=valid, errors=errors, warnings=warnings)
