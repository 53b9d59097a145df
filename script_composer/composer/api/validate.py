"""Validate API: parse raw script output into annotated records."""

from __future__ import annotations

import logging
from typing import Literal

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, Field

from composer.deps import get_settings
from composer.settings import ComposerSettings
from composer.validator import (
    ModuleType,
    ParseOptions,
    ParseResult,
    ScriptMode,
    ValidationIssue,
    ValidationSeverity,
    get_all_issues,
    get_issues_by_severity,
    has_errors,
    has_warnings,
    parse_output,
)
from composer.validator.models import ScriptLanguage

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["validate"])


class ValidateRequest(BaseModel):
    output: str = Field(..., description="Raw text produced by the script execution")
    mode: ScriptMode | None = Field(
        None, description="Script mode; defaults to the configured default mode"
    )
    module_type: ModuleType | None = None
    script_type: Literal["ad", "collection"] | None = None
    language: ScriptLanguage | None = None
    detect_script_errors: bool | None = None


class ValidateResponse(BaseModel):
    mode: ScriptMode
    result: ParseResult | None = None
    has_errors: bool = False
    has_warnings: bool = False


class IssuesRequest(ValidateRequest):
    severity: ValidationSeverity | None = None


class IssuesResponse(BaseModel):
    mode: ScriptMode
    issues: list[ValidationIssue] = Field(default_factory=list)
    count: int = 0


def _parse(body: ValidateRequest, settings: ComposerSettings) -> tuple[ScriptMode, ParseResult | None]:
    if len(body.output) > settings.max_output_chars:
        raise HTTPException(
            status_code=413,
            detail=f"Output exceeds maximum of {settings.max_output_chars} characters",
        )

    options = ParseOptions(
        mode=body.mode or settings.default_mode,
        module_type=body.module_type,
        script_type=body.script_type,
        detect_script_errors=(
            settings.detect_script_errors
            if body.detect_script_errors is None
            else body.detect_script_errors
        ),
    )
    result = parse_output(body.output, options)
    logger.info(
        "Validated %d chars of %s output (language=%s, module=%s)",
        len(body.output),
        options.mode.value,
        body.language.value if body.language else "-",
        options.module_type.value if options.module_type else "-",
    )
    return options.mode, result


@router.post("/validate", response_model=ValidateResponse)
async def validate_output(
    body: ValidateRequest,
    settings: ComposerSettings = Depends(get_settings),
) -> ValidateResponse:
    """Parse script output; free-form output returns ``result: null``."""
    mode, result = _parse(body, settings)
    if result is None:
        return ValidateResponse(mode=mode)
    return ValidateResponse(
        mode=mode,
        result=result,
        has_errors=has_errors(result),
        has_warnings=has_warnings(result),
    )


@router.post("/validate/issues", response_model=IssuesResponse)
async def list_issues(
    body: IssuesRequest,
    settings: ComposerSettings = Depends(get_settings),
) -> IssuesResponse:
    """Return the flattened issue list, optionally filtered by severity."""
    mode, result = _parse(body, settings)
    if result is None:
        return IssuesResponse(mode=mode)
    if body.severity is None:
        issues = get_all_issues(result)
    else:
        issues = get_issues_by_severity(result, body.severity)
    return IssuesResponse(mode=mode, issues=issues, count=len(issues))


@router.get("/modes")
async def list_modes() -> dict[str, list[str]]:
    """List the supported script modes, module types and languages."""
    return {
        "modes": [m.value for m in ScriptMode],
        "module_types": [t.value for t in ModuleType],
        "languages": [lang.value for lang in ScriptLanguage],
    }
