"""Validation data models for script output."""

from __future__ import annotations

from enum import Enum
from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, ConfigDict, Field


class ValidationSeverity(str, Enum):
    """Severity level for validation issues."""

    error = "error"
    warning = "warning"
    info = "info"


class ScriptMode(str, Enum):
    """Output mode a script is executed in."""

    ad = "ad"
    collection = "collection"
    batchcollection = "batchcollection"
    freeform = "freeform"


class ScriptLanguage(str, Enum):
    groovy = "groovy"
    powershell = "powershell"


class ModuleType(str, Enum):
    """Logic module type a collection script belongs to."""

    datasource = "datasource"
    configsource = "configsource"
    topologysource = "topologysource"
    eventsource = "eventsource"
    propertysource = "propertysource"
    logsource = "logsource"


class ParseOptions(BaseModel):
    """How a piece of script output should be interpreted."""

    mode: ScriptMode
    module_type: ModuleType | None = None
    script_type: Literal["ad", "collection"] | None = None
    detect_script_errors: bool = False


class ValidationIssue(BaseModel):
    """A single validation finding attached to one parsed record."""

    model_config = ConfigDict(frozen=True)

    severity: ValidationSeverity
    message: str
    line_number: int
    field: str | None = None


class UnparsedLine(BaseModel):
    """A source line excluded from record parsing."""

    line_number: int
    content: str
    reason: str


class ParseSummary(BaseModel):
    total: int = 0
    valid: int = 0
    errors: int = 0
    warnings: int = 0


# -- Line-oriented records --


class ADInstance(BaseModel):
    """One Active Discovery instance line."""

    id: str = ""
    name: str = ""
    description: str | None = None
    properties: dict[str, str] | None = None
    issues: list[ValidationIssue] = Field(default_factory=list)
    line_number: int
    raw_line: str


class CollectionDatapoint(BaseModel):
    """One Collection / BatchCollection output line."""

    name: str
    value: float | None = None
    raw_value: str
    wildvalue: str | None = None
    issues: list[ValidationIssue] = Field(default_factory=list)
    line_number: int
    raw_line: str


class PropertyEntry(BaseModel):
    name: str
    value: str
    issues: list[ValidationIssue] = Field(default_factory=list)
    line_number: int
    raw_line: str


class EventEntry(BaseModel):
    happened_on: str | None = None
    severity: str | None = None
    message: str | None = None
    source: str | None = None
    properties: dict[str, Any] | None = None
    issues: list[ValidationIssue] = Field(default_factory=list)
    line_number: int
    raw_line: str


class LogEntry(BaseModel):
    timestamp: str | None = None
    message: str
    issues: list[ValidationIssue] = Field(default_factory=list)
    line_number: int
    raw_line: str


class TopologyVertex(BaseModel):
    id: str
    name: str | None = None
    type: str | None = None
    properties: dict[str, Any] | None = None
    issues: list[ValidationIssue] = Field(default_factory=list)


class TopologyEdge(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    from_: str = Field("", alias="from")
    to: str = ""
    type: str | None = None
    display_type: str | None = None
    from_instance: str | None = None
    to_instance: str | None = None
    from_instance_edge_type: str | None = None
    to_instance_edge_type: str | None = None
    instance_edge_type: str | None = None
    health_data: dict[str, Any] | None = None
    meta_data: dict[str, Any] | None = None
    metric_reporting_node: str | None = None
    issues: list[ValidationIssue] = Field(default_factory=list)


# -- Parse results (tagged on ``type``) --


class ADParseResult(BaseModel):
    type: Literal["ad"] = "ad"
    instances: list[ADInstance] = Field(default_factory=list)
    unparsed_lines: list[UnparsedLine] = Field(default_factory=list)
    summary: ParseSummary = Field(default_factory=ParseSummary)


class CollectionParseResult(BaseModel):
    type: Literal["collection", "batchcollection"] = "collection"
    datapoints: list[CollectionDatapoint] = Field(default_factory=list)
    unparsed_lines: list[UnparsedLine] = Field(default_factory=list)
    summary: ParseSummary = Field(default_factory=ParseSummary)
    is_json_format: bool = False


class PropertyParseResult(BaseModel):
    type: Literal["property"] = "property"
    properties: list[PropertyEntry] = Field(default_factory=list)
    unparsed_lines: list[UnparsedLine] = Field(default_factory=list)
    summary: ParseSummary = Field(default_factory=ParseSummary)


class EventParseResult(BaseModel):
    type: Literal["event"] = "event"
    events: list[EventEntry] = Field(default_factory=list)
    unparsed_lines: list[UnparsedLine] = Field(default_factory=list)
    summary: ParseSummary = Field(default_factory=ParseSummary)


class LogParseResult(BaseModel):
    type: Literal["log"] = "log"
    entries: list[LogEntry] = Field(default_factory=list)
    unparsed_lines: list[UnparsedLine] = Field(default_factory=list)
    summary: ParseSummary = Field(default_factory=ParseSummary)


class TopologyParseResult(BaseModel):
    type: Literal["topology"] = "topology"
    vertices: list[TopologyVertex] = Field(default_factory=list)
    edges: list[TopologyEdge] = Field(default_factory=list)
    unparsed_lines: list[UnparsedLine] = Field(default_factory=list)
    summary: ParseSummary = Field(default_factory=ParseSummary)


class ConfigParseResult(BaseModel):
    type: Literal["config"] = "config"
    content: str = ""
    issues: list[ValidationIssue] = Field(default_factory=list)
    summary: ParseSummary = Field(default_factory=ParseSummary)


class ScriptErrorParseResult(BaseModel):
    type: Literal["script_error"] = "script_error"
    error_message: str
    output: str = ""
    issues: list[ValidationIssue] = Field(default_factory=list)
    summary: ParseSummary = Field(default_factory=ParseSummary)


ParseResult = Annotated[
    Union[
        ADParseResult,
        CollectionParseResult,
        PropertyParseResult,
        EventParseResult,
        LogParseResult,
        TopologyParseResult,
        ConfigParseResult,
        ScriptErrorParseResult,
    ],
    Field(discriminator="type"),
]
