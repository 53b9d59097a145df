"""Output pipeline: strips the warning preamble and routes output to a parser."""

from __future__ import annotations

import logging

from composer.validator.active_discovery import parse_ad_output
from composer.validator.collection import parse_collection_output
from composer.validator.lines import strip_preamble
from composer.validator.models import ModuleType, ParseOptions, ParseResult, ScriptMode
from composer.validator.module_sources import (
    parse_config_output,
    parse_event_output,
    parse_log_output,
    parse_property_output,
    parse_topology_output,
)
from composer.validator.script_error import detect_script_error

logger = logging.getLogger(__name__)

_MODULE_PARSERS = {
    ModuleType.propertysource: parse_property_output,
    ModuleType.eventsource: parse_event_output,
    ModuleType.logsource: parse_log_output,
    ModuleType.topologysource: parse_topology_output,
    ModuleType.configsource: parse_config_output,
}


def _as_options(mode_or_options: ParseOptions | ScriptMode | str) -> ParseOptions:
    if isinstance(mode_or_options, ParseOptions):
        return mode_or_options
    return ParseOptions(mode=ScriptMode(mode_or_options))


def parse_output(
    output: str, mode_or_options: ParseOptions | ScriptMode | str
) -> ParseResult | None:
    """Parse raw script output according to the script mode.

    Order: 1. free-form short-circuit → 2. optional script error detection →
    3. preamble stripping → 4. mode/module routing.
    Free-form output carries no structure and yields None.
    """
    options = _as_options(mode_or_options)

    if options.mode == ScriptMode.freeform:
        return None

    if options.detect_script_errors:
        script_error = detect_script_error(output)
        if script_error is not None:
            logger.debug("Script error detected: %s", script_error.error_message)
            return script_error

    clean_output = strip_preamble(output)

    if options.mode == ScriptMode.ad:
        result = parse_ad_output(clean_output)
    elif options.mode == ScriptMode.batchcollection:
        result = parse_collection_output(clean_output, batch=True)
    elif (
        options.module_type in _MODULE_PARSERS
        and options.script_type == "collection"
    ):
        result = _MODULE_PARSERS[options.module_type](clean_output)
    else:
        result = parse_collection_output(clean_output, batch=False)

    logger.debug(
        "Parsed %s output: total=%d valid=%d errors=%d warnings=%d",
        result.type,
        result.summary.total,
        result.summary.valid,
        result.summary.errors,
        result.summary.warnings,
    )
    return result
