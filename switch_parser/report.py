"""JSON report of how a command line is classified into switches and targets.

Copyright (C) 2025 Paulo Ferreira de Castro

Licensed under the Open Software License version 3.0, a copy of which can be
found in the LICENSE file.
"""

import logging
from collections.abc import Iterable

from pydantic import BaseModel

from .config import ReportConfig
from .parser import ParseResult, classify

_LOGGER = logging.getLogger(__name__)


class SwitchReport(BaseModel):
    name: str  # E.g. '--laf'
    index: int  # Position of the last occurrence
    value: str | None  # Single-value resolver result
    values: list[str]  # Multi-value resolver result


class ParseReport(BaseModel):
    tokens: list[str]
    switches: list[SwitchReport]
    targets: list[str]


def _claim_values(result: ParseResult, value_mode: str) -> ParseResult:
    for name in result.switch_indices:
        if value_mode == "single":
            _, result = result.switch_value(name)
        elif value_mode == "multi":
            _, result = result.switch_values(name)
    return result


def make_report(tokens: Iterable[str], config: ReportConfig) -> ParseReport:
    classified = classify(tokens)
    switches = [
        SwitchReport(
            name=name,
            index=index,
            value=classified.switch_value(name)[0],
            values=classified.switch_values(name)[0],
        )
        for name, index in sorted(
            classified.switch_indices.items(), key=lambda item: item[1]
        )
    ]
    claimed = _claim_values(classified, config.value_mode)
    _LOGGER.info(
        "Value mode '%s' claimed %d of %d tokens",
        config.value_mode,
        len(claimed.consumed),
        len(claimed.tokens),
    )
    return ParseReport(
        tokens=list(classified.tokens),
        switches=switches,
        targets=claimed.targets(),
    )


def format_report(report: ParseReport, config: ReportConfig) -> str:
    return report.model_dump_json(indent=config.indent or None)
