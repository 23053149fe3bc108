"""Configuration model for the switch_parser command-line report tool.

Copyright (C) 2025 Paulo Ferreira de Castro

Licensed under the Open Software License version 3.0, a copy of which can be
found in the LICENSE file.
"""

import os
from collections.abc import Mapping
from typing import Annotated, Final, Literal, TypeVar

from pydantic import BaseModel, Field, ValidationError, field_validator

from .error import ConfigError

T = TypeVar("T")

ENV_PREFIX: Final = "SWITCH_PARSER_"


class ReportConfig(BaseModel):
    # log_level: Logging level of the messages written to stderr.
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "WARNING"
    # value_mode: Resolver applied to every switch before the targets are
    # computed. 'single' claims one token per switch, 'multi' claims all
    # consecutive non-switch tokens, 'none' claims nothing.
    value_mode: Literal["single", "multi", "none"] = "multi"
    # indent: JSON report indentation (0 for a compact single line).
    indent: Annotated[int, Field(ge=0)] = 2

    @field_validator("log_level", mode="before")
    @classmethod
    def upper_case(cls, value: T) -> T:
        return value.upper() if isinstance(value, str) else value

    @field_validator("value_mode", mode="before")
    @classmethod
    def lower_case(cls, value: T) -> T:
        return value.lower() if isinstance(value, str) else value


def load_config(environ: Mapping[str, str] | None = None) -> ReportConfig:
    """Build a ReportConfig from SWITCH_PARSER_* environment variables.

    Example: SWITCH_PARSER_VALUE_MODE=single -> ReportConfig.value_mode.
    Unset or blank variables keep the field default.
    """
    if environ is None:
        environ = os.environ
    settings: dict[str, str] = {}
    for name in ReportConfig.model_fields:
        env_name = f"{ENV_PREFIX}{name.upper()}"
        env_str = environ.get(env_name, "").strip()
        if env_str:
            settings[name] = env_str
    try:
        return ReportConfig(**settings)
    except ValidationError as e:
        env_names = ", ".join(f"{ENV_PREFIX}{name.upper()}" for name in settings)
        raise ConfigError(
            f"Invalid environment configuration ({env_names}):\n{e}"
        ) from e
