"""Exception classes and supporting error formatting functions.

Copyright (C) 2025 Paulo Ferreira de Castro

Licensed under the Open Software License version 3.0, a copy of which can be
found in the LICENSE file.
"""


class SwitchParserError(Exception):
    pass


class SwitchValueError(SwitchParserError, ValueError):
    """A switch value could not be converted to the requested numeric type."""

    def __init__(self, switch_name: str, text: str, type_name: str):
        super().__init__(
            f"Value ‘{text}’ of switch ‘{switch_name}’ cannot be parsed as a {type_name}"
        )
        self.switch_name = switch_name
        self.text = text


class BindingError(SwitchParserError):
    """A target type could not be instantiated or populated from switches."""

    def __init__(self, target_type: type, reason: str):
        super().__init__(f"Error binding switches to ‘{target_type.__name__}’: {reason}")
        self.target_type = target_type


class ConfigError(SwitchParserError):
    pass


def fmt_exception(exc: BaseException, header="", indent="    ") -> str:
    """Produce a summary string with one exception per line, following the
    chain of explicit causes (`raise ... from ...`).

    Sample output given header="Exiting with exceptions:":

    Exiting with exceptions:
    ConfigError: Invalid environment configuration (SWITCH_PARSER_INDENT)
        └> ValidationError: 1 validation error for ReportConfig
    """

    def fmt_notes(e: BaseException):
        notes: list[str] = getattr(e, "__notes__", [])
        return " (" + ") (".join(notes) + ")" if notes else ""

    result: list[str] = []
    level = 0
    current: BaseException | None = exc
    while current is not None:
        prefix = indent * level + ("└> " if level else "")
        result.append(f"{prefix}{type(current).__name__}: {current}{fmt_notes(current)}")
        current = current.__cause__
        level += 1

    if header:
        if len(result) > 1:
            result.insert(0, header)
        else:
            result[0] = header + " " + result[0]

    return "\n".join(result)
