"""Command-line switch and target parser.

A command line is broken down into switches and targets. A switch is any
token that starts with a dash, such as `-d` or `--debug`. The token(s) that
follow a switch may be claimed as its value(s), and whatever is left unclaimed
is a target. For example, given `-d report.txt --laf Nimbus`:

- `is_switch_present("-d")` is True.
- `get_switch_value("--laf")` is "Nimbus".
- `get_targets()` is ["report.txt"] until `get_switch_value("-d")` claims it.

Copyright (C) 2025 Paulo Ferreira de Castro

Licensed under the Open Software License version 3.0, a copy of which can be
found in the LICENSE file.
"""

import logging
import re
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field, replace
from types import MappingProxyType
from typing import TYPE_CHECKING, Final, TypeVar

from .error import SwitchValueError

T = TypeVar("T")

if TYPE_CHECKING:
    from .binder import FieldBinding

_LOGGER = logging.getLogger(__name__)

SWITCH_PREFIX: Final = "-"

# Optional sign and ASCII digits only (no whitespace or underscores).
_INTEGER_RE: Final = re.compile(r"[+-]?[0-9]+")
_INT64_MIN: Final = -(2**63)
_INT64_MAX: Final = 2**63 - 1

# Decimal digits with optional fraction and exponent, or NaN / Infinity.
_REAL_RE: Final = re.compile(
    r"(?P<sign>[+-]?)"
    r"(?P<number>NaN|Infinity"
    r"|(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:[eE][+-]?[0-9]+)?[fFdD]?)"
)


def is_switch(token: str) -> bool:
    """Return whether the token looks like a switch (no further validation)."""
    return token.startswith(SWITCH_PREFIX)


def parse_long(switch_name: str, text: str) -> int:
    if _INTEGER_RE.fullmatch(text):
        value = int(text)
        if _INT64_MIN <= value <= _INT64_MAX:
            return value
    raise SwitchValueError(switch_name, text, "64-bit integer")


def parse_double(switch_name: str, text: str) -> float:
    """Parse a decimal real number such as '2.5', '-1e3', '.5', '7d' or 'Infinity'.

    Surrounding whitespace and a trailing 'f'/'d' type suffix are allowed.
    Underscores, 'inf', 'nan' and hexadecimal notation are rejected.
    """
    match = _REAL_RE.fullmatch(text.strip())
    if not match:
        raise SwitchValueError(switch_name, text, "real number")
    sign, number = match.group("sign"), match.group("number")
    if number == "NaN":
        return float("nan")
    if number == "Infinity":
        return float(f"{sign}inf")
    return float(sign + number.rstrip("fFdD"))


@dataclass(frozen=True)
class ParseResult:
    """One generation of classification state for a token sequence.

    Instances are immutable. Resolver methods return the resolved value
    together with a new ParseResult whose consumed set includes the claimed
    positions.

    Build instances with classify(), which guarantees that every switch is
    indexed and consumed. The constructor does not check it.
    """

    tokens: tuple[str, ...]
    # Switch name -> index of its most recent occurrence. Derived from the
    # tokens, so it takes part in equality but not in the hash.
    switch_indices: Mapping[str, int] = field(
        default_factory=lambda: MappingProxyType({}), hash=False
    )
    # Positions owned by a switch: the switch tokens plus any claimed values.
    consumed: frozenset[int] = frozenset()

    def is_switch_present(self, switch_name: str) -> bool:
        return switch_name in self.switch_indices

    def _consume(self, *indices: int) -> "ParseResult":
        if not indices or self.consumed.issuperset(indices):
            return self
        return replace(self, consumed=self.consumed.union(indices))

    def switch_value(
        self, switch_name: str, default: str | None = None
    ) -> tuple[str | None, "ParseResult"]:
        """Resolve the token right after the switch.

        The following token is claimed even if it looks like another switch.
        That switch stays resolvable through its own index entry.
        """
        idx = self.switch_indices.get(switch_name)
        if idx is None:
            return default, self
        if idx + 1 < len(self.tokens):
            return self.tokens[idx + 1], self._consume(idx + 1)
        return default, self

    def switch_values(self, switch_name: str) -> tuple[list[str], "ParseResult"]:
        """Resolve all consecutive non-switch tokens after the switch."""
        idx = self.switch_indices.get(switch_name)
        if idx is None:
            return [], self
        end = idx + 1
        while end < len(self.tokens) and not is_switch(self.tokens[end]):
            end += 1
        return list(self.tokens[idx + 1 : end]), self._consume(*range(idx + 1, end))

    def switch_long_value(
        self, switch_name: str, default: int | None = None
    ) -> tuple[int | None, "ParseResult"]:
        text, result = self.switch_value(switch_name)
        if text is None:
            return default, result
        return parse_long(switch_name, text), result

    def switch_double_value(
        self, switch_name: str, default: float | None = None
    ) -> tuple[float | None, "ParseResult"]:
        text, result = self.switch_value(switch_name)
        if text is None:
            return default, result
        return parse_double(switch_name, text), result

    def targets(self) -> list[str]:
        return [
            token for idx, token in enumerate(self.tokens) if idx not in self.consumed
        ]


def classify(tokens: Iterable[str]) -> ParseResult:
    """Scan the tokens once and record the most recent index of every switch.

    A single string is rejected rather than split into characters: pass
    ["-ab"], not "-ab".
    """
    if isinstance(tokens, str):
        raise TypeError(
            f"Expected a sequence of argument strings, got the string '{tokens}'"
        )
    token_tuple = tuple(tokens)
    switch_indices: dict[str, int] = {}
    switch_positions: list[int] = []
    for idx, token in enumerate(token_tuple):
        if is_switch(token):
            # A repeated switch overwrites the earlier index, but both
            # positions stay consumed.
            switch_indices[token] = idx
            switch_positions.append(idx)
    _LOGGER.debug(
        "Classified %d tokens: %d distinct switches %s",
        len(token_tuple),
        len(switch_indices),
        list(switch_indices),
    )
    return ParseResult(
        tokens=token_tuple,
        switch_indices=MappingProxyType(switch_indices),
        consumed=frozenset(switch_positions),
    )


class ArgumentParser:
    """Stateful convenience wrapper that owns one ParseResult at a time.

    Not safe for concurrent use: resolver calls replace the owned result.
    Use one instance per thread or share ParseResult objects instead.
    """

    def __init__(self, args: Iterable[str] = ()):
        self._result = classify(args)

    def parse(self, args: Iterable[str]):
        """Discard the current state and classify a new token sequence."""
        self._result = classify(args)

    @property
    def result(self) -> ParseResult:
        return self._result

    @property
    def arguments(self) -> tuple[str, ...]:
        return self._result.tokens

    def get_argument(self, idx: int) -> str:
        tokens = self._result.tokens
        if not 0 <= idx < len(tokens):
            raise IndexError(
                f"Argument index {idx} out of range for {len(tokens)} argument(s)"
            )
        return tokens[idx]

    def is_switch_present(self, switch_name: str) -> bool:
        return self._result.is_switch_present(switch_name)

    def get_switch_value(
        self, switch_name: str, default: str | None = None
    ) -> str | None:
        value, self._result = self._result.switch_value(switch_name, default)
        return value

    def get_switch_values(self, switch_name: str) -> list[str]:
        values, self._result = self._result.switch_values(switch_name)
        return values

    def get_switch_long_value(
        self, switch_name: str, default: int | None = None
    ) -> int | None:
        value, self._result = self._result.switch_long_value(switch_name, default)
        return value

    def get_switch_double_value(
        self, switch_name: str, default: float | None = None
    ) -> float | None:
        value, self._result = self._result.switch_double_value(switch_name, default)
        return value

    def get_targets(self) -> list[str]:
        return self._result.targets()

    def bind_struct(
        self, target_type: type[T], bindings: "list[FieldBinding] | None" = None
    ) -> T:
        """Populate a new `target_type` instance from the switch values.

        See binder.bind_struct(). The parser's consumed set is not changed.
        """
        from .binder import bind_struct

        return bind_struct(self._result, target_type, bindings)
