"""Structural binding of switch values onto typed records.

A record type (dataclass, pydantic model or plain annotated class) is bound
through a binding table: one FieldBinding per declared field, carrying a
FieldKind type tag. The switch for a field is derived from its name, e.g.
field `output_path` is read from switch `-output-path` (or `--output-path` if
the single dash form is not present).

Copyright (C) 2025 Paulo Ferreira de Castro

Licensed under the Open Software License version 3.0, a copy of which can be
found in the LICENSE file.
"""

import dataclasses
import logging
import math
import struct
from dataclasses import dataclass
from enum import Enum
from types import NoneType, UnionType
from typing import Annotated, Any, ClassVar, Final, TypeVar, Union
from typing import get_args, get_origin, get_type_hints

from pydantic import BaseModel

from .error import BindingError, SwitchValueError
from .parser import SWITCH_PREFIX, ParseResult

T = TypeVar("T")

_LOGGER = logging.getLogger(__name__)


class FieldKind(Enum):
    FLAG = "flag"
    STRING = "string"
    INT8 = "int8"
    INT16 = "int16"
    INT32 = "int32"
    INT64 = "int64"
    FLOAT32 = "float32"
    FLOAT64 = "float64"
    STRING_LIST = "string_list"


_INT_BITS: Final = {
    FieldKind.INT8: 8,
    FieldKind.INT16: 16,
    FieldKind.INT32: 32,
    FieldKind.INT64: 64,
}

_PLAIN_KINDS: Final[dict[Any, FieldKind]] = {
    bool: FieldKind.FLAG,
    str: FieldKind.STRING,
    int: FieldKind.INT64,
    float: FieldKind.FLOAT64,
}


@dataclass(frozen=True)
class FieldBinding:
    field_name: str  # E.g. 'output_path'
    kind: FieldKind


def narrow_int(value: int, bits: int) -> int:
    """Wrap an integer to a signed two's complement width, e.g. 300 -> 44 for 8 bits."""
    value &= (1 << bits) - 1
    if value >= 1 << (bits - 1):
        value -= 1 << bits
    return value


def narrow_float32(value: float) -> float:
    """Round a double to the nearest single precision value."""
    try:
        return struct.unpack("f", struct.pack("f", value))[0]
    except OverflowError:
        return math.copysign(math.inf, value)


def field_kind(annotation: Any) -> FieldKind | None:
    """Map a field type annotation to a FieldKind, or None if not bindable.

    `Annotated[int, FieldKind.INT16]` selects a narrower integer width and
    `Optional[X]` is treated as `X`.
    """
    origin = get_origin(annotation)
    if origin is Annotated:
        base, *metadata = get_args(annotation)
        tags = [m for m in metadata if isinstance(m, FieldKind)]
        return tags[-1] if tags else field_kind(base)
    if origin in (Union, UnionType):
        args = [a for a in get_args(annotation) if a is not NoneType]
        return field_kind(args[0]) if len(args) == 1 else None
    if origin is list:
        return FieldKind.STRING_LIST if get_args(annotation) == (str,) else None
    return _PLAIN_KINDS.get(annotation)


def _declared_fields(target_type: type) -> list[tuple[str, Any]]:
    if issubclass(target_type, BaseModel):
        fields: list[tuple[str, Any]] = []
        for name, info in target_type.model_fields.items():
            annotation = info.annotation
            # pydantic moves Annotated extras into FieldInfo.metadata
            if info.metadata:
                annotation = Annotated[annotation, *info.metadata]
            fields.append((name, annotation))
        return fields
    hints = get_type_hints(target_type, include_extras=True)
    if dataclasses.is_dataclass(target_type):
        return [(f.name, hints[f.name]) for f in dataclasses.fields(target_type)]
    return [
        (name, hint) for name, hint in hints.items() if get_origin(hint) is not ClassVar
    ]


def make_bindings(target_type: type) -> list[FieldBinding]:
    """Build the binding table for the declared fields of `target_type`.

    Fields whose type has no FieldKind are left out of the table.
    """
    bindings: list[FieldBinding] = []
    for name, annotation in _declared_fields(target_type):
        kind = field_kind(annotation)
        if kind is None:
            _LOGGER.debug(
                "%s.%s: type %s is not bindable", target_type.__name__, name, annotation
            )
            continue
        bindings.append(FieldBinding(name, kind))
    return bindings


def switch_name_for(result: ParseResult, field_name: str) -> str:
    """Derive the switch name for a field: '-' + name with '_' replaced by '-'.

    If that switch is not present, an extra leading dash is prepended.
    """
    switch_name = SWITCH_PREFIX + field_name.replace("_", "-")
    if not result.is_switch_present(switch_name):
        switch_name = SWITCH_PREFIX + switch_name
    return switch_name


_UNSET: Final = object()


def _resolve(result: ParseResult, kind: FieldKind, switch_name: str) -> Any:
    """Resolve the value for one binding, or _UNSET to leave the field as is."""
    match kind:
        case FieldKind.FLAG:
            return result.is_switch_present(switch_name)
        case FieldKind.STRING:
            value, _ = result.switch_value(switch_name)
        case FieldKind.INT8 | FieldKind.INT16 | FieldKind.INT32 | FieldKind.INT64:
            value, _ = result.switch_long_value(switch_name)
            if value is not None:
                value = narrow_int(value, _INT_BITS[kind])
        case FieldKind.FLOAT32:
            value, _ = result.switch_double_value(switch_name)
            if value is not None:
                value = narrow_float32(value)
        case FieldKind.FLOAT64:
            value, _ = result.switch_double_value(switch_name)
        case FieldKind.STRING_LIST:
            values, _ = result.switch_values(switch_name)
            return values if values else _UNSET
    return _UNSET if value is None else value


def bind_struct(
    result: ParseResult,
    target_type: type[T],
    bindings: list[FieldBinding] | None = None,
) -> T:
    """Instantiate `target_type` with no arguments and populate its fields.

    Args:
        result: The classified command line. It is read but not updated, so
            values claimed here do not disappear from the targets.
        target_type: Record type with a no-argument constructor.
        bindings: Explicit binding table; by default make_bindings(target_type).

    Raises:
        BindingError: The type cannot be instantiated without arguments, or a
            field refused assignment. The instance may be partially populated.
        SwitchValueError: A numeric field's switch value is not a number.
    """
    if bindings is None:
        bindings = make_bindings(target_type)
    try:
        instance = target_type()
    except Exception as e:
        raise BindingError(target_type, "cannot instantiate without arguments") from e

    for binding in bindings:
        switch_name = switch_name_for(result, binding.field_name)
        try:
            value = _resolve(result, binding.kind, switch_name)
        except SwitchValueError as e:
            e.add_note(f"Field '{binding.field_name}'")
            raise
        if value is _UNSET:
            continue
        _LOGGER.debug(
            "Binding switch '%s' to %s.%s = %r",
            switch_name,
            target_type.__name__,
            binding.field_name,
            value,
        )
        try:
            setattr(instance, binding.field_name, value)
        except (AttributeError, TypeError, ValueError) as e:
            raise BindingError(
                target_type, f"cannot assign field '{binding.field_name}'"
            ) from e

    return instance
