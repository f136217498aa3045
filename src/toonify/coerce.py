"""Coercion of decoded Value Model trees into typed destinations.

A destination type hint is compiled once into a :class:`Shape` descriptor
(cached per type), which the coercion walk then dispatches on::

    @dataclass
    class User:
        id: int
        name: str = field(metadata={"toon": "userName"})

    coerce({"id": "7", "USERNAME": "Ada"}, User)  # User(id=7, name='Ada')
"""

import collections.abc
import dataclasses
import functools
import logging
import math
import types
import typing
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from .errors import TypeMismatchError, UnknownFieldError
from .primitives import format_number, try_parse_number
from .string_utils import is_integer_literal
from .types import JsonValue, ValueKind, kind_of

logger = logging.getLogger(__name__)

BOOL_LITERALS = {
    "1": True,
    "t": True,
    "T": True,
    "TRUE": True,
    "true": True,
    "True": True,
    "0": False,
    "f": False,
    "F": False,
    "FALSE": False,
    "false": False,
    "False": False,
}

SEQUENCE_ORIGINS = {
    list: list,
    set: set,
    frozenset: frozenset,
    collections.abc.Sequence: list,
    collections.abc.MutableSequence: list,
    collections.abc.Iterable: list,
    collections.abc.Set: frozenset,
    collections.abc.MutableSet: set,
}

MAPPING_ORIGINS = (dict, collections.abc.Mapping, collections.abc.MutableMapping)


class ShapeKind(Enum):
    ANY = "any"
    STRING = "str"
    BOOL = "bool"
    INT = "int"
    FLOAT = "float"
    SEQUENCE = "sequence"
    TUPLE = "tuple"
    MAPPING = "mapping"
    RECORD = "record"
    OPTIONAL = "optional"


@dataclass(frozen=True, eq=False)
class FieldShape:
    """A record field: attribute name, external name and destination type."""

    attr: str
    name: str
    hint: Any
    has_default: bool
    settable: bool

    @property
    def shape(self) -> "Shape":
        # Resolved lazily so self-referencing records compile.
        return compile_shape(self.hint)


@dataclass(frozen=True, eq=False)
class Shape:
    """A compiled destination type."""

    kind: ShapeKind
    python_type: Any = None
    items: tuple["Shape", ...] = ()
    fields: tuple[FieldShape, ...] = ()
    lookup: dict[str, FieldShape] = field(default_factory=dict, repr=False)

    @property
    def is_scalar(self) -> bool:
        return self.kind in (ShapeKind.STRING, ShapeKind.BOOL, ShapeKind.INT, ShapeKind.FLOAT)

    @property
    def is_sequence(self) -> bool:
        return self.kind in (ShapeKind.SEQUENCE, ShapeKind.TUPLE)

    @property
    def is_mapping(self) -> bool:
        return self.kind is ShapeKind.MAPPING

    @property
    def is_record(self) -> bool:
        return self.kind is ShapeKind.RECORD

    def describe(self) -> str:
        if self.kind is ShapeKind.OPTIONAL:
            return f"optional {self.items[0].describe()}"
        if isinstance(self.python_type, type):
            return self.python_type.__name__
        return self.kind.value


ANY = Shape(ShapeKind.ANY)


def field_name(f: dataclasses.Field) -> str:
    """The external name of a dataclass field: ``toon`` or ``json`` metadata, else its name."""
    return f.metadata.get("toon") or f.metadata.get("json") or f.name


@functools.lru_cache(maxsize=None)
def compile_shape(destination: Any) -> Shape:
    """
    Compile a destination type hint into a :class:`Shape`.

    Supported: ``Any``/``object``, ``str``, ``bool``, ``int``, ``float``,
    lists, sets, tuples (variable or fixed length), dicts, ``Optional[T]``
    and dataclasses.

    Raises:
        TypeMismatchError: For destination types with no coercion rules.
    """
    if destination is Any or destination is object:
        return ANY

    scalar_kinds = {str: ShapeKind.STRING, bool: ShapeKind.BOOL, int: ShapeKind.INT, float: ShapeKind.FLOAT}
    if destination in scalar_kinds:
        return Shape(scalar_kinds[destination], destination)

    origin = typing.get_origin(destination) or destination
    args = typing.get_args(destination)

    if origin is typing.Union or origin is types.UnionType:
        members = [a for a in args if a is not type(None)]
        if len(members) == 1 and len(members) < len(args):
            return Shape(ShapeKind.OPTIONAL, items=(compile_shape(members[0]),))
        raise TypeMismatchError(f"Unsupported destination type: {destination!r}")

    if origin is tuple:
        if not args:
            return Shape(ShapeKind.SEQUENCE, tuple, (ANY,))
        if len(args) == 2 and args[1] is Ellipsis:
            return Shape(ShapeKind.SEQUENCE, tuple, (compile_shape(args[0]),))
        return Shape(ShapeKind.TUPLE, tuple, tuple(compile_shape(a) for a in args))

    if origin in SEQUENCE_ORIGINS:
        element = compile_shape(args[0]) if args else ANY
        return Shape(ShapeKind.SEQUENCE, SEQUENCE_ORIGINS[origin], (element,))

    if origin in MAPPING_ORIGINS:
        key, value = (compile_shape(args[0]), compile_shape(args[1])) if args else (ANY, ANY)
        return Shape(ShapeKind.MAPPING, dict, (key, value))

    if isinstance(destination, type) and dataclasses.is_dataclass(destination):
        return _compile_record(destination)

    raise TypeMismatchError(f"Unsupported destination type: {destination!r}")


def _compile_record(cls: type) -> Shape:
    hints = typing.get_type_hints(cls)
    fields = tuple(
        FieldShape(
            attr=f.name,
            name=field_name(f),
            hint=hints.get(f.name, Any),
            has_default=(f.default is not dataclasses.MISSING or f.default_factory is not dataclasses.MISSING),
            settable=f.init,
        )
        for f in dataclasses.fields(cls)
    )

    # External names take precedence over attribute names.
    lookup: dict[str, FieldShape] = {}
    for f in fields:
        lookup.setdefault(f.name.lower(), f)
    for f in fields:
        lookup.setdefault(f.attr.lower(), f)

    return Shape(ShapeKind.RECORD, cls, fields=fields, lookup=lookup)


def coerce(value: JsonValue, destination: Any, strict: bool = True) -> Any:
    """
    Convert a Value Model tree into ``destination``.

    Args:
        value: A decoded value.
        destination: A type hint or a compiled :class:`Shape`.
        strict: Whether unknown record keys raise :class:`UnknownFieldError`.

    Returns:
        A new value of the destination type.

    Raises:
        TypeMismatchError: If the value cannot be converted.
        UnknownFieldError: For unmatched record keys in strict mode.
    """
    shape = destination if isinstance(destination, Shape) else compile_shape(destination)
    return _coerce(value, shape, strict, "")


def coerce_fields(value: JsonValue, shape: Shape, strict: bool = True, path: str = "") -> dict[str, Any]:
    """
    Coerce an object's entries into the fields of a record shape.

    Returns:
        Coerced values keyed by attribute name, for the matched fields only.
    """
    if kind_of(value) is not ValueKind.OBJECT:
        raise _mismatch(value, shape, path)

    result = {}
    for key, item in value.items():
        f = shape.lookup.get(key.lower())
        if f is None:
            if strict:
                raise UnknownFieldError(key, f"Unknown field {_join(path, key)!r} for {shape.describe()}")
            logger.debug("Dropping unknown field %r for %s", key, shape.describe())
            continue
        if not f.settable:
            continue
        result[f.attr] = _coerce(item, f.shape, strict, _join(path, key))
    return result


def zero_value(shape: Shape) -> Any:
    """The zero value of a destination: empty string, 0, empty container, ..."""
    kind = shape.kind
    if kind in (ShapeKind.ANY, ShapeKind.OPTIONAL):
        return None
    if kind is ShapeKind.STRING:
        return ""
    if kind is ShapeKind.BOOL:
        return False
    if kind is ShapeKind.INT:
        return 0
    if kind is ShapeKind.FLOAT:
        return 0.0
    if kind is ShapeKind.SEQUENCE:
        return shape.python_type()
    if kind is ShapeKind.TUPLE:
        return tuple(zero_value(s) for s in shape.items)
    if kind is ShapeKind.MAPPING:
        return {}
    # Field defaults only fill absent keys; a null record zeroes every field
    return _build_record(shape, {f.attr: zero_value(f.shape) for f in shape.fields if f.settable})


def _build_record(shape: Shape, values: dict[str, Any]) -> Any:
    kwargs = dict(values)
    for f in shape.fields:
        if f.settable and f.attr not in kwargs and not f.has_default:
            kwargs[f.attr] = zero_value(f.shape)
    return shape.python_type(**kwargs)


def _coerce(value: JsonValue, shape: Shape, strict: bool, path: str) -> Any:
    kind = shape.kind

    if kind is ShapeKind.ANY:
        return value

    if value is None:
        return zero_value(shape)

    if kind is ShapeKind.OPTIONAL:
        return _coerce(value, shape.items[0], strict, path)

    source = kind_of(value)

    if kind is ShapeKind.STRING:
        if source is ValueKind.STRING:
            return value
        if source is ValueKind.BOOL:
            return "true" if value else "false"
        if source is ValueKind.NUMBER:
            return format_number(value)

    elif kind is ShapeKind.BOOL:
        if source is ValueKind.BOOL:
            return value
        if source is ValueKind.STRING and value in BOOL_LITERALS:
            return BOOL_LITERALS[value]

    elif kind is ShapeKind.INT:
        if source is ValueKind.NUMBER:
            if isinstance(value, int):
                return value
            if math.isfinite(value):
                return int(value)
        if source is ValueKind.STRING and is_integer_literal(value):
            return int(value)

    elif kind is ShapeKind.FLOAT:
        if source is ValueKind.NUMBER:
            return float(value)
        if source is ValueKind.STRING:
            number = try_parse_number(value)
            if number is not None:
                return float(number)

    elif kind is ShapeKind.SEQUENCE:
        if source is ValueKind.ARRAY:
            element = shape.items[0]
            items = [_coerce(v, element, strict, f"{path}[{i}]") for i, v in enumerate(value)]
            return items if shape.python_type is list else shape.python_type(items)

    elif kind is ShapeKind.TUPLE:
        if source is ValueKind.ARRAY:
            if len(value) != len(shape.items):
                raise TypeMismatchError(
                    f"{path or 'value'}: expected {len(shape.items)} elements, got {len(value)}"
                )
            return tuple(
                _coerce(v, s, strict, f"{path}[{i}]") for i, (v, s) in enumerate(zip(value, shape.items))
            )

    elif kind is ShapeKind.MAPPING:
        if source is ValueKind.OBJECT:
            key_shape, value_shape = shape.items
            return {
                _coerce(k, key_shape, strict, _join(path, k)): _coerce(v, value_shape, strict, _join(path, k))
                for k, v in value.items()
            }

    elif kind is ShapeKind.RECORD:
        return _build_record(shape, coerce_fields(value, shape, strict, path))

    raise _mismatch(value, shape, path)


def _mismatch(value: JsonValue, shape: Shape, path: str) -> TypeMismatchError:
    return TypeMismatchError(
        f"{path or 'value'}: cannot convert {kind_of(value).value} {value!r} to {shape.describe()}"
    )


def _join(path: str, key: str) -> str:
    return f"{path}.{key}" if path else key
