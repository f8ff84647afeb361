"""Transformation interpreter for declarative field mappings.

A mapping names a dot-separated path into a subgraph item, the output alias,
and optionally one transform from a closed vocabulary. Transform names are
decoded into :class:`Transform`; names outside the vocabulary decode to
``Transform.IDENTITY`` so that mapping specs produced upstream keep working
when they use a name this service does not know yet.
"""

import math
import re
from collections.abc import Callable, Iterable, Mapping
from enum import Enum
from types import MappingProxyType
from typing import Any

from curator.schemas.internal import Row
from curator.schemas.queries import FieldMapping

_FLOAT_PREFIX = re.compile(r"^[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?")
_INT_PREFIX = re.compile(r"^[+-]?\d+")

TransformFn = Callable[[Any], Any]


class Transform(str, Enum):
    """Closed set of unary transforms a mapping may request."""

    PARSE_FLOAT = "parseFloat"
    PARSE_INT = "parseInt"
    TO_STRING = "toString"
    TO_FIXED_2 = "toFixed2"
    MULTIPLY_100 = "multiply100"
    IDENTITY = "identity"

    @classmethod
    def decode(cls, name: str | None) -> "Transform":
        """Decode a transform name; unknown or empty names become IDENTITY."""
        if not name:
            return cls.IDENTITY
        try:
            return cls(name)
        except ValueError:
            return cls.IDENTITY


def _finite(value: float) -> float | None:
    return value if math.isfinite(value) else None


def to_number(value: Any) -> float | None:
    """Read a value as a number the way GraphQL scalars arrive (often strings).

    Returns None when the value has no numeric reading.
    """
    if isinstance(value, bool):
        return float(value)
    if isinstance(value, (int, float)):
        try:
            return _finite(float(value))
        except OverflowError:
            return None
    if isinstance(value, str):
        match = _FLOAT_PREFIX.match(value.strip())
        if match:
            return _finite(float(match.group(0)))
    return None


def parse_float(value: Any) -> float | int | None:
    if isinstance(value, int) and not isinstance(value, bool):
        return value
    return to_number(value)


def parse_int(value: Any) -> int | None:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value) if math.isfinite(value) else None
    if isinstance(value, str):
        match = _INT_PREFIX.match(value.strip())
        if match:
            return int(match.group(0))
    return None


def to_string(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def to_fixed_2(value: Any) -> float | None:
    number = to_number(value)
    if number is None:
        return None
    return round(number, 2)


def multiply_100(value: Any) -> float | int | None:
    if isinstance(value, int) and not isinstance(value, bool):
        return value * 100
    number = to_number(value)
    if number is None:
        return None
    return number * 100


def identity(value: Any) -> Any:
    return value


class TransformRegistry:
    """Immutable table of transform implementations.

    Build it once at startup and hand it to the interpreter.
    """

    def __init__(self, functions: Mapping[Transform, TransformFn]):
        table = dict(functions)
        table.setdefault(Transform.IDENTITY, identity)
        self._functions: Mapping[Transform, TransformFn] = MappingProxyType(table)

    @classmethod
    def default(cls) -> "TransformRegistry":
        return cls(
            {
                Transform.PARSE_FLOAT: parse_float,
                Transform.PARSE_INT: parse_int,
                Transform.TO_STRING: to_string,
                Transform.TO_FIXED_2: to_fixed_2,
                Transform.MULTIPLY_100: multiply_100,
                Transform.IDENTITY: identity,
            }
        )

    def resolve(self, transform: Transform) -> TransformFn:
        return self._functions.get(transform, identity)

    def __contains__(self, transform: object) -> bool:
        return transform in self._functions


def resolve_path(value: Any, path: str) -> Any:
    """Walk a dot-separated path into a JSON value.

    Objects are indexed by key and arrays by non-negative integer position.
    Returns None as soon as a segment is missing.
    """
    current = value
    for segment in path.split("."):
        if isinstance(current, dict):
            if segment not in current:
                return None
            current = current[segment]
        elif isinstance(current, list):
            if not (segment.isascii() and segment.isdigit()):
                return None
            index = int(segment)
            if index >= len(current):
                return None
            current = current[index]
        else:
            return None
    return current


class TransformationInterpreter:
    """Applies field mappings to subgraph items, producing unified rows."""

    def __init__(self, registry: TransformRegistry):
        self.registry = registry

    def apply(self, item: Any, mappings: Iterable[FieldMapping]) -> Row:
        """Apply mappings to one item.

        A missing path maps the alias to None without running the transform.
        Duplicate aliases overwrite earlier ones (last mapping wins).
        """
        row: Row = {}
        for mapping in mappings:
            value = resolve_path(item, mapping.field)
            if value is not None and mapping.transformation:
                transform = Transform.decode(mapping.transformation)
                value = self.registry.resolve(transform)(value)
            row[mapping.alias] = value
        return row

    def apply_many(self, items: Iterable[Any], mappings: Iterable[FieldMapping]) -> list[Row]:
        mapping_list = list(mappings)
        return [self.apply(item, mapping_list) for item in items]
