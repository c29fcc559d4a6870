from __future__ import annotations

from typing import Any

from scaffold.schema.types import FieldType, ListOf, Primitive, PrimitiveKind, UNKNOWN

INT32_MIN = -(2 ** 31)
INT32_MAX = 2 ** 31 - 1


def classify_value(value: Any) -> FieldType:
    """
    Classify one decoded JSON value that is not an object.
    Arrays land here only when empty; the array unifier handles the rest.
    """
    if value is None:
        return UNKNOWN
    if isinstance(value, str):
        return Primitive(PrimitiveKind.STRING)
    # bool before int: bool is an int subclass
    if isinstance(value, bool):
        return Primitive(PrimitiveKind.BOOLEAN)
    if isinstance(value, int):
        return Primitive(_integer_kind(value))
    if isinstance(value, float):
        return Primitive(PrimitiveKind.DOUBLE)
    if isinstance(value, list):
        return ListOf(UNKNOWN)
    return UNKNOWN


def _integer_kind(value: int) -> PrimitiveKind:
    if value > INT32_MAX or value < INT32_MIN:
        return PrimitiveKind.LONG
    return PrimitiveKind.INTEGER
