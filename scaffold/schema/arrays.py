from __future__ import annotations

from typing import Any, Callable, Dict, List, Optional

from scaffold.schema.naming import camel_case
from scaffold.schema.types import ListOf, Primitive, PrimitiveKind, Reference, UNKNOWN

SAMPLE_SIZE = 5

_OBJECT = "Object"
_LIST = "List"

# register(child_name, sample_object) -> authoritative schema name
Register = Callable[[str, Dict[str, Any]], str]


def element_category(value: Any) -> Optional[str]:
    if value is None:
        return None
    if isinstance(value, str):
        return PrimitiveKind.STRING.value
    if isinstance(value, bool):
        return PrimitiveKind.BOOLEAN.value
    if isinstance(value, (int, float)):
        # any number inside an array is widened to Double
        return PrimitiveKind.DOUBLE.value
    if isinstance(value, dict):
        return _OBJECT
    if isinstance(value, list):
        return _LIST
    return None


def item_schema_name(parent_name: str, field_name: str) -> str:
    return f"{parent_name}{camel_case(field_name)}Item"


def unify_array(values: List[Any], parent_name: str, field_name: str, register: Register) -> ListOf:
    """
    Decide one element type for an array by sampling its first few elements.
    Mixed samples degrade to a list of Unknown; there is no union type.
    """
    categories = []
    sample_object = None

    for element in values[:SAMPLE_SIZE]:
        category = element_category(element)
        if category is None:
            continue
        if category not in categories:
            categories.append(category)
        if category == _OBJECT and sample_object is None:
            sample_object = element

    if len(categories) != 1:
        return ListOf(UNKNOWN)

    category = categories[0]
    if category == _OBJECT and sample_object is not None:
        child = register(item_schema_name(parent_name, field_name), sample_object)
        return ListOf(Reference(child))
    if category == _LIST:
        return ListOf(ListOf(UNKNOWN))
    return ListOf(Primitive(PrimitiveKind(category)))
