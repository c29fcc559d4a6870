"""
Identifier sanitizing.

Field names become valid Python identifiers (the original key is kept by the
caller as the wire name when the two differ). Class and group names are built
by capitalizing each alphanumeric segment and concatenating, forward only.
"""

from __future__ import annotations

import keyword
import re
from typing import Iterable

_IDENTIFIER_RE = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")
_INVALID_CHAR_RE = re.compile(r"[^A-Za-z0-9_]")
_SEGMENT_SPLIT_RE = re.compile(r"[^A-Za-z0-9]+")
_CAMEL_BOUNDARY_RE = re.compile(r"(?<=[a-z0-9])(?=[A-Z])|(?<=[A-Z])(?=[A-Z][a-z])")

RESERVED_SUFFIX = "_"
FIELD_PREFIX = "field_"
CLASS_PREFIX = "Model"

# names a generated model's class body looks up or defines
_MODEL_MEMBERS = frozenset({"dataclasses", "from_dict", "to_dict"})

_RESERVED = frozenset(keyword.kwlist) | _MODEL_MEMBERS


def is_identifier(text: str) -> bool:
    return bool(_IDENTIFIER_RE.match(text))


def is_reserved(text: str) -> bool:
    return text in _RESERVED


def sanitize_field_name(key: str) -> str:
    if not key:
        return "field"
    if is_identifier(key):
        if is_reserved(key):
            return key + RESERVED_SUFFIX
        return key

    sanitized = _INVALID_CHAR_RE.sub("_", key)
    if not _IDENTIFIER_RE.match(key[0]):
        sanitized = FIELD_PREFIX + sanitized
    return sanitized


def unique_name(candidate: str, taken: Iterable[str]) -> str:
    taken = set(taken)
    if candidate not in taken:
        return candidate
    i = 2
    while f"{candidate}_{i}" in taken:
        i += 1
    return f"{candidate}_{i}"


def capitalize(text: str) -> str:
    if not text:
        return text
    return text[0].upper() + text[1:]


def camel_case(text: str) -> str:
    """Capitalize and join alphanumeric segments: "user accounts/v2" -> "UserAccountsV2"."""
    parts = [p for p in _SEGMENT_SPLIT_RE.split(text or "") if p]
    return "".join(capitalize(p) for p in parts)


def to_class_name(text: str) -> str:
    name = camel_case(text)
    if name and name[0].isdigit():
        name = CLASS_PREFIX + name
    return name


def to_snake_case(text: str) -> str:
    parts = [p for p in _SEGMENT_SPLIT_RE.split(text or "") if p]
    words = []
    for part in parts:
        words.extend(w.lower() for w in _CAMEL_BOUNDARY_RE.split(part) if w)
    name = "_".join(words)
    if name and name[0].isdigit():
        name = "n_" + name
    return name
