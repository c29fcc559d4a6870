from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional, Set, Union

from scaffold.schema.naming import unique_name


class PrimitiveKind(str, Enum):
    STRING = "String"
    BOOLEAN = "Boolean"
    INTEGER = "Integer"
    LONG = "Long"
    DOUBLE = "Double"
    UNKNOWN = "Unknown"


@dataclass(frozen=True)
class Primitive:
    kind: PrimitiveKind


@dataclass(frozen=True)
class Reference:
    schema_name: str


@dataclass(frozen=True)
class ListOf:
    item: "FieldType"


FieldType = Union[Primitive, Reference, ListOf]

UNKNOWN = Primitive(PrimitiveKind.UNKNOWN)


class NodeStatus(str, Enum):
    PENDING = "pending"
    ACTIVE = "active"
    EMITTED = "emitted"


@dataclass
class SchemaNode:
    name: str
    fields: Dict[str, FieldType] = field(default_factory=dict)  # insertion order == source order
    wire_names: Dict[str, str] = field(default_factory=dict)    # sanitized -> original key
    status: NodeStatus = NodeStatus.PENDING

    def referenced_names(self) -> List[str]:
        """Schema names this node points at, first occurrence order."""
        out: List[str] = []
        for ftype in self.fields.values():
            name = referenced_name(ftype)
            if name and name not in out:
                out.append(name)
        return out


def referenced_name(ftype: FieldType) -> Optional[str]:
    if isinstance(ftype, Reference):
        return ftype.schema_name
    if isinstance(ftype, ListOf):
        return referenced_name(ftype.item)
    return None


@dataclass
class ModuleNames:
    """
    Entity name -> module file stem within one output package.
    Snake-casing folds case, so "GETUser" and "GetUser" share a stem; the
    second entity to ask gets a numbered one.
    """
    by_entity: Dict[str, str] = field(default_factory=dict)

    def resolve(self, entity: str, stem: str) -> str:
        if entity not in self.by_entity:
            self.by_entity[entity] = unique_name(stem, self.by_entity.values())
        return self.by_entity[entity]


@dataclass
class RunState:
    """
    Everything one generator run mutates. A fresh instance per run:
      - signatures: structural signature -> first schema name bound to it
      - emitted: names already emitted this run
      - nodes: emitted nodes, emission order
      - aliases: requested root name -> authoritative name (dedup)
      - diagnostics: recoverable problems, in the order they happened
      - model_modules / test_modules: file stems handed out so far
    """
    signatures: Dict[str, str] = field(default_factory=dict)
    emitted: Set[str] = field(default_factory=set)
    nodes: List[SchemaNode] = field(default_factory=list)
    aliases: Dict[str, str] = field(default_factory=dict)
    diagnostics: List[str] = field(default_factory=list)
    model_modules: ModuleNames = field(default_factory=ModuleNames)
    test_modules: ModuleNames = field(default_factory=ModuleNames)

    def node(self, name: str) -> Optional[SchemaNode]:
        for n in self.nodes:
            if n.name == name:
                return n
        return None
