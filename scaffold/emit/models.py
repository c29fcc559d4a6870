"""
Model emission: one SchemaNode -> one Python dataclass module.

    @dataclass
    class UsersCreateRequest:
        name: Optional[str] = None
        user_name: Optional[str] = dataclasses.field(default=None, metadata={"wire_name": "user-name"})

Fields are Optional with a None default so a model can be built empty and
filled in by hand. `dataclasses.field` is referenced through the module since
a payload key named "field" would shadow a bare import inside the class body.
Keys that would shadow the module itself or the accessor methods are renamed
by the field sanitizer.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import List, Optional

from scaffold.export.artifact_sink import Artifact
from scaffold.run.config import GeneratorConfig
from scaffold.schema.naming import to_snake_case
from scaffold.schema.types import (
    FieldType,
    ListOf,
    ModuleNames,
    Primitive,
    PrimitiveKind,
    Reference,
    SchemaNode,
    referenced_name,
)

INDENT = "    "

PYTHON_TYPES = {
    PrimitiveKind.STRING: "str",
    PrimitiveKind.BOOLEAN: "bool",
    PrimitiveKind.INTEGER: "int",
    PrimitiveKind.LONG: "int",
    PrimitiveKind.DOUBLE: "float",
    PrimitiveKind.UNKNOWN: "Any",
}


def model_module_name(schema_name: str) -> str:
    return to_snake_case(schema_name) or "model"


def type_hint(ftype: FieldType) -> str:
    if isinstance(ftype, Primitive):
        return PYTHON_TYPES[ftype.kind]
    if isinstance(ftype, Reference):
        return ftype.schema_name
    if isinstance(ftype, ListOf):
        return f"List[{type_hint(ftype.item)}]"
    raise TypeError(f"Unsupported field type: {ftype!r}")


def field_hint(ftype: FieldType) -> str:
    hint = type_hint(ftype)
    if hint == "Any":
        return hint
    return f"Optional[{hint}]"


def _needs_conversion(ftype: FieldType) -> bool:
    return referenced_name(ftype) is not None


def _from_expr(ftype: FieldType, expr: str, depth: int = 0) -> str:
    if isinstance(ftype, Reference):
        return f"{ftype.schema_name}.from_dict({expr})"
    if isinstance(ftype, ListOf) and _needs_conversion(ftype.item):
        var = f"v{depth}"
        return f"[{_from_expr(ftype.item, var, depth + 1)} for {var} in {expr}]"
    return expr


def _to_expr(ftype: FieldType, expr: str, depth: int = 0) -> str:
    if isinstance(ftype, Reference):
        return f"{expr}.to_dict()"
    if isinstance(ftype, ListOf) and _needs_conversion(ftype.item):
        var = f"v{depth}"
        return f"[{_to_expr(ftype.item, var, depth + 1)} for {var} in {expr}]"
    return expr


class ModelEmitter:
    def __init__(self, config: GeneratorConfig, modules: Optional[ModuleNames] = None) -> None:
        self.config = config
        self.modules = modules if modules is not None else ModuleNames()

    def module_for(self, schema_name: str) -> str:
        return self.modules.resolve(schema_name, model_module_name(schema_name))

    def path_for(self, schema_name: str) -> Path:
        return self.config.model_dir / f"{self.module_for(schema_name)}.py"

    def render(self, node: SchemaNode) -> Artifact:
        lines: List[str] = [
            f'"""{node.name} model inferred from example payloads."""',
            "",
            "from __future__ import annotations",
            "",
            "import dataclasses",
            "from dataclasses import dataclass",
            "from typing import Any, Dict, List, Optional",
        ]

        refs = [r for r in node.referenced_names() if r != node.name]
        if refs:
            lines.append("")
            for ref in refs:
                lines.append(f"from {self.config.models_import}.{self.module_for(ref)} import {ref}")

        lines += ["", "", "@dataclass", f"class {node.name}:"]
        if not node.fields:
            lines.append(f"{INDENT}pass")

        for name, ftype in node.fields.items():
            wire = node.wire_names.get(name)
            if wire is not None and self.config.wire_name_annotations:
                lines.append(
                    f"{INDENT}{name}: {field_hint(ftype)} = dataclasses.field("
                    f"default=None, metadata={{\"wire_name\": {json.dumps(wire)}}})"
                )
            else:
                lines.append(f"{INDENT}{name}: {field_hint(ftype)} = None")

        if self.config.generate_accessors:
            lines += self._accessors(node)

        return Artifact(relative_path=self.path_for(node.name), content="\n".join(lines) + "\n", kind="model")

    def _accessors(self, node: SchemaNode) -> List[str]:
        body = INDENT * 2
        lines = [
            "",
            f"{INDENT}@classmethod",
            f"{INDENT}def from_dict(cls, data: Dict[str, Any]) -> {node.name}:",
        ]
        if node.fields:
            lines.append(f"{body}return cls(")
            for name, ftype in node.fields.items():
                key = json.dumps(node.wire_names.get(name, name))
                value = f"data.get({key})"
                if _needs_conversion(ftype):
                    value = f"{_from_expr(ftype, f'data[{key}]')} if data.get({key}) is not None else None"
                lines.append(f"{body}{INDENT}{name}={value},")
            lines.append(f"{body})")
        else:
            lines.append(f"{body}return cls()")

        lines += [
            "",
            f"{INDENT}def to_dict(self) -> Dict[str, Any]:",
            f"{body}out: Dict[str, Any] = {{}}",
        ]
        for name, ftype in node.fields.items():
            key = json.dumps(node.wire_names.get(name, name))
            lines.append(f"{body}if self.{name} is not None:")
            lines.append(f"{body}{INDENT}out[{key}] = {_to_expr(ftype, f'self.{name}')}")
        lines.append(f"{body}return out")
        return lines
