from __future__ import annotations

import hashlib
import json
from typing import Any, Callable, Dict, FrozenSet, List, Optional, Tuple

from scaffold.logging_utils import get_logger
from scaffold.schema.arrays import unify_array
from scaffold.schema.classify import classify_value
from scaffold.schema.naming import camel_case, sanitize_field_name, unique_name
from scaffold.schema.types import NodeStatus, Reference, RunState, SchemaNode

logger = get_logger("schema")

EmitCallback = Callable[[SchemaNode], None]


def structural_signature(obj: Dict[str, Any]) -> str:
    """
    Fingerprint of the serialized object text.
    Key order is part of the text, so reordered keys give a different signature.
    """
    text = json.dumps(obj, separators=(",", ":"), ensure_ascii=False)
    return hashlib.sha256(text.encode("utf-8")).hexdigest()


class SchemaInferenceEngine:
    """
    Walks decoded JSON objects and emits one SchemaNode per distinct structure.

    The engine owns no state of its own: everything it records lives in the
    RunState handed in by the caller, so two engines built on two states never
    see each other's schemas.
    """

    def __init__(self, state: RunState, on_emit: Optional[EmitCallback] = None) -> None:
        self.state = state
        self.on_emit = on_emit

    def infer_root(self, name: str, raw_text: Optional[str]) -> Optional[str]:
        """
        Parse a request/response body and infer schemas for it.
        Returns the schema name the body resolved to, or None when the body was
        skipped (empty, not JSON, not an object, abandoned on a cycle).
        """
        if raw_text is None or not str(raw_text).strip():
            logger.debug("No body for %s", name)
            return None

        try:
            body = json.loads(raw_text)
        except ValueError as e:
            self._diagnostic(f"Body for {name} is not valid JSON: {e}")
            return None

        if not isinstance(body, dict):
            self._diagnostic(f"Body for {name} is not a JSON object")
            return None

        signature = structural_signature(body)
        self.infer(name, body)

        resolved = self.state.signatures.get(signature)
        if resolved is None or resolved not in self.state.emitted:
            return None
        if resolved != name:
            self.state.aliases[name] = resolved
        return resolved

    def infer(self, name: str, obj: Dict[str, Any], active_branch: FrozenSet[str] = frozenset()) -> None:
        """
        Infer the schema for `obj` under `name`, then for everything nested in it.

        `active_branch` holds the names still being classified above this call.
        A name joins the branch for step 6 only and leaves it when the node is
        emitted in step 7, before any child is inferred; children receive the
        caller's branch. Classification itself never recurses, so the branch
        grows only through a caller that passes one in.
        """
        state = self.state

        # 1) + 2) identical structure already owns a name -> that name wins
        signature = structural_signature(obj)
        existing = state.signatures.get(signature)
        if existing is not None and existing != name:
            logger.info("Using existing schema %s for %s (identical structure)", existing, name)
            return

        # 3) first write wins
        state.signatures.setdefault(signature, name)

        # 4) idempotent
        if name in state.emitted:
            return

        # 5) re-entering a schema that is being built on this path
        if name in active_branch:
            self._diagnostic(f"Circular reference detected for schema {name}, skipping")
            return

        # 6) push: classify fields with this name on the branch; nested structures are deferred
        branch = active_branch | {name}
        logger.debug("Classifying %s (active: %s)", name, ", ".join(sorted(branch)))
        node = SchemaNode(name=name, status=NodeStatus.ACTIVE)
        nested: List[Tuple[str, Dict[str, Any]]] = []
        array_items: List[Tuple[str, Dict[str, Any]]] = []

        def register_item(child_name: str, sample: Dict[str, Any]) -> str:
            array_items.append((child_name, sample))
            return self._bind(child_name, sample)

        for key, value in obj.items():
            field_name = unique_name(sanitize_field_name(key), node.fields)
            if field_name != key:
                node.wire_names[field_name] = key

            if isinstance(value, dict):
                child_name = f"{name}{camel_case(field_name)}"
                node.fields[field_name] = Reference(self._bind(child_name, value))
                nested.append((child_name, value))
            elif isinstance(value, list) and value:
                node.fields[field_name] = unify_array(value, name, field_name, register_item)
            else:
                node.fields[field_name] = classify_value(value)

        # 7) pop: the field set is fixed, emit and leave the branch
        self._emit(node)
        branch = active_branch

        # 8) nested objects first, then array element objects, discovery order
        for child_name, child in nested:
            self.infer(child_name, child, branch)
        for child_name, sample in array_items:
            self.infer(child_name, sample, branch)

    def _bind(self, name: str, obj: Dict[str, Any]) -> str:
        # bind at discovery so references to a deduplicated shape name the kept schema
        return self.state.signatures.setdefault(structural_signature(obj), name)

    def _emit(self, node: SchemaNode) -> None:
        node.status = NodeStatus.EMITTED
        self.state.emitted.add(node.name)
        self.state.nodes.append(node)
        logger.debug("Inferred schema %s (%d fields)", node.name, len(node.fields))
        if self.on_emit is not None:
            self.on_emit(node)

    def _diagnostic(self, message: str) -> None:
        logger.warning(message)
        self.state.diagnostics.append(message)
