from __future__ import annotations

from typing import Any, Callable, Dict, List, Optional

from scaffold.collection.endpoints import build_endpoint_descriptor, response_label
from scaffold.collection.types import EndpointDescriptor
from scaffold.errors import CollectionFormatError
from scaffold.logging_utils import get_logger
from scaffold.schema.engine import SchemaInferenceEngine
from scaffold.schema.naming import camel_case, to_class_name

logger = get_logger("collection")

EndpointCallback = Callable[[EndpointDescriptor], None]


class CollectionWalker:
    """
    Depth-first pass over a collection's item tree.

    Folders extend the naming prefix; leaves are endpoints. Every endpoint body
    goes through the inference engine under
      <Prefix><Endpoint>Request
      <Prefix><Endpoint>Response<Status>
    and every endpoint with a request is reported through on_endpoint.
    """

    def __init__(self, engine: SchemaInferenceEngine, on_endpoint: Optional[EndpointCallback] = None) -> None:
        self.engine = engine
        self.on_endpoint = on_endpoint

    def walk(self, collection: Dict[str, Any]) -> List[EndpointDescriptor]:
        items = collection.get("item") if isinstance(collection, dict) else None
        if not isinstance(items, list):
            raise CollectionFormatError("Invalid collection format: 'item' list not found")

        found: List[EndpointDescriptor] = []
        self._walk_items(items, "", [], found)
        return found

    def _walk_items(self, items: List[Any], prefix: str, folder_path: List[str],
                    found: List[EndpointDescriptor]) -> None:
        for item in items:
            if not isinstance(item, dict):
                self._diagnostic(f"Skipping malformed item under '{'/'.join(folder_path) or '<root>'}'")
                continue

            name = str(item.get("name") or "")
            children = item.get("item")
            if isinstance(children, list):
                self._walk_items(children, prefix + camel_case(name), folder_path + [name], found)
                continue

            base_name = to_class_name(prefix + camel_case(name or "Unknown"))
            descriptor = self._walk_endpoint(item, base_name, folder_path)
            if descriptor is not None:
                found.append(descriptor)
                if self.on_endpoint is not None:
                    self.on_endpoint(descriptor)

    def _walk_endpoint(self, item: Dict[str, Any], base_name: str,
                       folder_path: List[str]) -> Optional[EndpointDescriptor]:
        request_schema = None
        request = item.get("request")
        if isinstance(request, dict):
            body = request.get("body")
            if isinstance(body, dict) and isinstance(body.get("raw"), str):
                request_schema = self.engine.infer_root(f"{base_name}Request", body["raw"])

        response_schemas: Dict[str, str] = {}
        for i, response in enumerate(item.get("response") or []):
            if not isinstance(response, dict) or not isinstance(response.get("body"), str):
                continue
            label = response_label(response, i)
            resolved = self.engine.infer_root(f"{base_name}Response{camel_case(label)}", response["body"])
            if resolved is not None:
                response_schemas.setdefault(label, resolved)

        if request is None:
            return None

        descriptor = build_endpoint_descriptor(item, folder_path)
        descriptor.request_schema = request_schema
        descriptor.response_schema = _preferred_response(response_schemas)
        return descriptor

    def _diagnostic(self, message: str) -> None:
        logger.warning(message)
        self.engine.state.diagnostics.append(message)


def _preferred_response(schemas: Dict[str, str]) -> Optional[str]:
    for label, name in schemas.items():
        if label.startswith("2"):
            return name
    return next(iter(schemas.values()), None)
