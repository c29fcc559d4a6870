from __future__ import annotations

import re
from typing import Dict, List

from scaffold.collection.types import EndpointDescriptor, ResourceGroup
from scaffold.schema.naming import to_class_name

DEFAULT_GROUP = "Default"

_SCHEME_HOST_RE = re.compile(r"^[A-Za-z][A-Za-z0-9+.-]*://[^/]*")


def _is_plain_segment(segment: str) -> bool:
    if not segment:
        return False
    if segment.startswith(("{", ":")) or "{{" in segment:
        return False
    # "https:", "host:8080"
    return ":" not in segment


def first_url_segment(endpoint: EndpointDescriptor) -> str:
    if endpoint.url_segments:
        segments = endpoint.url_segments
    else:
        text = _SCHEME_HOST_RE.sub("", endpoint.raw_url or endpoint.url_template)
        segments = text.split("?", 1)[0].split("/")

    for segment in segments:
        if _is_plain_segment(segment):
            return segment
    return ""


def resource_name(endpoint: EndpointDescriptor) -> str:
    """
    Folder first, then URL, then the endpoint's own name:
      Users/Create            -> Users
      /orders/{id} (no folder) -> Orders
    """
    candidates = []
    if endpoint.folder_path:
        candidates.append(endpoint.folder_path[0])
    candidates.append(first_url_segment(endpoint))
    candidates.append(endpoint.name)

    for raw in candidates:
        name = to_class_name(raw)
        if name:
            return name
    return DEFAULT_GROUP


class ResourceGrouper:
    def __init__(self) -> None:
        self._groups: Dict[str, ResourceGroup] = {}

    def add(self, endpoint: EndpointDescriptor) -> ResourceGroup:
        name = resource_name(endpoint)
        group = self._groups.get(name)
        if group is None:
            group = self._groups[name] = ResourceGroup(name=name)
        group.endpoints.append(endpoint)
        return group

    def groups(self) -> List[ResourceGroup]:
        return list(self._groups.values())
