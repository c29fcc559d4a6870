from dataclasses import dataclass, field
from typing import Dict, List, Optional


@dataclass
class RequestBody:
    mode: str                      # "raw" | "formdata" | "urlencoded" | ...
    raw_text: Optional[str] = None
    form_keys: List[str] = field(default_factory=list)


@dataclass
class EndpointDescriptor:
    name: str
    http_method: str               # upper case, "GET" when the request omits it
    url_template: str              # "/users/{id}", host and {{vars}} stripped
    raw_url: str = ""              # as written in the collection
    path_params: List[str] = field(default_factory=list)
    query_params: List[str] = field(default_factory=list)
    header_keys: List[str] = field(default_factory=list)
    request_body: Optional[RequestBody] = None
    responses: Dict[str, str] = field(default_factory=dict)    # status label -> raw body
    folder_path: List[str] = field(default_factory=list)      # raw folder names, root first
    url_segments: List[str] = field(default_factory=list)     # structured url "path", if any
    request_schema: Optional[str] = None
    response_schema: Optional[str] = None


@dataclass
class ResourceGroup:
    name: str
    endpoints: List[EndpointDescriptor] = field(default_factory=list)
