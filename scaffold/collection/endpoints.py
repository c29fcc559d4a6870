"""
Request metadata extraction for one collection item.

URLs come in two forms:
  - a plain string: "{{base_url}}/users/:id" or "/orders/{id}"
  - a structured object: {"raw": ..., "path": [...], "variable": [...], "query": [...]}
Declared path variables on a structured URL win over brace/colon matching, and a
declared query list wins over the "?a=1&b=2" tail of the raw text. The query never
stays in the URL template; stubs pass it as params.
"""

from __future__ import annotations

import re
from typing import Any, Dict, List, Optional
from urllib.parse import parse_qsl

from scaffold.collection.types import EndpointDescriptor, RequestBody

_STRING_PARAM_RE = re.compile(r"\{([^{}]+)\}|:([A-Za-z_][A-Za-z0-9_]*)")
_SEGMENT_PARAM_RE = re.compile(r"^(?::(.+)|\{([^{}]+)\})$")
_POSTMAN_VAR_RE = re.compile(r"\{\{[^}]+\}\}")
_SCHEME_HOST_RE = re.compile(r"^[A-Za-z][A-Za-z0-9+.-]*://[^/]*")


def _keys(entries: Any) -> List[str]:
    out = []
    for entry in entries or []:
        if isinstance(entry, dict) and entry.get("key") is not None:
            out.append(str(entry["key"]))
    return out


def raw_url(url: Any) -> str:
    if isinstance(url, str):
        return url
    if isinstance(url, dict):
        if isinstance(url.get("raw"), str):
            return url["raw"]
        path = url.get("path") or []
        return "/" + "/".join(str(p) for p in path)
    return ""


def url_segments(url: Any) -> List[str]:
    if isinstance(url, dict) and isinstance(url.get("path"), list):
        return [str(p) for p in url["path"]]
    return []


def path_params(url: Any) -> List[str]:
    params: List[str] = []

    if isinstance(url, dict):
        declared = _keys(url.get("variable"))
        if declared:
            return declared
        for segment in url_segments(url):
            m = _SEGMENT_PARAM_RE.match(segment)
            if m:
                name = m.group(1) or m.group(2)
                if name not in params:
                    params.append(name)
        if params or not isinstance(url.get("raw"), str):
            return params
        url = url["raw"]

    if isinstance(url, str):
        # {{var}} is a collection variable, not a path parameter
        text = _SCHEME_HOST_RE.sub("", _POSTMAN_VAR_RE.sub("", url)).split("?", 1)[0]
        for m in _STRING_PARAM_RE.finditer(text):
            name = m.group(1) or m.group(2)
            if name not in params:
                params.append(name)
    return params


def query_params(url: Any) -> List[str]:
    if isinstance(url, dict) and url.get("query"):
        return _keys(url["query"])

    # no structured query: read it off the raw text
    text = raw_url(url)
    if "?" not in text:
        return []
    keys: List[str] = []
    for key, _ in parse_qsl(text.split("?", 1)[1].split("#", 1)[0], keep_blank_values=True):
        if key not in keys:
            keys.append(key)
    return keys


def url_template(url: Any, params: List[str]) -> str:
    """Relative URL with every path parameter written as {name}."""
    text = raw_url(url)
    text = _POSTMAN_VAR_RE.sub("", text)
    text = _SCHEME_HOST_RE.sub("", text)
    text = text.split("?", 1)[0]

    for param in params:
        text = re.sub(r":" + re.escape(param) + r"(?=/|$)", "{" + param + "}", text)

    if text and not text.startswith("/"):
        text = "/" + text
    return text


def request_body(request: Dict[str, Any]) -> Optional[RequestBody]:
    body = request.get("body")
    if not isinstance(body, dict) or not body.get("mode"):
        return None

    mode = str(body["mode"])
    if mode == "raw":
        raw = body.get("raw")
        return RequestBody(mode=mode, raw_text=raw if isinstance(raw, str) else None)
    if mode in ("formdata", "urlencoded"):
        return RequestBody(mode=mode, form_keys=_keys(body.get(mode)))
    return RequestBody(mode=mode)


def response_label(response: Dict[str, Any], index: int) -> str:
    code = response.get("code")
    return str(code) if code is not None else str(index)


def build_endpoint_descriptor(item: Dict[str, Any], folder_path: List[str]) -> EndpointDescriptor:
    request = item.get("request") or {}
    if isinstance(request, str):
        # shorthand: "request": "https://host/path"
        request = {"url": request}

    url = request.get("url", "")
    params = path_params(url)

    responses: Dict[str, str] = {}
    for i, response in enumerate(item.get("response") or []):
        if isinstance(response, dict) and isinstance(response.get("body"), str):
            responses.setdefault(response_label(response, i), response["body"])

    return EndpointDescriptor(
        name=str(item.get("name") or "Unknown"),
        http_method=str(request.get("method") or "GET").upper(),
        url_template=url_template(url, params),
        raw_url=raw_url(url),
        path_params=params,
        query_params=query_params(url),
        header_keys=_keys(request.get("header")),
        request_body=request_body(request),
        responses=responses,
        folder_path=list(folder_path),
        url_segments=url_segments(url),
    )
