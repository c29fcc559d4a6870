"""
Test-scaffold emission: one ResourceGroup -> one pytest module.

The stubs are inert scaffolding. They dispatch through the `api_client`
fixture (httpx.Client) defined by the shared conftest, use placeholder
values for every parameter and header, and end with commented-out
assertion options to pick from.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Callable, List, Optional, Set

from scaffold.collection.types import EndpointDescriptor, ResourceGroup
from scaffold.emit.models import model_module_name
from scaffold.export.artifact_sink import Artifact
from scaffold.run.config import GeneratorConfig
from scaffold.schema.naming import is_identifier, to_snake_case, unique_name
from scaffold.schema.types import ModuleNames, SchemaNode

INDENT = "    "
MAX_INLINE_BODY = 100

SchemaLookup = Callable[[str], Optional[SchemaNode]]


def _q(text: str) -> str:
    return json.dumps(text)


def scaffold_module_name(group_name: str) -> str:
    return f"test_{to_snake_case(group_name) or 'default'}_api"


def stub_function_name(endpoint_name: str) -> str:
    return f"test_{to_snake_case(endpoint_name) or 'endpoint'}"


def _placeholder_block(var: str, title: str, keys: List[str], value: Callable[[str], str], note: str) -> List[str]:
    lines = [f"{INDENT}# {title}", f"{INDENT}{var} = {{"]
    for key in keys:
        lines.append(f"{INDENT * 2}{_q(key)}: {_q(value(key))},  # {note}")
    lines += [f"{INDENT}}}", ""]
    return lines


class ScaffoldEmitter:
    def __init__(self, config: GeneratorConfig, schema_lookup: Optional[SchemaLookup] = None,
                 model_modules: Optional[ModuleNames] = None, modules: Optional[ModuleNames] = None) -> None:
        self.config = config
        self.schema_lookup = schema_lookup
        self.model_modules = model_modules if model_modules is not None else ModuleNames()
        self.modules = modules if modules is not None else ModuleNames()

    def module_for(self, group_name: str) -> str:
        return self.modules.resolve(group_name, scaffold_module_name(group_name))

    def model_module_for(self, schema_name: str) -> str:
        return self.model_modules.resolve(schema_name, model_module_name(schema_name))

    def path_for(self, group_name: str) -> Path:
        return self.config.test_dir / f"{self.module_for(group_name)}.py"

    def render(self, group: ResourceGroup) -> Artifact:
        models = []
        for endpoint in group.endpoints:
            if endpoint.request_schema and endpoint.request_schema not in models:
                models.append(endpoint.request_schema)
        needs_asdict = bool(models) and not self.config.generate_accessors

        lines = [
            '"""',
            f"Tests for {group.name} API endpoints.",
            "",
            "Scaffolding: replace the sample values and tighten the assertions.",
            '"""',
            "",
        ]
        if needs_asdict:
            lines.append("import dataclasses")
            lines.append("")
        lines.append("import pytest")
        if models:
            lines.append("")
            for model in models:
                lines.append(f"from {self.config.models_import}.{self.model_module_for(model)} import {model}")

        lines += [
            "",
            "",
            "@pytest.fixture(autouse=True)",
            f"def setup_{to_snake_case(group.name) or 'group'}(api_client):",
            f"{INDENT}# Set up any configuration shared by {group.name} tests",
            f"{INDENT}yield",
        ]

        taken: Set[str] = set()
        for endpoint in group.endpoints:
            func = unique_name(stub_function_name(endpoint.name), taken)
            taken.add(func)
            lines += ["", ""]
            lines += self._render_stub(func, endpoint)

        return Artifact(relative_path=self.path_for(group.name), content="\n".join(lines) + "\n", kind="test")

    def render_shared_fixture(self) -> Artifact:
        content = f'''"""Shared fixtures for generated API tests."""

import os

import httpx
import pytest

BASE_URL = os.getenv("BASE_URL", {_q(self.config.base_url)})


@pytest.fixture(scope="session")
def base_url():
    return BASE_URL


@pytest.fixture(scope="session")
def api_client(base_url):
    headers = {{"Content-Type": "application/json", "Accept": "application/json"}}

    api_key = os.getenv("API_KEY", "")
    if api_key:
        headers["X-API-Key"] = api_key

    timeout = float(os.getenv("HTTP_TIMEOUT_SECONDS", "30"))
    verify_tls = os.getenv("HTTP_VERIFY_TLS", "true").lower() == "true"

    with httpx.Client(base_url=base_url, headers=headers, timeout=timeout, verify=verify_tls) as client:
        yield client
'''
        return Artifact(relative_path=self.config.test_dir / "conftest.py", content=content, kind="fixture")

    def _render_stub(self, func: str, endpoint: EndpointDescriptor) -> List[str]:
        method = endpoint.http_method
        body = endpoint.request_body
        raw = (body.raw_text or "") if body else ""
        is_json = bool(body and body.mode == "raw" and _is_json(raw))

        lines = [f"def {func}(api_client):", f'{INDENT}"""', f"{INDENT}{endpoint.name}", f"{INDENT}{method} {endpoint.raw_url}"]
        if is_json:
            inline = " ".join(raw.split())
            lines.append(f"{INDENT}Request body: {inline if len(raw) < MAX_INLINE_BODY else 'JSON payload'}")
        # docstring must stay a valid literal
        lines = [line.replace('"""', "'''").replace("\\", "\\\\") for line in lines]
        lines += [f'{INDENT}"""']

        kwargs: List[str] = []

        if endpoint.path_params:
            lines += _placeholder_block("path_params", "Path parameters", endpoint.path_params,
                                        lambda k: f"sample_{k}", "Replace with actual test data")
        if endpoint.query_params:
            lines += _placeholder_block("params", "Query parameters", endpoint.query_params,
                                        lambda k: f"sample_{k}", "Replace with actual test data")
            kwargs.append("params=params")
        if endpoint.header_keys:
            lines += _placeholder_block("headers", "Headers", endpoint.header_keys,
                                        lambda k: "sample_header_value", "Replace with actual header value")
            kwargs.append("headers=headers")

        if is_json and endpoint.request_schema:
            lines += [f"{INDENT}# Request body using model", f"{INDENT}request_body = {endpoint.request_schema}()"]
            example = self._example_field(endpoint.request_schema)
            if example:
                lines.append(f'{INDENT}# Example: request_body.{example} = "Test {example}"')
            lines.append("")
            if self.config.generate_accessors:
                kwargs.append("json=request_body.to_dict()")
            else:
                kwargs.append("json=dataclasses.asdict(request_body)")
        elif is_json and raw.strip().startswith("["):
            lines += [
                f"{INDENT}# Request body",
                f"{INDENT}request_body = []",
                f'{INDENT}# Example: request_body.append({{"name": "Test Name"}})',
                "",
            ]
            kwargs.append("json=request_body")
        elif is_json:
            lines += [
                f"{INDENT}# Request body",
                f"{INDENT}request_body = {{}}",
                f'{INDENT}# Example: request_body["name"] = "Test Name"',
                "",
            ]
            kwargs.append("json=request_body")
        elif body and body.mode in ("formdata", "urlencoded") and body.form_keys:
            lines += _placeholder_block("form_data", "Form data", body.form_keys,
                                        lambda k: f"sample_{k}", "Replace with actual data")
            kwargs.append("data=form_data")
        elif body and body.mode == "raw" and raw:
            lines += [f"{INDENT}# Raw request body", f"{INDENT}raw_body = {_q(raw)}", ""]
            kwargs.append("content=raw_body")

        url = _q(endpoint.url_template or "/")
        if endpoint.path_params:
            url = f"{url}.format(**path_params)"

        lines.append(f"{INDENT}response = api_client.request(")
        lines.append(f"{INDENT * 2}{_q(method)},")
        lines.append(f"{INDENT * 2}{url},")
        for kwarg in kwargs:
            lines.append(f"{INDENT * 2}{kwarg},")
        lines += [f"{INDENT})", ""]

        lines.append(f"{INDENT}assert response.status_code == 200  # Update with expected status code")
        if method == "GET":
            lines.append(f"{INDENT}assert response.content  # Verify response is not empty")
        elif method == "POST":
            lines.append(f'{INDENT}assert "id" in response.json()  # Verify ID is returned')
        elif method in ("PUT", "PATCH"):
            lines.append(f"{INDENT}assert response.json() is not None  # Verify response exists")

        lines += ["", f"{INDENT}# Additional validations"]
        if method in ("GET", "POST"):
            if endpoint.response_schema:
                response_model = endpoint.response_schema
                response_module = self.model_module_for(response_model)
            else:
                response_model, response_module = "ResponseModel", "response_model"
            lines += [
                f"{INDENT}# Option 1: Validate with a JSON path",
                f'{INDENT}# assert response.json()["name"] == "expected value"',
                "",
                f"{INDENT}# Option 2: Parse the response into a model",
                f"{INDENT}# from {self.config.models_import}.{response_module} import {response_model}",
                f"{INDENT}# response_obj = {response_model}.from_dict(response.json())",
                f"{INDENT}# assert response_obj is not None",
            ]
        elif method == "DELETE":
            lines += [
                f"{INDENT}# For delete, the status code check is often sufficient",
                f"{INDENT}# If the API returns a body, add assertions for it here",
            ]
        else:
            lines.append(f"{INDENT}# assert response.headers.get(\"Content-Type\") is not None")
        return lines

    def _example_field(self, schema_name: str) -> Optional[str]:
        if self.schema_lookup is None:
            return None
        node = self.schema_lookup(schema_name)
        if node is None:
            return None
        for name in node.fields:
            if is_identifier(name):
                return name
        return None


def _is_json(text: str) -> bool:
    stripped = text.strip()
    if not stripped or stripped[0] not in "{[":
        return False
    try:
        json.loads(stripped)
    except ValueError:
        return False
    return True
