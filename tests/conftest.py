import json

import pytest

from scaffold.schema.engine import SchemaInferenceEngine
from scaffold.schema.types import RunState


def endpoint(name, method="GET", url="{{base_url}}/users", body=None, responses=None, headers=None):
    request = {"method": method, "url": url, "header": [{"key": h, "value": "x"} for h in headers or []]}
    if body is not None:
        request["body"] = {"mode": "raw", "raw": body if isinstance(body, str) else json.dumps(body)}
    item = {"name": name, "request": request}
    if responses is not None:
        item["response"] = [
            {"code": code, "body": b if isinstance(b, str) else json.dumps(b)} for code, b in responses
        ]
    return item


@pytest.fixture
def state():
    return RunState()


@pytest.fixture
def engine(state):
    return SchemaInferenceEngine(state)


@pytest.fixture
def sample_collection():
    return {
        "info": {"name": "Shop"},
        "item": [
            {
                "name": "Users",
                "item": [
                    endpoint(
                        "Create",
                        method="POST",
                        url="{{base_url}}/users",
                        body={"name": "Ann", "user-name": "ann", "address": {"city": "Oslo", "zip": "0150"}},
                        responses=[(201, {"id": 7, "name": "Ann"})],
                        headers=["Content-Type"],
                    ),
                    endpoint(
                        "Get User",
                        url={
                            "raw": "{{base_url}}/users/:userId?verbose=true",
                            "path": ["users", ":userId"],
                            "variable": [{"key": "userId", "value": "7"}],
                            "query": [{"key": "verbose", "value": "true"}],
                        },
                        responses=[(200, {"id": 7, "name": "Ann"})],
                    ),
                ],
            },
            endpoint(
                "List orders",
                url="/orders/{id}",
                responses=[(200, {"orders": [{"sku": "a", "qty": 1}, {"sku": "b", "qty": 2}]})],
            ),
            endpoint("Delete order", method="DELETE", url="{{base_url}}/orders/:orderId"),
        ],
    }
