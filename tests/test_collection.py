import pytest

from conftest import endpoint
from scaffold.collection.endpoints import build_endpoint_descriptor, path_params, query_params, url_template
from scaffold.collection.grouper import ResourceGrouper, resource_name
from scaffold.collection.types import EndpointDescriptor
from scaffold.collection.walker import CollectionWalker
from scaffold.errors import CollectionFormatError


def walk(engine, collection):
    grouper = ResourceGrouper()
    endpoints = CollectionWalker(engine, on_endpoint=grouper.add).walk(collection)
    return endpoints, grouper.groups()


def test_walk_names_schemas_from_folder_prefix(engine, state, sample_collection):
    walk(engine, sample_collection)

    assert [n.name for n in state.nodes] == [
        "UsersCreateRequest",
        "UsersCreateRequestAddress",
        "UsersCreateResponse201",
        "ListOrdersResponse200",
        "ListOrdersResponse200OrdersItem",
    ]


def test_walk_builds_descriptors(engine, sample_collection):
    endpoints, _ = walk(engine, sample_collection)
    create, get_user, list_orders, delete_order = endpoints

    assert create.http_method == "POST"
    assert create.url_template == "/users"
    assert create.header_keys == ["Content-Type"]
    assert create.request_body.mode == "raw"
    assert create.request_schema == "UsersCreateRequest"
    assert create.response_schema == "UsersCreateResponse201"
    assert create.folder_path == ["Users"]

    assert get_user.path_params == ["userId"]
    assert get_user.query_params == ["verbose"]
    assert get_user.url_template == "/users/{userId}"
    # identical example response, first name wins
    assert get_user.response_schema == "UsersCreateResponse201"
    assert get_user.request_schema is None

    assert list_orders.path_params == ["id"]
    assert list_orders.url_template == "/orders/{id}"
    assert delete_order.url_template == "/orders/{orderId}"
    assert delete_order.responses == {}


def test_walk_groups_by_folder_then_url(engine, sample_collection):
    _, groups = walk(engine, sample_collection)

    assert [g.name for g in groups] == ["Users", "Orders"]
    assert [e.name for e in groups[0].endpoints] == ["Create", "Get User"]
    assert [e.name for e in groups[1].endpoints] == ["List orders", "Delete order"]


def test_nested_folders_group_under_first_folder(engine, state):
    collection = {
        "item": [
            {"name": "Users", "item": [{"name": "Create", "item": [
                endpoint("New", method="POST", body={"a": 1}),
            ]}]},
        ]
    }
    endpoints, groups = walk(engine, collection)

    assert endpoints[0].folder_path == ["Users", "Create"]
    assert [g.name for g in groups] == ["Users"]
    assert [n.name for n in state.nodes] == ["UsersCreateNewRequest"]


def test_response_without_code_uses_index(engine, state):
    item = endpoint("Ping", responses=[])
    item["response"] = [{"body": '{"ok": true}'}, {"code": 404, "body": '{"error": "x"}'}]
    walk(engine, {"item": [item]})

    assert [n.name for n in state.nodes] == ["PingResponse0", "PingResponse404"]


def test_items_without_request_still_infer_responses(engine, state):
    endpoints, groups = walk(engine, {"item": [{"name": "Orphan", "response": [{"code": 200, "body": '{"a": 1}'}]}]})

    assert endpoints == []
    assert groups == []
    assert [n.name for n in state.nodes] == ["OrphanResponse200"]


def test_bad_body_skips_only_that_artifact(engine, state):
    collection = {"item": [
        endpoint("Broken", method="POST", body="{oops", responses=[(200, {"fine": True})]),
        endpoint("Other", method="POST", body={"b": 1}),
    ]}
    endpoints, _ = walk(engine, collection)

    assert [n.name for n in state.nodes] == ["BrokenResponse200", "OtherRequest"]
    assert endpoints[0].request_schema is None
    assert len(state.diagnostics) == 1


def test_malformed_items_are_reported(engine, state):
    endpoints, _ = walk(engine, {"item": ["not an item", endpoint("Ok")]})
    assert [e.name for e in endpoints] == ["Ok"]
    assert len(state.diagnostics) == 1


def test_missing_item_list_is_fatal(engine):
    with pytest.raises(CollectionFormatError):
        CollectionWalker(engine).walk({"info": {}})


def test_string_url_parameters_in_both_notations():
    assert path_params("{{base_url}}/a/:x/b/{y}") == ["x", "y"]
    assert path_params("http://localhost:8080/a") == []


def test_declared_variables_win_over_path_segments():
    url = {"raw": "/a/{fromRaw}", "path": ["a", "{fromPath}"], "variable": [{"key": "declared"}]}
    assert path_params(url) == ["declared"]

    url = {"path": ["a", "{fromPath}", ":other"]}
    assert path_params(url) == ["fromPath", "other"]


def test_url_template_strips_host_and_variables():
    assert url_template("https://api.example.com/orders/:id?x=1", ["id"]) == "/orders/{id}"
    assert url_template("{{base_url}}/orders/{id}", ["id"]) == "/orders/{id}"
    assert url_template("orders", []) == "/orders"
    assert url_template("", []) == ""


def test_query_keys_from_raw_url_text():
    assert query_params("{{base_url}}/users?active=true&page=2") == ["active", "page"]
    assert query_params("/users?tag=a&tag=b&empty=") == ["tag", "empty"]
    assert query_params({"raw": "/users?q=x#top", "path": ["users"]}) == ["q"]
    assert query_params("/users") == []


def test_declared_query_wins_over_raw_text():
    url = {"raw": "/users?fromRaw=1", "query": [{"key": "declared", "value": "1"}]}
    assert query_params(url) == ["declared"]


def test_string_url_query_becomes_params():
    descriptor = build_endpoint_descriptor(endpoint("List", url="{{base_url}}/users?active=true&page=2"), [])

    assert descriptor.url_template == "/users"
    assert descriptor.query_params == ["active", "page"]


def test_form_data_body():
    item = {
        "name": "Upload",
        "request": {
            "method": "post",
            "url": "/files",
            "body": {"mode": "formdata", "formdata": [{"key": "file"}, {"key": "label"}]},
        },
    }
    descriptor = build_endpoint_descriptor(item, [])
    assert descriptor.http_method == "POST"
    assert descriptor.request_body.mode == "formdata"
    assert descriptor.request_body.form_keys == ["file", "label"]


@pytest.mark.parametrize(
    "descriptor, expected",
    [
        (EndpointDescriptor(name="x", http_method="GET", url_template="/orders/{id}",
                            raw_url="/orders/{id}"), "Orders"),
        (EndpointDescriptor(name="x", http_method="GET", url_template="/health",
                            raw_url="https://api.example.com/health"), "Health"),
        (EndpointDescriptor(name="x", http_method="GET", url_template="/{id}",
                            raw_url="{{base_url}}/{id}"), "X"),
        (EndpointDescriptor(name="x", http_method="GET", url_template="/orders",
                            raw_url="", url_segments=[":tenant", "orders"]), "Orders"),
        (EndpointDescriptor(name="x", http_method="GET", url_template="/orders",
                            folder_path=["user accounts", "Create"]), "UserAccounts"),
        (EndpointDescriptor(name="", http_method="GET", url_template=""), "Default"),
    ],
)
def test_resource_name(descriptor, expected):
    assert resource_name(descriptor) == expected
