import pytest

from scaffold.schema.naming import (
    is_identifier,
    sanitize_field_name,
    to_class_name,
    to_snake_case,
    unique_name,
)


@pytest.mark.parametrize("key", ["name", "_private", "userId", "a1"])
def test_valid_identifiers_are_kept(key):
    assert sanitize_field_name(key) == key


def test_hyphenated_key_becomes_identifier():
    sanitized = sanitize_field_name("user-name")
    assert sanitized == "user_name"
    assert "-" not in sanitized
    assert is_identifier(sanitized)


@pytest.mark.parametrize(
    "key, expected",
    [
        ("class", "class_"),
        ("from", "from_"),
        ("None", "None_"),
        ("dataclasses", "dataclasses_"),
        ("from_dict", "from_dict_"),
        ("to_dict", "to_dict_"),
    ],
)
def test_reserved_words_get_suffix(key, expected):
    assert sanitize_field_name(key) == expected


@pytest.mark.parametrize("key", ["type", "match", "case", "_"])
def test_soft_keywords_are_ordinary_names(key):
    assert sanitize_field_name(key) == key


def test_leading_digit_gets_prefix():
    assert sanitize_field_name("2fa") == "field_2fa"
    assert sanitize_field_name("$ref") == "field__ref"


def test_empty_key():
    assert sanitize_field_name("") == "field"


def test_unique_name_appends_counter():
    assert unique_name("a", []) == "a"
    assert unique_name("a", ["a"]) == "a_2"
    assert unique_name("a", ["a", "a_2"]) == "a_3"


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("users", "Users"),
        ("get user", "GetUser"),
        ("getUser", "GetUser"),
        ("user-accounts/v2", "UserAccountsV2"),
        ("200", "Model200"),
        ("", ""),
        ("!!", ""),
    ],
)
def test_to_class_name(raw, expected):
    assert to_class_name(raw) == expected


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("UsersCreateRequest", "users_create_request"),
        ("Create User", "create_user"),
        ("HTTPServer", "http_server"),
        ("Response200", "response200"),
    ],
)
def test_to_snake_case(raw, expected):
    assert to_snake_case(raw) == expected
