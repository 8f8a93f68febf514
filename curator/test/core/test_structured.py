from __future__ import annotations

from curator.core.structured import (
    as_obj_list,
    as_str_dict,
    get_int,
    get_str,
    get_str_list,
    get_table,
    is_str_dict,
)


def test_is_str_dict_rejects_non_string_keys() -> None:
    assert is_str_dict({"a": 1})
    assert not is_str_dict({1: "a"})
    assert not is_str_dict(["a"])


def test_as_helpers() -> None:
    assert as_str_dict({"a": 1}) == {"a": 1}
    assert as_str_dict("nope") is None
    assert as_obj_list([1, "x"]) == [1, "x"]
    assert as_obj_list({"a": 1}) is None


def test_get_str_strips_and_drops_empty() -> None:
    table: dict[str, object] = {"a": "  x ", "b": "   ", "c": 3}
    assert get_str(table, "a") == "x"
    assert get_str(table, "b") is None
    assert get_str(table, "c") is None
    assert get_str(table, "missing") is None


def test_get_int_rejects_bool() -> None:
    table: dict[str, object] = {"jobs": 4, "flag": True, "text": "4"}
    assert get_int(table, "jobs") == 4
    assert get_int(table, "flag") is None
    assert get_int(table, "text") is None


def test_get_table() -> None:
    table: dict[str, object] = {"auth": {"token_env": "X"}, "jobs": 3}
    assert get_table(table, "auth") == {"token_env": "X"}
    assert get_table(table, "jobs") is None


def test_get_str_list() -> None:
    table: dict[str, object] = {"ok": ["a", "b"], "mixed": ["a", 1], "scalar": "a"}
    assert get_str_list(table, "ok") == ("a", "b")
    assert get_str_list(table, "mixed") is None
    assert get_str_list(table, "scalar") is None
