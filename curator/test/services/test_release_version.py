from __future__ import annotations

import pytest

from curator.core.result import Err, Ok
from curator.services.release.version import (
    ReleaseVersion,
    parse_goal,
    parse_train_plan_name,
    parse_version,
    rolling_plan_name,
    train_plan_name,
)


def test_parse_version() -> None:
    assert parse_version("5.10") == ReleaseVersion(5, 10)
    assert parse_version("0.0") == ReleaseVersion(0, 0)
    assert parse_version("5") is None
    assert parse_version("5.1.2") is None
    assert parse_version("5.3\n") is None
    assert parse_version("v5.1") is None


def test_ordering_is_numeric() -> None:
    assert ReleaseVersion(5, 9) < ReleaseVersion(5, 10)
    assert ReleaseVersion(4, 99) < ReleaseVersion(5, 0)
    assert str(ReleaseVersion(5, 10)) == "5.10"


def test_bump() -> None:
    assert ReleaseVersion(5, 9).bump("minor") == ReleaseVersion(5, 10)
    assert ReleaseVersion(5, 9).bump("major") == ReleaseVersion(6, 0)


def test_empty_goal_accepts_everything() -> None:
    goal = parse_goal("")
    assert isinstance(goal, Ok)
    assert goal.value(ReleaseVersion(99, 99))


def test_major_goal_is_inclusive() -> None:
    goal = parse_goal("5")
    assert isinstance(goal, Ok)
    assert goal.value(ReleaseVersion(5, 99))
    assert goal.value(ReleaseVersion(4, 0))
    assert not goal.value(ReleaseVersion(6, 0))


def test_major_minor_goal_is_exclusive() -> None:
    goal = parse_goal("5.3")
    assert isinstance(goal, Ok)
    assert goal.value(ReleaseVersion(5, 2))
    assert goal.value(ReleaseVersion(4, 7))
    assert not goal.value(ReleaseVersion(5, 3))
    assert not goal.value(ReleaseVersion(5, 4))


@pytest.mark.parametrize("text", ["x", "5.", ".3", "5.3.1", "-1", " 5", "8\n", "5.3\n"])
def test_invalid_goal(text: str) -> None:
    goal = parse_goal(text)
    assert isinstance(goal, Err)
    assert goal.error.kind == "goal_parse"
    assert repr(text) in goal.error.message


def test_plan_file_names() -> None:
    assert train_plan_name(ReleaseVersion(5, 10)) == "lts-5.10.json"
    assert parse_train_plan_name("lts-5.10.json") == ReleaseVersion(5, 10)
    assert parse_train_plan_name("lts-5.json") is None
    assert parse_train_plan_name("nightly-2026-10-19.json") is None
    assert parse_train_plan_name("lts-5.10.yaml") is None
    assert rolling_plan_name("2026-10-19") == "nightly-2026-10-19.json"
