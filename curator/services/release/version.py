from __future__ import annotations

import re
from collections.abc import Callable
from dataclasses import dataclass

from curator.core.result import Err, Ok, Result
from curator.services.release.errors import ReleaseError
from curator.services.release.model import BumpKind

_VERSION_RE = re.compile(r"(\d+)\.(\d+)", re.ASCII)
_MAJOR_RE = re.compile(r"(\d+)", re.ASCII)

TRAIN_PLAN_PREFIX = "lts-"
PLAN_SUFFIX = ".json"

GoalPredicate = Callable[["ReleaseVersion"], bool]


@dataclass(frozen=True, slots=True, order=True)
class ReleaseVersion:
    major: int
    minor: int

    def __str__(self) -> str:
        return f"{self.major}.{self.minor}"

    def bump(self, kind: BumpKind) -> ReleaseVersion:
        match kind:
            case "major":
                return ReleaseVersion(self.major + 1, 0)
            case "minor":
                return ReleaseVersion(self.major, self.minor + 1)
            case _:
                raise AssertionError(f"unexpected bump kind: {kind}")


def parse_version(text: str) -> ReleaseVersion | None:
    m = _VERSION_RE.fullmatch(text)
    if m is None:
        return None
    return ReleaseVersion(int(m.group(1)), int(m.group(2)))


def parse_goal(text: str) -> Result[GoalPredicate, ReleaseError]:
    """Turn a goal expression into a filter over existing versions.

    ""       -> every version
    "N"      -> versions whose major is <= N
    "N.M"    -> versions strictly below N.M
    """
    if text == "":
        return Ok(lambda _v: True)

    m = _MAJOR_RE.fullmatch(text)
    if m is not None:
        limit = int(m.group(1))
        return Ok(lambda v: v.major <= limit)

    bound = parse_version(text)
    if bound is None:
        return Err(
            ReleaseError(
                kind="goal_parse",
                message=f"invalid goal expression: {text!r}",
                hint="Use MAJOR or MAJOR.MINOR, e.g. 8 or 8.2.",
            )
        )
    return Ok(lambda v: v < bound)


def train_plan_name(version: ReleaseVersion) -> str:
    return f"{TRAIN_PLAN_PREFIX}{version}{PLAN_SUFFIX}"


def parse_train_plan_name(name: str) -> ReleaseVersion | None:
    if not name.startswith(TRAIN_PLAN_PREFIX) or not name.endswith(PLAN_SUFFIX):
        return None
    return parse_version(name[len(TRAIN_PLAN_PREFIX) : -len(PLAN_SUFFIX)])


def rolling_plan_name(day: str) -> str:
    return f"nightly-{day}{PLAN_SUFFIX}"
