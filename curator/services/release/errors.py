from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

ReleaseErrorKind = Literal[
    "goal_parse",
    "missing_base_version",
    "plan_failed",
    "plan_read_failed",
    "plan_write_failed",
    "validation_failed",
    "build_failed",
    "bundle_failed",
    "auth_token_missing",
    "post_build_failed",
]


@dataclass(frozen=True, slots=True)
class ReleaseError:
    kind: ReleaseErrorKind
    message: str
    hint: str | None = None

    def pretty(self) -> str:
        if self.hint:
            return f"{self.message} (hint: {self.hint})"
        return self.message


@dataclass(frozen=True, slots=True)
class EngineError:
    """Failure reported by an external collaborator.

    ``log`` holds whatever output the collaborator produced before failing,
    so partial build logs can still be flushed.
    """

    message: str
    log: tuple[str, ...] = ()
