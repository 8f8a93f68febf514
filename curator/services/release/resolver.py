from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from pathlib import Path

from curator.core.result import Err, Ok, Result
from curator.services.release.errors import ReleaseError
from curator.services.release.model import TrainRequest
from curator.services.release.version import ReleaseVersion, parse_goal, parse_train_plan_name


@dataclass(frozen=True, slots=True)
class TrainResolution:
    """Outcome of picking the next train version.

    ``base`` is the newest existing version matching the goal. Minor bumps
    always have one and derive their constraints from its plan file.
    """

    version: ReleaseVersion
    base: ReleaseVersion | None


def scan_train_versions(plan_dir: Path) -> frozenset[ReleaseVersion]:
    """Collect versions from ``lts-X.Y.json`` plan files in ``plan_dir``."""
    if not plan_dir.is_dir():
        return frozenset()

    found: set[ReleaseVersion] = set()
    for entry in plan_dir.iterdir():
        if not entry.is_file():
            continue
        v = parse_train_plan_name(entry.name)
        if v is not None:
            found.add(v)
    return frozenset(found)


def resolve_train_version(
    request: TrainRequest,
    existing: Iterable[ReleaseVersion],
) -> Result[TrainResolution, ReleaseError]:
    matches = parse_goal(request.goal)
    if isinstance(matches, Err):
        return matches

    candidates = [v for v in existing if matches.value(v)]
    base = max(candidates) if candidates else None

    match request.bump:
        case "major":
            new = base.bump("major") if base is not None else ReleaseVersion(0, 0)
            return Ok(TrainResolution(version=new, base=base))
        case "minor":
            if base is None:
                goal = f" matching goal {request.goal!r}" if request.goal else ""
                return Err(
                    ReleaseError(
                        kind="missing_base_version",
                        message=f"no existing LTS plans{goal}; cannot do a minor bump",
                        hint="Run a major bump first, or check the working directory.",
                    )
                )
            return Ok(TrainResolution(version=base.bump("minor"), base=base))
        case _:
            raise AssertionError(f"unexpected bump kind: {request.bump}")
