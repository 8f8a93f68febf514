from __future__ import annotations

import json
from pathlib import Path

from curator.core.result import Err, Ok, Result
from curator.core.structured import as_obj_list, as_str_dict, get_int, get_list, get_str
from curator.platform.files import atomic_write_text
from curator.services.release.errors import ReleaseError
from curator.services.release.model import BuildPlan, PlannedPackage

PLAN_SCHEMA = 1


def plan_to_dict(plan: BuildPlan) -> dict[str, object]:
    return {
        "schema": PLAN_SCHEMA,
        "compiler": plan.compiler_version,
        "packages": [{"name": p.name, "version": p.version} for p in plan.packages],
    }


def plan_from_obj(obj: object) -> Result[BuildPlan, str]:
    """Validate a decoded plan payload."""
    data = as_str_dict(obj)
    if data is None:
        return Err("plan root must be a JSON object")

    schema = get_int(data, "schema")
    if schema != PLAN_SCHEMA:
        return Err(f"unsupported plan schema: {schema}")

    compiler = get_str(data, "compiler")
    if compiler is None:
        return Err("missing compiler version in plan")

    packages_obj = get_list(data, "packages")
    if packages_obj is None:
        return Err("missing packages[] in plan")

    packages: list[PlannedPackage] = []
    seen: set[str] = set()
    for item in as_obj_list(packages_obj) or []:
        d = as_str_dict(item)
        if d is None:
            return Err("plan packages must be objects")
        name = get_str(d, "name")
        version = get_str(d, "version")
        if name is None or version is None:
            return Err("plan package entries need a name and a version")
        if name in seen:
            return Err(f"duplicate package in plan: {name}")
        seen.add(name)
        packages.append(PlannedPackage(name=name, version=version))

    return Ok(BuildPlan(compiler_version=compiler, packages=tuple(packages)))


def write_plan_file(*, path: Path, plan: BuildPlan) -> Result[None, ReleaseError]:
    try:
        atomic_write_text(path, json.dumps(plan_to_dict(plan), indent=2) + "\n")
    except OSError as e:
        return Err(
            ReleaseError(
                kind="plan_write_failed",
                message=f"failed to write plan file: {e}",
                hint=str(path),
            )
        )
    return Ok(None)


def read_plan_file(*, path: Path) -> Result[BuildPlan, ReleaseError]:
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as e:
        return Err(
            ReleaseError(
                kind="plan_read_failed",
                message=f"failed to read plan file: {e}",
                hint=str(path),
            )
        )

    try:
        obj: object = json.loads(text)
    except json.JSONDecodeError as e:
        return Err(
            ReleaseError(
                kind="plan_read_failed",
                message=f"invalid JSON in plan file: {e}",
                hint=str(path),
            )
        )

    plan = plan_from_obj(obj)
    if isinstance(plan, Err):
        return Err(ReleaseError(kind="plan_read_failed", message=plan.error, hint=str(path)))
    return Ok(plan.value)
