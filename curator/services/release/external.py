"""Collaborators backed by external command-line tools.

Each tool is configured as an argv prefix in ``curator.toml`` and exchanges
plans and constraints as JSON files in a scratch directory under the
working root. A non-zero exit is reported as an EngineError carrying the
tool's output.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path

from curator.core.result import Err, Ok, Result
from curator.core.structured import as_str_dict
from curator.platform.files import atomic_write_text
from curator.platform.process import run as run_process
from curator.services.release.errors import EngineError
from curator.services.release.model import (
    BuildConstraints,
    BuildOptions,
    BuildPlan,
    SnapshotKind,
)
from curator.services.release.plan_file import plan_from_obj, plan_to_dict
from curator.services.release.timeouts import ENGINE_TIMEOUT_SECONDS

SCRATCH_DIR = ".curator"


def _scratch(root: Path, name: str) -> Path:
    path = root / SCRATCH_DIR / name
    path.parent.mkdir(parents=True, exist_ok=True)
    return path


def _run_tool(
    command: tuple[str, ...], args: list[str], *, cwd: Path
) -> Result[str, EngineError]:
    result = run_process([*command, *args], cwd=cwd, timeout=ENGINE_TIMEOUT_SECONDS)
    if isinstance(result, Err):
        e = result.error
        log = tuple((e.stdout + e.stderr).splitlines())
        return Err(EngineError(message=f"{command[0]}: {e.detail()}", log=log))
    return Ok(result.value)


def _write_json(path: Path, payload: object) -> Result[Path, EngineError]:
    try:
        atomic_write_text(path, json.dumps(payload, indent=2) + "\n")
    except OSError as e:
        return Err(EngineError(message=f"failed to write {path}: {e}"))
    return Ok(path)


def _read_json(path: Path) -> Result[object, EngineError]:
    try:
        return Ok(json.loads(path.read_text(encoding="utf-8")))
    except OSError as e:
        return Err(EngineError(message=f"failed to read {path}: {e}"))
    except json.JSONDecodeError as e:
        return Err(EngineError(message=f"invalid JSON in {path}: {e}"))


def _write_plan(root: Path, name: str, plan: BuildPlan) -> Result[Path, EngineError]:
    return _write_json(_scratch(root, name), plan_to_dict(plan))


@dataclass(frozen=True, slots=True)
class CommandPlanEngine:
    command: tuple[str, ...]
    root: Path

    def _constraints(self, args: list[str], *, origin: str) -> Result[BuildConstraints, EngineError]:
        out = _scratch(self.root, "constraints.json")
        ran = _run_tool(self.command, [*args, "--out", str(out)], cwd=self.root)
        if isinstance(ran, Err):
            return ran
        obj = _read_json(out)
        if isinstance(obj, Err):
            return obj
        payload = as_str_dict(obj.value)
        if payload is None:
            return Err(EngineError(message=f"constraints must be a JSON object: {out}"))
        return Ok(BuildConstraints(origin=origin, payload=payload))

    def default_constraints(self) -> Result[BuildConstraints, EngineError]:
        return self._constraints(["constraints"], origin="default")

    def update_constraints(self, prior: BuildPlan) -> Result[BuildConstraints, EngineError]:
        prior_path = _write_plan(self.root, "prior-plan.json", prior)
        if isinstance(prior_path, Err):
            return prior_path
        return self._constraints(["update", "--prior", str(prior_path.value)], origin="prior")

    def new_plan(self, constraints: BuildConstraints) -> Result[BuildPlan, EngineError]:
        src = _write_json(_scratch(self.root, "constraints.json"), constraints.payload)
        if isinstance(src, Err):
            return src
        out = _scratch(self.root, "plan.json")
        ran = _run_tool(
            self.command,
            ["plan", "--constraints", str(src.value), "--out", str(out)],
            cwd=self.root,
        )
        if isinstance(ran, Err):
            return ran
        obj = _read_json(out)
        if isinstance(obj, Err):
            return obj
        plan = plan_from_obj(obj.value)
        if isinstance(plan, Err):
            return Err(EngineError(message=f"{out}: {plan.error}"))
        return Ok(plan.value)


@dataclass(frozen=True, slots=True)
class CommandPlanValidator:
    command: tuple[str, ...]
    root: Path

    def validate(self, plan: BuildPlan) -> Result[None, EngineError]:
        path = _write_plan(self.root, "check-input.json", plan)
        if isinstance(path, Err):
            return path
        ran = _run_tool(self.command, ["--plan", str(path.value)], cwd=self.root)
        if isinstance(ran, Err):
            return ran
        return Ok(None)


@dataclass(frozen=True, slots=True)
class CommandBuildExecutor:
    command: tuple[str, ...]
    root: Path

    def execute(self, options: BuildOptions) -> Result[tuple[str, ...], EngineError]:
        path = _write_plan(self.root, "build-plan.json", options.plan)
        if isinstance(path, Err):
            return path

        args = [
            "--plan",
            str(path.value),
            "--install-dest",
            str(options.install_dest),
            "--log-dir",
            str(options.log_dir),
            "--docs-dir",
            str(options.docs_dir),
            "--jobs",
            str(options.jobs),
        ]
        toggles = (
            (options.global_install, "--global-install"),
            (options.enable_tests, "--enable-tests"),
            (options.enable_docs, "--enable-docs"),
            (options.enable_lib_profiling, "--enable-library-profiling"),
            (options.enable_exec_dyn, "--enable-executable-dynamic"),
            (options.verbose, "--verbose"),
            (options.allow_newer, "--allow-newer"),
            (options.build_doc_index, "--build-doc-index"),
        )
        args.extend(flag for enabled, flag in toggles if enabled)

        ran = _run_tool(self.command, args, cwd=self.root)
        if isinstance(ran, Err):
            return ran
        return Ok(tuple(ran.value.splitlines()))


@dataclass(frozen=True, slots=True)
class CommandBundleCodec:
    command: tuple[str, ...]
    root: Path

    def create_bundle(
        self,
        *,
        plan: BuildPlan,
        snapshot: SnapshotKind,
        docs_dir: Path,
        dest: Path,
    ) -> Result[Path, EngineError]:
        path = _write_plan(self.root, "bundle-plan.json", plan)
        if isinstance(path, Err):
            return path
        ran = _run_tool(
            self.command,
            [
                "--plan",
                str(path.value),
                "--snapshot",
                snapshot.label,
                "--docs-dir",
                str(docs_dir),
                "--dest",
                str(dest),
            ],
            cwd=self.root,
        )
        if isinstance(ran, Err):
            return ran
        if not dest.is_file():
            return Err(EngineError(message=f"bundler reported success but {dest} is missing"))
        return Ok(dest)
