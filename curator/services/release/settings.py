"""Per-run settings derived from the resolved release identity.

Everything later stages need to know about "which release is this" is
captured once here and never changed afterwards.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from pathlib import Path
from typing import Literal, Protocol

from curator.core.result import Err, Ok, Result
from curator.output.console import ConsoleProtocol
from curator.services.release import config
from curator.services.release.engines import Clock, PlanEngine, SourceControlClient
from curator.services.release.errors import EngineError, ReleaseError
from curator.services.release.model import (
    BuildConstraints,
    BuildPlan,
    LtsSnapshot,
    ReleaseRequest,
    RollingRequest,
    RollingSnapshot,
    SnapshotKind,
    TrainRequest,
    UploadRequest,
)
from curator.services.release.plan_file import read_plan_file
from curator.services.release.resolver import resolve_train_version, scan_train_versions
from curator.services.release.version import (
    ReleaseVersion,
    rolling_plan_name,
    train_plan_name,
)


@dataclass(frozen=True, slots=True)
class SnapshotTitle:
    """Display title for a snapshot, completed with the compiler version."""

    label: str

    def format(self, compiler_version: str) -> str:
        return f"{self.label}, compiler {compiler_version}"


@dataclass(frozen=True, slots=True)
class UploadTag:
    """Marks a legacy upload request as a nightly or an LTS snapshot."""

    channel: Literal["nightly", "lts"]
    value: str | None = None

    def apply(self, compiler_version: str, request: UploadRequest) -> UploadRequest:
        match self.channel:
            case "nightly":
                return replace(request, nightly=compiler_version)
            case "lts":
                return replace(request, lts=self.value)
            case _:
                raise AssertionError(f"unexpected upload tag: {self.channel}")


class PostBuildHook(Protocol):
    def run(self) -> Result[None, ReleaseError]: ...


@dataclass(frozen=True, slots=True)
class NoPostBuild:
    def run(self) -> Result[None, ReleaseError]:
        return Ok(None)


@dataclass(frozen=True, slots=True)
class CommitPlanFile:
    """Stage, commit and push a new train plan file."""

    source_control: SourceControlClient
    plan_file: Path
    version: ReleaseVersion
    console: ConsoleProtocol

    def run(self) -> Result[None, ReleaseError]:
        self.console.print("Committing new LTS file to Git")
        added = self.source_control.add(self.plan_file)
        if isinstance(added, Err):
            return self._failed("git add", added.error)

        message = config.TRAIN_COMMIT_MESSAGE.format(version=self.version)
        committed = self.source_control.commit(message)
        if isinstance(committed, Err):
            return self._failed("git commit", committed.error)

        self.console.print("Pushing to Git repository")
        pushed = self.source_control.push()
        if isinstance(pushed, Err):
            return self._failed("git push", pushed.error)
        return Ok(None)

    def _failed(self, step: str, error: EngineError) -> Err[ReleaseError]:
        return Err(
            ReleaseError(
                kind="post_build_failed",
                message=f"{step} failed: {error.message}",
                hint=str(self.plan_file),
            )
        )


@dataclass(frozen=True, slots=True)
class ResolvedSettings:
    plan: BuildPlan
    plan_file: Path
    build_dir: Path
    log_dir: Path
    title: SnapshotTitle
    slug: str
    upload_tag: UploadTag
    post_build: PostBuildHook
    distro_name: str
    snapshot: SnapshotKind
    bundle_dest: Path


def rolling_settings(*, root: Path, day: str, plan: BuildPlan) -> ResolvedSettings:
    snapshot = RollingSnapshot(day=day)
    return ResolvedSettings(
        plan=plan,
        plan_file=root / rolling_plan_name(day),
        build_dir=root / config.ROLLING_BUILD_DIR,
        log_dir=root / config.LOGS_DIR / f"{config.ARTIFACT_PREFIX}-{snapshot.label}",
        title=SnapshotTitle(label=f"{config.ROLLING_TITLE_PREFIX} {day}"),
        slug=snapshot.label,
        upload_tag=UploadTag(channel="nightly"),
        post_build=NoPostBuild(),
        distro_name=config.ROLLING_DISTRO_NAME,
        snapshot=snapshot,
        bundle_dest=root / f"{config.ARTIFACT_PREFIX}-{snapshot.label}.bundle",
    )


def train_settings(
    *,
    root: Path,
    version: ReleaseVersion,
    plan: BuildPlan,
    source_control: SourceControlClient,
    console: ConsoleProtocol,
) -> ResolvedSettings:
    snapshot = LtsSnapshot(major=version.major, minor=version.minor)
    plan_file = root / train_plan_name(version)
    return ResolvedSettings(
        plan=plan,
        plan_file=plan_file,
        build_dir=root / config.TRAIN_BUILD_DIR,
        log_dir=root / config.LOGS_DIR / f"{config.ARTIFACT_PREFIX}-{snapshot.label}",
        title=SnapshotTitle(label=f"{config.TRAIN_TITLE_PREFIX} {version}"),
        slug=snapshot.label,
        upload_tag=UploadTag(channel="lts", value=str(version)),
        post_build=CommitPlanFile(
            source_control=source_control,
            plan_file=plan_file,
            version=version,
            console=console,
        ),
        distro_name=config.TRAIN_DISTRO_NAME,
        snapshot=snapshot,
        bundle_dest=root / f"{config.ARTIFACT_PREFIX}-{snapshot.label}.bundle",
    )


def _plan_error(step: str, message: str) -> ReleaseError:
    return ReleaseError(kind="plan_failed", message=f"plan stage failed ({step}): {message}")


def derive_plan(
    engine: PlanEngine, constraints: BuildConstraints
) -> Result[BuildPlan, ReleaseError]:
    plan = engine.new_plan(constraints)
    if isinstance(plan, Err):
        return Err(_plan_error("new plan", plan.error.message))
    return Ok(plan.value)


def derive_fresh_plan(engine: PlanEngine) -> Result[BuildPlan, ReleaseError]:
    constraints = engine.default_constraints()
    if isinstance(constraints, Err):
        return Err(_plan_error("default constraints", constraints.error.message))
    return derive_plan(engine, constraints.value)


def load_settings(
    request: ReleaseRequest,
    *,
    root: Path,
    engine: PlanEngine,
    clock: Clock,
    source_control: SourceControlClient,
    console: ConsoleProtocol,
) -> Result[ResolvedSettings, ReleaseError]:
    """Resolve the release identity and derive its plan.

    Nothing is written to disk here; any failure leaves no side effects.
    """
    match request:
        case RollingRequest():
            day = clock.today().isoformat()
            plan = derive_fresh_plan(engine)
            if isinstance(plan, Err):
                return plan
            return Ok(rolling_settings(root=root, day=day, plan=plan.value))

        case TrainRequest(bump=bump):
            resolved = resolve_train_version(request, scan_train_versions(root))
            if isinstance(resolved, Err):
                return resolved
            version = resolved.value.version
            base = resolved.value.base

            if bump == "minor" and base is not None:
                prior = read_plan_file(path=root / train_plan_name(base))
                if isinstance(prior, Err):
                    return prior
                constraints = engine.update_constraints(prior.value)
                if isinstance(constraints, Err):
                    return Err(_plan_error("update constraints", constraints.error.message))
                plan = derive_plan(engine, constraints.value)
            else:
                plan = derive_fresh_plan(engine)
            if isinstance(plan, Err):
                return plan

            console.print(f"Resolved LTS version: {version}")
            return Ok(
                train_settings(
                    root=root,
                    version=version,
                    plan=plan.value,
                    source_control=source_control,
                    console=console,
                )
            )

        case _:
            raise AssertionError(f"unexpected release request: {request!r}")
