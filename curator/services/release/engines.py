"""Contracts for the collaborators the pipeline drives.

The pipeline only ever talks to these protocols. Production implementations
live in ``external.py`` (command-line engines), ``http_client.py`` (publish
endpoints) and ``source_control.py`` (git); tests substitute in-memory fakes.
"""

from __future__ import annotations

from datetime import date, datetime, timezone
from pathlib import Path
from typing import Protocol

from curator.core.result import Result
from curator.services.release.errors import EngineError
from curator.services.release.model import (
    BuildConstraints,
    BuildOptions,
    BuildPlan,
    Credentials,
    SnapshotKind,
    UploadedSnapshot,
    UploadRequest,
)


class PlanEngine(Protocol):
    def default_constraints(self) -> Result[BuildConstraints, EngineError]: ...

    def update_constraints(self, prior: BuildPlan) -> Result[BuildConstraints, EngineError]:
        """Constraints that keep a new plan close to ``prior``."""
        ...

    def new_plan(self, constraints: BuildConstraints) -> Result[BuildPlan, EngineError]: ...


class PlanValidator(Protocol):
    def validate(self, plan: BuildPlan) -> Result[None, EngineError]: ...


class BuildExecutor(Protocol):
    def execute(self, options: BuildOptions) -> Result[tuple[str, ...], EngineError]:
        """Build the plan and return the build log lines."""
        ...


class BundleCodec(Protocol):
    def create_bundle(
        self,
        *,
        plan: BuildPlan,
        snapshot: SnapshotKind,
        docs_dir: Path,
        dest: Path,
    ) -> Result[Path, EngineError]: ...


class PublishClient(Protocol):
    def upload_bundle_v2(
        self, *, server: str, token: str, bundle: Path
    ) -> Result[str, EngineError]:
        """Upload a prebuilt bundle; returns the new snapshot's location."""
        ...

    def upload_bundle(self, request: UploadRequest) -> Result[UploadedSnapshot, EngineError]: ...

    def upload_docs(
        self, *, server: str, token: str, docs_dir: Path, ident: str
    ) -> Result[str, EngineError]: ...

    def upload_doc_map(
        self, *, server: str, token: str, ident: str, docs_dir: Path, plan: BuildPlan
    ) -> Result[str, EngineError]: ...

    def upload_distro(
        self, *, distro_name: str, plan: BuildPlan, credentials: Credentials
    ) -> Result[str, EngineError]: ...


class SourceControlClient(Protocol):
    def add(self, path: Path) -> Result[None, EngineError]: ...

    def commit(self, message: str) -> Result[None, EngineError]: ...

    def push(self) -> Result[None, EngineError]: ...


class Clock(Protocol):
    def today(self) -> date: ...

    def now_epoch(self) -> int: ...


class SystemClock:
    """UTC wall clock."""

    def today(self) -> date:
        return datetime.now(timezone.utc).date()

    def now_epoch(self) -> int:
        return int(datetime.now(timezone.utc).timestamp())
