from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Literal

BumpKind = Literal["major", "minor"]
ServerName = Literal["production", "staging"]


@dataclass(frozen=True, slots=True)
class RollingRequest:
    """Build today's date-keyed snapshot from fresh constraints."""

    def describe(self) -> str:
        return "rolling"


@dataclass(frozen=True, slots=True)
class TrainRequest:
    """Bump the long-term-support train.

    ``goal`` narrows which existing versions may serve as the bump base
    (see ``version.parse_goal``); empty means any.
    """

    bump: BumpKind
    goal: str = ""

    def describe(self) -> str:
        if self.goal:
            return f"lts {self.bump} (goal {self.goal})"
        return f"lts {self.bump}"


ReleaseRequest = RollingRequest | TrainRequest


@dataclass(frozen=True, slots=True, order=True)
class PlannedPackage:
    name: str
    version: str


@dataclass(frozen=True, slots=True)
class BuildPlan:
    """A fully resolved package set, as produced by the plan engine."""

    compiler_version: str
    packages: tuple[PlannedPackage, ...] = ()

    def package_names(self) -> tuple[str, ...]:
        return tuple(p.name for p in self.packages)


@dataclass(frozen=True, slots=True)
class BuildConstraints:
    """Opaque input to the plan engine.

    ``origin`` records where the constraints came from ("default" or the
    slug of the prior plan they were updated from).
    """

    origin: str
    payload: dict[str, object] = field(default_factory=dict, hash=False)


@dataclass(frozen=True, slots=True)
class RollingSnapshot:
    day: str

    @property
    def label(self) -> str:
        return f"nightly-{self.day}"


@dataclass(frozen=True, slots=True)
class LtsSnapshot:
    major: int
    minor: int

    @property
    def label(self) -> str:
        return f"lts-{self.major}.{self.minor}"


SnapshotKind = RollingSnapshot | LtsSnapshot


@dataclass(frozen=True, slots=True)
class BuildFlags:
    """Command-line toggles for one pipeline run."""

    enable_tests: bool = False
    enable_docs: bool = False
    do_upload: bool = False
    enable_lib_profiling: bool = False
    enable_exec_dyn: bool = False
    verbose: bool = False
    skip_check: bool = False
    legacy_upload: bool = False
    build_doc_index: bool = False
    server: ServerName = "production"


@dataclass(frozen=True, slots=True)
class BuildOptions:
    """What the build executor is asked to do."""

    plan: BuildPlan
    install_dest: Path
    log_dir: Path
    jobs: int
    global_install: bool
    enable_tests: bool
    enable_docs: bool
    enable_lib_profiling: bool
    enable_exec_dyn: bool
    verbose: bool
    allow_newer: bool
    build_doc_index: bool

    @property
    def docs_dir(self) -> Path:
        return self.install_dest / "doc"


@dataclass(frozen=True, slots=True)
class SnapshotContents:
    created_at: int
    title: str
    slug: str
    plan: BuildPlan


@dataclass(frozen=True, slots=True)
class UploadRequest:
    """Legacy-protocol snapshot upload."""

    contents: SnapshotContents
    auth_token: str
    server: str
    nightly: str | None = None
    lts: str | None = None


@dataclass(frozen=True, slots=True)
class UploadedSnapshot:
    ident: str
    location: str | None = None


@dataclass(frozen=True, slots=True)
class Credentials:
    username: str
    password: str

    def __repr__(self) -> str:
        return f"Credentials(username={self.username!r}, password=***)"
