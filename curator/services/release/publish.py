"""Best-effort publication of a finished build.

Each remote call is its own stage. A failing stage is recorded in the
report and the remaining stages still run; only a missing auth token stops
publishing altogether.
"""

from __future__ import annotations

import os
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from pathlib import Path
from typing import Literal, Protocol, TypeVar

from curator.core.config import AuthConfig
from curator.core.result import Err, Result
from curator.output.console import ConsoleProtocol, Style
from curator.services.release.credentials import read_auth_token, read_distro_credentials
from curator.services.release.engines import Clock, PublishClient
from curator.services.release.errors import ReleaseError
from curator.services.release.model import SnapshotContents, UploadRequest
from curator.services.release.settings import ResolvedSettings

T = TypeVar("T")

PublishStage = Literal["bundle", "snapshot", "docs", "doc_map", "distro", "post_build"]
StageStatus = Literal["succeeded", "failed", "skipped"]


@dataclass(frozen=True, slots=True)
class StageOutcome:
    stage: PublishStage
    status: StageStatus
    detail: str


@dataclass(frozen=True, slots=True)
class PublishReport:
    outcomes: tuple[StageOutcome, ...] = ()
    fatal: ReleaseError | None = None

    def outcome(self, stage: PublishStage) -> StageOutcome | None:
        for o in self.outcomes:
            if o.stage == stage:
                return o
        return None

    @property
    def failed(self) -> tuple[StageOutcome, ...]:
        return tuple(o for o in self.outcomes if o.status == "failed")


class _HasMessage(Protocol):
    @property
    def message(self) -> str: ...


class _StageRecorder:
    """Runs stages one at a time and owns the outcome list."""

    def __init__(self, console: ConsoleProtocol) -> None:
        self._console = console
        self._outcomes: list[StageOutcome] = []

    @property
    def outcomes(self) -> tuple[StageOutcome, ...]:
        return tuple(self._outcomes)

    def run(
        self,
        stage: PublishStage,
        label: str,
        call: Callable[[], Result[T, _HasMessage]],
        *,
        describe: Callable[[T], str] = str,
    ) -> T | None:
        self._console.print(label)
        try:
            result = call()
            if isinstance(result, Err):
                return self._failed(stage, result.error.message)
            detail = describe(result.value)
        except Exception as e:  # remote clients may raise; the stage still only fails itself
            return self._failed(stage, f"{type(e).__name__}: {e}")

        self._outcomes.append(StageOutcome(stage=stage, status="succeeded", detail=detail))
        return result.value

    def skip(self, stage: PublishStage, reason: str) -> None:
        self._console.print(reason, Style.DIM)
        self._outcomes.append(StageOutcome(stage=stage, status="skipped", detail=reason))

    def _failed(self, stage: PublishStage, detail: str) -> None:
        self._console.warning(f"{stage} upload failed: {detail}")
        self._outcomes.append(StageOutcome(stage=stage, status="failed", detail=detail))
        return None


def publish(
    settings: ResolvedSettings,
    *,
    client: PublishClient,
    auth: AuthConfig,
    legacy: bool,
    server: str,
    docs_dir: Path,
    clock: Clock,
    console: ConsoleProtocol,
    environ: Mapping[str, str] | None = None,
) -> PublishReport:
    console.header(f"Publishing {settings.slug}")
    token = read_auth_token(
        env_var=auth.token_env,
        token_file=auth.token_file,
        environ=os.environ if environ is None else environ,
    )
    if isinstance(token, Err):
        console.error(token.error.pretty())
        return PublishReport(fatal=token.error)

    stages = _StageRecorder(console)
    if legacy:
        _publish_legacy(
            settings,
            stages=stages,
            client=client,
            auth=auth,
            token=token.value,
            server=server,
            docs_dir=docs_dir,
            clock=clock,
            console=console,
        )
    else:
        location = stages.run(
            "bundle",
            f"Uploading bundle to {server}",
            lambda: client.upload_bundle_v2(
                server=server, token=token.value, bundle=settings.bundle_dest
            ),
        )
        if location is not None:
            console.success(f"New snapshot available at: {location}")

    stages.run(
        "post_build",
        "Running post-build step",
        settings.post_build.run,
        describe=lambda _: "done",
    )
    return PublishReport(outcomes=stages.outcomes)


def _publish_legacy(
    settings: ResolvedSettings,
    *,
    stages: _StageRecorder,
    client: PublishClient,
    auth: AuthConfig,
    token: str,
    server: str,
    docs_dir: Path,
    clock: Clock,
    console: ConsoleProtocol,
) -> None:
    plan = settings.plan
    compiler = plan.compiler_version
    request = settings.upload_tag.apply(
        compiler,
        UploadRequest(
            contents=SnapshotContents(
                created_at=clock.now_epoch(),
                title=settings.title.format(compiler),
                slug=settings.slug,
                plan=plan,
            ),
            auth_token=token,
            server=server,
        ),
    )

    snapshot = stages.run(
        "snapshot",
        f"Uploading snapshot to {server}",
        lambda: client.upload_bundle(request),
        describe=lambda s: s.ident,
    )
    if snapshot is None:
        stages.skip("docs", "No snapshot identifier, skipping docs upload")
        stages.skip("doc_map", "No snapshot identifier, skipping doc map upload")
    else:
        ident = snapshot.ident
        console.print(f"New ident: {ident}")
        if snapshot.location is not None:
            console.print(f"Track progress at: {snapshot.location}")

        stages.run(
            "docs",
            "Uploading docs",
            lambda: client.upload_docs(server=server, token=token, docs_dir=docs_dir, ident=ident),
        )
        stages.run(
            "doc_map",
            "Uploading doc map",
            lambda: client.upload_doc_map(
                server=server, token=token, ident=ident, docs_dir=docs_dir, plan=plan
            ),
        )

    creds = read_distro_credentials(auth.credentials_file)
    if creds is None:
        stages.skip("distro", "No credentials found, skipping archive distro upload")
        return
    stages.run(
        "distro",
        f"Uploading {settings.distro_name} distro",
        lambda: client.upload_distro(distro_name=settings.distro_name, plan=plan, credentials=creds),
    )


def render_report(report: PublishReport, console: ConsoleProtocol) -> None:
    console.header("Publish report")
    if report.fatal is not None:
        console.error(f"publishing aborted: {report.fatal.pretty()}")
        return
    for o in report.outcomes:
        match o.status:
            case "succeeded":
                console.success(f"{o.stage}: {o.detail}")
            case "skipped":
                console.print(f"{o.stage}: skipped ({o.detail})", Style.DIM)
            case "failed":
                console.error(f"{o.stage}: {o.detail}")
