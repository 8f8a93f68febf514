"""The ordered release pipeline.

resolve -> persist plan -> validate (optional) -> build -> bundle -> publish

Every step before publishing is fail-fast: the first Err ends the run.
Publishing is delegated to ``publish.publish`` and never ends the run early.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path

from curator.core.config import Config, ServersConfig
from curator.core.result import Err, Ok, Result
from curator.output.console import ConsoleProtocol, Style
from curator.services.release import config as release_config
from curator.services.release.engines import (
    BuildExecutor,
    BundleCodec,
    Clock,
    PlanEngine,
    PlanValidator,
    PublishClient,
    SourceControlClient,
)
from curator.services.release.errors import ReleaseError
from curator.services.release.model import (
    BuildFlags,
    BuildOptions,
    BuildPlan,
    ReleaseRequest,
    ServerName,
)
from curator.services.release.plan_file import read_plan_file, write_plan_file
from curator.services.release.publish import PublishReport, publish
from curator.services.release.settings import (
    ResolvedSettings,
    derive_fresh_plan,
    load_settings,
    rolling_settings,
)
from curator.services.release.version import rolling_plan_name


@dataclass(frozen=True, slots=True)
class Collaborators:
    engine: PlanEngine
    validator: PlanValidator
    executor: BuildExecutor
    codec: BundleCodec
    publisher: PublishClient
    source_control: SourceControlClient
    clock: Clock


@dataclass(frozen=True, slots=True)
class RunReport:
    settings: ResolvedSettings
    validated: bool
    build_log: tuple[str, ...]
    bundle: Path
    publish: PublishReport | None


def server_url(servers: ServersConfig, name: ServerName) -> str:
    match name:
        case "production":
            return servers.production
        case "staging":
            return servers.staging
        case _:
            raise AssertionError(f"unexpected server: {name}")


def build_options(flags: BuildFlags, settings: ResolvedSettings, *, jobs: int) -> BuildOptions:
    return BuildOptions(
        plan=settings.plan,
        install_dest=settings.build_dir,
        log_dir=settings.log_dir,
        jobs=jobs,
        global_install=False,
        enable_tests=flags.enable_tests,
        enable_docs=flags.enable_docs,
        enable_lib_profiling=flags.enable_lib_profiling,
        enable_exec_dyn=flags.enable_exec_dyn,
        verbose=flags.verbose,
        allow_newer=flags.skip_check,
        build_doc_index=flags.build_doc_index,
    )


def _validate(
    plan: BuildPlan, *, validator: PlanValidator, console: ConsoleProtocol
) -> Result[None, ReleaseError]:
    console.print("Checking build plan")
    checked = validator.validate(plan)
    if isinstance(checked, Err):
        return Err(
            ReleaseError(
                kind="validation_failed",
                message=f"validate stage failed: {checked.error.message}",
                hint="Fix the plan or rerun with --skip-check.",
            )
        )
    return Ok(None)


def complete_build(
    request: ReleaseRequest,
    flags: BuildFlags,
    *,
    collaborators: Collaborators,
    root: Path,
    config: Config,
    console: ConsoleProtocol,
    environ: Mapping[str, str] | None = None,
) -> Result[RunReport, ReleaseError]:
    """Plan, build, bundle and (optionally) publish one release."""
    c = collaborators

    console.print(f"Loading settings for: {request.describe()}")
    loaded = load_settings(
        request,
        root=root,
        engine=c.engine,
        clock=c.clock,
        source_control=c.source_control,
        console=console,
    )
    if isinstance(loaded, Err):
        return loaded
    settings = loaded.value

    console.print(f"Writing build plan to: {settings.plan_file}")
    written = write_plan_file(path=settings.plan_file, plan=settings.plan)
    if isinstance(written, Err):
        return written

    validated = not flags.skip_check
    if flags.skip_check:
        console.print("Skipping build plan check", Style.DIM)
    else:
        checked = _validate(settings.plan, validator=c.validator, console=console)
        if isinstance(checked, Err):
            return checked

    console.print("Performing build")
    options = build_options(flags, settings, jobs=config.build.jobs)
    built = c.executor.execute(options)
    if isinstance(built, Err):
        for line in built.error.log:
            console.print(line)
        return Err(
            ReleaseError(
                kind="build_failed",
                message=f"build stage failed: {built.error.message}",
                hint=str(settings.log_dir),
            )
        )
    for line in built.value:
        console.print(line)

    console.print(f"Creating bundle at: {settings.bundle_dest}")
    bundle = c.codec.create_bundle(
        plan=settings.plan,
        snapshot=settings.snapshot,
        docs_dir=options.docs_dir,
        dest=settings.bundle_dest,
    )
    if isinstance(bundle, Err):
        return Err(
            ReleaseError(
                kind="bundle_failed",
                message=f"bundle stage failed: {bundle.error.message}",
                hint=str(settings.bundle_dest),
            )
        )

    report: PublishReport | None = None
    if flags.do_upload:
        report = publish(
            settings,
            client=c.publisher,
            auth=config.auth,
            legacy=flags.legacy_upload,
            server=server_url(config.servers, flags.server),
            docs_dir=options.docs_dir,
            clock=c.clock,
            console=console,
            environ=environ,
        )
    else:
        console.print("Upload disabled, not publishing", Style.DIM)

    return Ok(
        RunReport(
            settings=settings,
            validated=validated,
            build_log=built.value,
            bundle=bundle.value,
            publish=report,
        )
    )


def just_check(
    *,
    engine: PlanEngine,
    validator: PlanValidator,
    root: Path,
    console: ConsoleProtocol,
) -> Result[BuildPlan, ReleaseError]:
    """Generate and validate a fresh plan without building it."""
    console.print("Creating build plan")
    plan = derive_fresh_plan(engine)
    if isinstance(plan, Err):
        return plan

    path = root / release_config.CHECK_PLAN_FILE
    console.print(f"Writing build plan to {path}")
    written = write_plan_file(path=path, plan=plan.value)
    if isinstance(written, Err):
        return written

    checked = _validate(plan.value, validator=validator, console=console)
    if isinstance(checked, Err):
        return checked

    console.success("Plan seems valid!")
    return Ok(plan.value)


def just_upload_rolling(
    day: str,
    *,
    collaborators: Collaborators,
    root: Path,
    config: Config,
    console: ConsoleProtocol,
    environ: Mapping[str, str] | None = None,
) -> Result[PublishReport, ReleaseError]:
    """Re-publish an already built rolling snapshot from its plan file."""
    plan = read_plan_file(path=root / rolling_plan_name(day))
    if isinstance(plan, Err):
        return plan

    settings = rolling_settings(root=root, day=day, plan=plan.value)
    options = build_options(BuildFlags(), settings, jobs=config.build.jobs)
    return Ok(
        publish(
            settings,
            client=collaborators.publisher,
            auth=config.auth,
            legacy=True,
            server=config.servers.production,
            docs_dir=options.docs_dir,
            clock=collaborators.clock,
            console=console,
            environ=environ,
        )
    )
