from __future__ import annotations

import typer

from curator.cli.commands._helpers import exit_user_error, exit_with_release_error, finish_publish
from curator.cli.context import build_context
from curator.core.result import Err
from curator.services.release.heartbeat import with_heartbeat
from curator.services.release.model import (
    BuildFlags,
    ReleaseRequest,
    RollingRequest,
    ServerName,
    TrainRequest,
)
from curator.services.release.pipeline import complete_build, just_check, just_upload_rolling
from curator.services.release.version import parse_goal


def _parse_request(target: str, goal: str) -> ReleaseRequest:
    match target:
        case "rolling":
            if goal:
                exit_user_error("--goal only applies to lts-major and lts-minor")
            return RollingRequest()
        case "lts-major" | "lts-minor":
            parsed = parse_goal(goal)
            if isinstance(parsed, Err):
                exit_user_error(parsed.error.message)
            return TrainRequest(bump="major" if target == "lts-major" else "minor", goal=goal)
        case _:
            exit_user_error(f"unknown target: {target} (expected rolling, lts-major or lts-minor)")


def _parse_server(value: str) -> ServerName:
    match value:
        case "production":
            return "production"
        case "staging":
            return "staging"
        case _:
            exit_user_error(f"unknown server: {value} (expected production or staging)")


def build(
    target: str = typer.Argument(..., help="Release kind: rolling | lts-major | lts-minor"),
    goal: str = typer.Option(
        "", "--goal", help="Restrict the LTS base: N (major <= N) or N.M (below N.M)"
    ),
    tests: bool = typer.Option(True, "--tests/--no-tests", help="Build and run test suites"),
    docs: bool = typer.Option(True, "--docs/--no-docs", help="Build documentation"),
    upload: bool = typer.Option(False, "--upload", help="Publish the finished snapshot"),
    profiling: bool = typer.Option(False, "--profiling", help="Enable library profiling"),
    dynamic_exes: bool = typer.Option(
        False, "--dynamic-exes", help="Link executables dynamically"
    ),
    verbose: bool = typer.Option(False, "--verbose", help="Verbose build output"),
    skip_check: bool = typer.Option(
        False, "--skip-check", help="Skip plan validation (allows newer dependencies)"
    ),
    legacy_upload: bool = typer.Option(
        False, "--legacy-upload", help="Use the multi-step upload protocol"
    ),
    doc_index: bool = typer.Option(False, "--doc-index", help="Build the documentation index"),
    server: str = typer.Option("production", "--server", help="Server: production|staging"),
) -> None:
    """Plan, build, bundle and optionally publish a snapshot."""
    request = _parse_request(target, goal)
    flags = BuildFlags(
        enable_tests=tests,
        enable_docs=docs,
        do_upload=upload,
        enable_lib_profiling=profiling,
        enable_exec_dyn=dynamic_exes,
        verbose=verbose,
        skip_check=skip_check,
        legacy_upload=legacy_upload,
        build_doc_index=doc_index,
        server=_parse_server(server),
    )

    ctx = build_context()
    result = with_heartbeat(
        ctx.config.build.heartbeat_seconds,
        lambda: complete_build(
            request,
            flags,
            collaborators=ctx.collaborators,
            root=ctx.root,
            config=ctx.config,
            console=ctx.console,
        ),
        console=ctx.console,
    )
    if isinstance(result, Err):
        exit_with_release_error(result.error, ctx.console)

    report = result.value
    if report.publish is not None:
        finish_publish(report.publish, ctx.console)
    ctx.console.success(f"{report.settings.slug} complete")


def check() -> None:
    """Generate a fresh plan and validate it without building."""
    ctx = build_context()
    result = with_heartbeat(
        ctx.config.build.heartbeat_seconds,
        lambda: just_check(
            engine=ctx.collaborators.engine,
            validator=ctx.collaborators.validator,
            root=ctx.root,
            console=ctx.console,
        ),
        console=ctx.console,
    )
    if isinstance(result, Err):
        exit_with_release_error(result.error, ctx.console)


def upload_rolling(
    day: str = typer.Argument(..., help="Snapshot day (YYYY-MM-DD)"),
) -> None:
    """Publish an already built rolling snapshot with the legacy protocol."""
    ctx = build_context()
    result = just_upload_rolling(
        day,
        collaborators=ctx.collaborators,
        root=ctx.root,
        config=ctx.config,
        console=ctx.console,
    )
    if isinstance(result, Err):
        exit_with_release_error(result.error, ctx.console)
    finish_publish(result.value, ctx.console)
