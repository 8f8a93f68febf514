from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

import typer

from curator.core.config import Config, load_config_or_default
from curator.core.errors import ErrorCode
from curator.core.result import Err
from curator.output.console import ConsoleProtocol, RichConsole
from curator.services.release.engines import SystemClock
from curator.services.release.external import (
    CommandBuildExecutor,
    CommandBundleCodec,
    CommandPlanEngine,
    CommandPlanValidator,
)
from curator.services.release.http_client import HttpPublishClient
from curator.services.release.pipeline import Collaborators
from curator.services.release.source_control import GitSourceControl

ROOT_ENV = "CURATOR_ROOT"


@dataclass(frozen=True, slots=True)
class CLIContext:
    root: Path
    config: Config
    console: ConsoleProtocol
    collaborators: Collaborators


def default_collaborators(root: Path, config: Config) -> Collaborators:
    engines = config.engines
    return Collaborators(
        engine=CommandPlanEngine(command=engines.plan, root=root),
        validator=CommandPlanValidator(command=engines.validate, root=root),
        executor=CommandBuildExecutor(command=engines.build, root=root),
        codec=CommandBundleCodec(command=engines.bundle, root=root),
        publisher=HttpPublishClient(archive_url=config.servers.archive),
        source_control=GitSourceControl(repo_root=root),
        clock=SystemClock(),
    )


def working_root() -> Path:
    env = os.environ.get(ROOT_ENV)
    base = Path(env).expanduser() if env else Path.cwd()
    return base.resolve()


def build_context() -> CLIContext:
    root = working_root()
    config = load_config_or_default(root)
    if isinstance(config, Err):
        typer.echo(f"error: {config.error.message}", err=True)
        raise typer.Exit(code=int(ErrorCode.ENV_ERROR))

    return CLIContext(
        root=root,
        config=config.value,
        console=RichConsole(),
        collaborators=default_collaborators(root, config.value),
    )
