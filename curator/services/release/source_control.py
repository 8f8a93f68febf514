from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from curator.core.result import Err, Ok, Result
from curator.platform.process import run as run_process
from curator.services.release.errors import EngineError
from curator.services.release.timeouts import GIT_NETWORK_TIMEOUT_SECONDS, GIT_TIMEOUT_SECONDS


@dataclass(frozen=True, slots=True)
class GitSourceControl:
    """Commits accepted plan files in the working checkout."""

    repo_root: Path

    def _git(self, *args: str, network: bool = False) -> Result[None, EngineError]:
        timeout = GIT_NETWORK_TIMEOUT_SECONDS if network else GIT_TIMEOUT_SECONDS
        result = run_process(["git", *args], cwd=self.repo_root, timeout=timeout)
        if isinstance(result, Err):
            return Err(EngineError(message=result.error.detail()))
        return Ok(None)

    def add(self, path: Path) -> Result[None, EngineError]:
        try:
            rel = path.relative_to(self.repo_root)
        except ValueError:
            rel = path
        return self._git("add", "--", str(rel))

    def commit(self, message: str) -> Result[None, EngineError]:
        return self._git("commit", "-m", message)

    def push(self) -> Result[None, EngineError]:
        return self._git("push", network=True)
