"""Error presentation and exit code mapping for release errors."""

from __future__ import annotations

from typing import TYPE_CHECKING

from curator.core.errors import ErrorCode
from curator.output.console import Style
from curator.services.release.errors import ReleaseError

if TYPE_CHECKING:
    from curator.output.console import ConsoleProtocol

__all__ = ["print_release_error", "release_error_exit_code"]


def print_release_error(error: ReleaseError, console: ConsoleProtocol) -> None:
    console.error(error.message)
    if error.hint:
        console.print(f"hint: {error.hint}", Style.DIM)


def release_error_exit_code(error: ReleaseError) -> int:
    match error.kind:
        case "goal_parse" | "missing_base_version":
            return int(ErrorCode.USER_ERROR)
        case "plan_read_failed" | "plan_write_failed":
            return int(ErrorCode.IO_ERROR)
        case "plan_failed" | "validation_failed" | "build_failed" | "bundle_failed":
            return int(ErrorCode.BUILD_ERROR)
        case "auth_token_missing":
            return int(ErrorCode.NETWORK_ERROR)
        case "post_build_failed":
            # Reported by the publish step, never fatal.
            return int(ErrorCode.OK)
    return int(ErrorCode.BUILD_ERROR)
