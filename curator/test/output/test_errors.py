from __future__ import annotations

import pytest

from curator.core.errors import ErrorCode
from curator.output.console import MockConsole, Style
from curator.output.errors import print_release_error, release_error_exit_code
from curator.services.release.errors import ReleaseError, ReleaseErrorKind


def test_print_release_error_with_hint() -> None:
    console = MockConsole()
    print_release_error(
        ReleaseError(kind="build_failed", message="build stage failed: x", hint="logs/"),
        console,
    )
    assert console.messages == ["error: build stage failed: x", "hint: logs/"]
    assert console.outputs[1].style == Style.DIM


def test_print_release_error_without_hint() -> None:
    console = MockConsole()
    print_release_error(ReleaseError(kind="goal_parse", message="bad goal"), console)
    assert console.messages == ["error: bad goal"]


@pytest.mark.parametrize(
    ("kind", "code"),
    [
        ("goal_parse", ErrorCode.USER_ERROR),
        ("missing_base_version", ErrorCode.USER_ERROR),
        ("plan_read_failed", ErrorCode.IO_ERROR),
        ("plan_write_failed", ErrorCode.IO_ERROR),
        ("plan_failed", ErrorCode.BUILD_ERROR),
        ("validation_failed", ErrorCode.BUILD_ERROR),
        ("build_failed", ErrorCode.BUILD_ERROR),
        ("bundle_failed", ErrorCode.BUILD_ERROR),
        ("auth_token_missing", ErrorCode.NETWORK_ERROR),
        ("post_build_failed", ErrorCode.OK),
    ],
)
def test_exit_code_mapping(kind: ReleaseErrorKind, code: ErrorCode) -> None:
    assert release_error_exit_code(ReleaseError(kind=kind, message="m")) == int(code)
