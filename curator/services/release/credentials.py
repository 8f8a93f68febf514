from __future__ import annotations

import os
from collections.abc import Mapping
from pathlib import Path

from curator.core.result import Err, Ok, Result
from curator.platform.files import read_optional_text
from curator.services.release.errors import ReleaseError
from curator.services.release.model import Credentials


def read_auth_token(
    *,
    env_var: str,
    token_file: Path,
    environ: Mapping[str, str] | None = None,
) -> Result[str, ReleaseError]:
    """Publish token: the environment variable wins, else the side file."""
    env = os.environ if environ is None else environ
    token = env.get(env_var)
    if token is not None:
        return Ok(token)

    text = read_optional_text(token_file)
    if text is not None and text.strip():
        return Ok(text.strip())

    return Err(
        ReleaseError(
            kind="auth_token_missing",
            message="no publish auth token found",
            hint=f"Set {env_var} or create {token_file}.",
        )
    )


def read_distro_credentials(path: Path) -> Credentials | None:
    """Archive credentials from ``path``.

    The file must hold exactly two whitespace-separated tokens (username,
    password). Anything else, including a missing file, yields None.
    """
    text = read_optional_text(path)
    if text is None:
        return None
    words = text.split()
    if len(words) != 2:
        return None
    return Credentials(username=words[0], password=words[1])
