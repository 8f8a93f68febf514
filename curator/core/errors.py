"""Process exit codes for the curator CLI.

Only fatal pipeline errors influence the exit code. Failed publish stages
are listed in the end-of-run report but leave the exit status untouched.
"""

from enum import IntEnum

__all__ = ["ErrorCode"]


class ErrorCode(IntEnum):
    """Exit codes for CLI commands.

    - 0: Success (publish stages may still have failed individually)
    - 1: User error (bad goal expression, no base version for a minor bump)
    - 2: Environment error (bad config, external engine missing)
    - 3: Build error (plan, validation, build or bundle failed)
    - 4: Network error (publishing requested without an auth token)
    - 5: I/O error (plan file could not be read or written)
    """

    OK = 0
    USER_ERROR = 1
    ENV_ERROR = 2
    BUILD_ERROR = 3
    NETWORK_ERROR = 4
    IO_ERROR = 5

    def __str__(self) -> str:
        return self.name.lower().replace("_", " ")

    @property
    def is_success(self) -> bool:
        return self == ErrorCode.OK
