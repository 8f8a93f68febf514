"""Platform abstraction layer."""

from .files import atomic_write_text, read_optional_text
from .process import ProcessError, run

__all__ = [
    # files
    "atomic_write_text",
    "read_optional_text",
    # process
    "ProcessError",
    "run",
]
