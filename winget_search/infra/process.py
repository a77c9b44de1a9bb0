import os
import shlex
import subprocess
from typing import Final

from logly import logger

_CREATE_NO_WINDOW: Final[int] = 0x08000000
_CREATE_NEW_CONSOLE: Final[int] = 0x00000010


def _to_argv(command: str) -> str | list[str]:
    """Windows takes the command line verbatim; POSIX needs an argument vector."""
    if os.name == "nt":
        return command
    return shlex.split(command)


def _window_kwargs() -> dict:
    if os.name == "nt":
        return {"creationflags": _CREATE_NO_WINDOW}
    return {}


def run_capture(command: str) -> bytes:
    """Runs a command to completion and returns its raw stdout.

    There is no timeout: the call blocks until the process exits. stderr is
    left alone. A process that cannot be started is logged and reported as
    empty output, so callers see the same result as a search with no matches.

    Args:
        command: Full command line.

    Returns:
        Captured stdout bytes (possibly empty).
    """
    logger.info(f"Starting subprocess: {command}")
    try:
        result = subprocess.run(
            _to_argv(command),
            stdout=subprocess.PIPE,
            **_window_kwargs(),
        )
    except (OSError, ValueError):
        logger.exception("Subprocess execution failed")
        return b""

    logger.info(f"Subprocess finished returncode={result.returncode}")
    return result.stdout or b""


def _detach_kwargs() -> dict:
    if os.name == "nt":
        return {"creationflags": _CREATE_NEW_CONSOLE}
    return {"start_new_session": True}


def spawn_detached(command: str) -> subprocess.Popen | None:
    """Starts a command in its own console/session without waiting for it.

    The outcome is not observed. The returned handle only lets the caller
    reap the process once it has exited.

    Returns:
        The process handle, or None if it could not be started.
    """
    logger.info(f"Spawning subprocess: {command}")
    try:
        return subprocess.Popen(_to_argv(command), **_detach_kwargs())
    except (OSError, ValueError):
        logger.exception("Subprocess spawn failed")
        return None
