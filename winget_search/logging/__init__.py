import os
from pathlib import Path
from typing import Final

from logly import _LoggerProxy, logger

APP_NAME: Final[str] = "winget-search"
LOG_FILE_NAME: Final[str] = "app.log"


def default_log_dir() -> Path:
    """Returns the per-user log directory.

    `%LOCALAPPDATA%\\winget-search\\logs` on Windows, otherwise
    `$XDG_STATE_HOME/winget-search/logs` (defaulting to `~/.local/state`).
    """
    if os.name == "nt":
        local_app_data = os.environ.get("LOCALAPPDATA")
        if local_app_data:
            return Path(local_app_data) / APP_NAME / "logs"

    state_home = os.environ.get("XDG_STATE_HOME")
    base = Path(state_home) if state_home else Path.home() / ".local" / "state"
    return base / APP_NAME / "logs"


def init_logger(level: str = "INFO", log_dir: Path | None = None) -> _LoggerProxy:
    """Configures console output and a size-limited file sink.

    Args:
        level: Minimum level to emit.
        log_dir: Directory for `app.log`. Defaults to `default_log_dir()`.

    Returns:
        The configured logger.
    """
    directory = log_dir or default_log_dir()
    directory.mkdir(parents=True, exist_ok=True)

    logger.configure(
        level=level,
        color=True,
        console=True,
        auto_sink=True,
    )

    logger.add(str(directory / LOG_FILE_NAME), size_limit="10MB", retention=3)

    logger.success(f"logger initialized! file={directory / LOG_FILE_NAME}")

    return logger
