import subprocess
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Final, Mapping
from urllib.parse import urlparse

from logly import logger
from PySide6.QtCore import QObject, QUrl, Signal
from PySide6.QtGui import QDesktopServices

from winget_search.core.winget_search_parser import parse_winget_search
from winget_search.core.winget_types import PackageRecord, ResultEntry
from winget_search.infra.process import run_capture, spawn_detached
from winget_search.infra.winget import (
    build_install_command,
    build_search_command,
    normalize_output,
)

PLUGIN_NAME: Final[str] = "Winget"
PLUGIN_DESCRIPTION: Final[str] = "Search and install packages with winget."

NOT_GLOBAL_IF_URI: Final[str] = "NotGlobalIfUri"

LIGHT_ICON_PATH: Final[str] = "Images/winget.light.png"
DARK_ICON_PATH: Final[str] = "Images/winget.dark.png"

BROWSER_URL: Final[str] = "https://www.bing.com/search?q=winget"
BROWSER_NAME: Final[str] = "the default browser"

Runner = Callable[[str], bytes]


class Theme(Enum):
    LIGHT = "light"
    DARK = "dark"
    HIGH_CONTRAST_WHITE = "high_contrast_white"
    HIGH_CONTRAST_BLACK = "high_contrast_black"


@dataclass(frozen=True, slots=True)
class PluginSettings:
    """User options exposed to the host.

    Attributes:
        not_global_if_uri: Skip global results when the query looks like a URI.
    """

    not_global_if_uri: bool = False

    @classmethod
    def from_options(cls, options: Mapping[str, object] | None) -> "PluginSettings":
        if not options:
            return cls()
        return cls(not_global_if_uri=bool(options.get(NOT_GLOBAL_IF_URI, False)))


def looks_like_uri(text: str) -> bool:
    candidate = text.strip()
    if not candidate or any(ch.isspace() for ch in candidate):
        return False
    if candidate.lower().startswith("www."):
        return True
    parsed = urlparse(candidate)
    return bool(parsed.scheme and parsed.netloc)


def icon_path_for(theme: Theme) -> str:
    if theme in (Theme.LIGHT, Theme.HIGH_CONTRAST_WHITE):
        return LIGHT_ICON_PATH
    return DARK_ICON_PATH


def search_packages(term: str, runner: Runner = run_capture) -> list[PackageRecord]:
    """Runs `winget search` for a term and parses its output.

    Args:
        term: User search text.
        runner: Executes a command line and returns raw stdout.

    Returns:
        Parsed records, empty when winget could not run or found nothing.
    """
    raw = runner(build_search_command(term))
    return parse_winget_search(normalize_output(raw))


def _subtitle(record: PackageRecord) -> str:
    parts = [f"Version {record.version}"] if record.version else []
    if record.source:
        parts.append(f"({record.source})")
    if record.match:
        parts.append(record.match)
    return " ".join(parts)


class WingetPlugin(QObject):
    """Launcher-facing adapter around `winget search` / `winget install`.

    All host state (theme icon, settings, browser target) lives on the
    instance; queries themselves keep nothing between calls.
    """

    error = Signal(str)

    def __init__(
        self,
        runner: Runner = run_capture,
        browser_url: str = BROWSER_URL,
        parent: QObject | None = None,
    ):
        """Initializes the plugin.

        Args:
            runner: Executes `winget search` command lines.
            browser_url: Page opened by the empty-query result.
            parent: Optional Qt parent object.
        """
        super().__init__(parent)
        self._runner = runner
        self._browser_url = browser_url
        self._settings = PluginSettings()
        self._icon_path = DARK_ICON_PATH
        self._initialized = False
        self._disposed = False
        self._installs: list[subprocess.Popen] = []

    @property
    def icon_path(self) -> str:
        return self._icon_path

    @property
    def settings(self) -> PluginSettings:
        return self._settings

    # ---- Lifecycle
    def init(self, theme: Theme) -> None:
        self._initialized = True
        self._disposed = False
        self._icon_path = icon_path_for(theme)
        logger.info(f"{PLUGIN_NAME} plugin initialized theme={theme.value}")

    def reload_data(self, theme: Theme) -> None:
        if not self._initialized:
            return
        self._icon_path = icon_path_for(theme)

    def dispose(self) -> None:
        self._disposed = True
        self._reap_installs()

    def on_theme_changed(self, theme: Theme) -> None:
        if self._disposed:
            return
        self._icon_path = icon_path_for(theme)

    def update_settings(self, options: Mapping[str, object] | None) -> None:
        self._settings = PluginSettings.from_options(options)

    # ---- Query
    def query(self, search_text: str, is_global: bool = False) -> list[ResultEntry]:
        """Returns results for the launcher's current input.

        Args:
            search_text: Text typed by the user.
            is_global: Whether the query was not addressed to this plugin.

        Returns:
            One browser entry for empty input, otherwise one entry per package.
        """
        if not search_text.strip():
            return [self._browser_entry()]

        if (
            is_global
            and self._settings.not_global_if_uri
            and looks_like_uri(search_text)
        ):
            return []

        records = search_packages(search_text, self._runner)
        logger.info(f"winget search {search_text!r} returned {len(records)} rows")
        return [self._package_entry(record) for record in records]

    def activate(self, entry: ResultEntry) -> bool:
        """Runs the action behind a result.

        Returns:
            False only when the browser could not be opened.
        """
        if entry.package_id is None:
            return self._open_browser()

        self._reap_installs()
        process = spawn_detached(build_install_command(entry.package_id))
        if process is not None:
            self._installs.append(process)
        return True

    def _reap_installs(self) -> None:
        self._installs = [p for p in self._installs if p.poll() is None]

    def _browser_entry(self) -> ResultEntry:
        return ResultEntry(
            title=PLUGIN_DESCRIPTION.rstrip("."),
            subtitle=f"Search winget in {BROWSER_NAME}",
            icon_path=self._icon_path,
        )

    def _package_entry(self, record: PackageRecord) -> ResultEntry:
        return ResultEntry(
            title=f"{record.name} ({record.id})",
            subtitle=_subtitle(record),
            icon_path=self._icon_path,
            package_id=record.id,
        )

    def _open_browser(self) -> bool:
        if QDesktopServices.openUrl(QUrl(self._browser_url)):
            return True

        message = f"Failed to open {BROWSER_NAME} for {self._browser_url}"
        logger.error(message)
        self.error.emit(f"Plugin: {PLUGIN_NAME}: {message}")
        return False
