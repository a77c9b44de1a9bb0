from dataclasses import dataclass
from typing import Final

PLACEHOLDER: Final[str] = "_"


@dataclass(frozen=True, slots=True)
class ColumnLayout:
    """Character widths of the `winget search` table columns.

    Attributes:
        name_width: Width of the Name column.
        id_width: Width of the Id column.
        version_width: Width of the Version column.
        match_width: Width of the Match column (only set for 6-token headers).
        column_count: Number of whitespace-delimited tokens in the header line.
    """

    name_width: int = 0
    id_width: int = 0
    version_width: int = 0
    match_width: int = 0
    column_count: int = 0

    @property
    def has_match_column(self) -> bool:
        return self.column_count == 6


@dataclass(frozen=True, slots=True)
class PackageRecord:
    """Represents a `winget search` result row."""

    name: str = PLACEHOLDER
    id: str = PLACEHOLDER
    version: str = PLACEHOLDER
    match: str = PLACEHOLDER
    source: str = PLACEHOLDER


@dataclass(frozen=True, slots=True)
class ResultEntry:
    """A display-ready launcher result.

    Attributes:
        title: Main line shown to the user.
        subtitle: Secondary line.
        icon_path: Icon for the current theme.
        package_id: Id passed to `winget install`, or None for the browser fallback.
    """

    title: str
    subtitle: str = ""
    icon_path: str = ""
    package_id: str | None = None
