import os
import re
from typing import Final

from logly import logger

from .winget_types import PLACEHOLDER, ColumnLayout, PackageRecord

_TOKEN_RE = re.compile(r"\S+")
# winget decorates its table with box-drawing and spinner glyphs in some
# code pages; anything outside printable ASCII would shift the offsets.
_NON_PRINTABLE_RE = re.compile(r"[^\x20-\x7e]")

# Header line plus the dashed separator below it.
_HEADER_LINE_COUNT: Final[int] = 2


def infer_layout(header: str) -> ColumnLayout:
    """Derives column widths from the start offsets of the header labels.

    Only two header shapes are understood:

    * 6 tokens: a progress-spinner token followed by
      `Name Id Version Match Source`, so columns start at token 1.
    * 5 tokens: `Name Id Version Match Source`, columns start at token 0.
      The Match and Source columns are not sliced for this shape.

    Any other token count (e.g. a localized label made of two words) yields
    an all-zero layout instead of an error.

    Args:
        header: First line of `winget search` output.

    Returns:
        The layout to apply to every data line of the same output.
    """
    starts = [m.start() for m in _TOKEN_RE.finditer(header)]
    count = len(starts)
    # The anchors differ on purpose. Six tokens only occur with the spinner
    # residue in front; five tokens are read as bare labels, so anchoring them
    # at token 1 would turn the Id column into the Name width.
    if count == 6:
        first = 1
    elif count == 5:
        first = 0
    else:
        logger.warning(f"Unexpected winget header with {count} columns: {header!r}")
        return ColumnLayout(column_count=count)

    anchors = starts[first:]
    widths = [end - start for start, end in zip(anchors, anchors[1:])]
    return ColumnLayout(
        name_width=widths[0],
        id_width=widths[1],
        version_width=widths[2],
        match_width=widths[3] if count == 6 else 0,
        column_count=count,
    )


def _strip_non_printable(line: str) -> str:
    return _NON_PRINTABLE_RE.sub("", line)


def _take(line: str, start: int, width: int | None = None) -> str:
    """Returns the trimmed field at `start`, or raises if the line ends before it."""
    if start > len(line):
        raise IndexError(
            f"column offset {start} is past the end of a {len(line)}-char line"
        )
    end = None if width is None else start + width
    return line[start:end].strip()


def parse_row(line: str, layout: ColumnLayout) -> PackageRecord:
    """Slices one printable-ASCII data line into a record.

    A line too short for the layout still produces a record so that results
    keep lining up with the tool's own output; its name is `PLACEHOLDER`.
    """
    name = package_id = version = match = source = PLACEHOLDER
    try:
        offset = 0
        name = _take(line, offset, layout.name_width)
        offset += layout.name_width
        package_id = _take(line, offset, layout.id_width)
        offset += layout.id_width
        version = _take(line, offset, layout.version_width)
        offset += layout.version_width
        if layout.has_match_column:
            match = _take(line, offset, layout.match_width)
            offset += layout.match_width
            source = _take(line, offset)
        else:
            match = ""
            source = ""
    except IndexError as e:
        logger.warning(f"Malformed winget row {line!r}: {e}")
        name = PLACEHOLDER

    return PackageRecord(
        name=name,
        id=package_id,
        version=version,
        match=match,
        source=source,
    )


def parse_winget_search(text: str) -> list[PackageRecord]:
    """Parses `winget search` table output into records.

    The first line is the header used to infer the column layout; it and the
    separator line below it are never turned into records. Lines that are
    empty once non-printable characters are removed are skipped, which is how
    a "no package found" output ends up with zero records.

    Args:
        text: Normalized stdout text of `winget search`.

    Returns:
        Records in the order winget listed them.
    """
    lines = text.split(os.linesep)
    layout = infer_layout(lines[0])

    records: list[PackageRecord] = []
    for raw in lines[_HEADER_LINE_COUNT:]:
        line = _strip_non_printable(raw)
        if not line:
            continue
        records.append(parse_row(line, layout))
    return records
