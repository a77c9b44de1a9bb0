import os

from winget_search.core.winget_search_parser import (
    infer_layout,
    parse_row,
    parse_winget_search,
)
from winget_search.core.winget_types import PLACEHOLDER, ColumnLayout, PackageRecord

HEADER_5 = "Name".ljust(31) + "Id".ljust(32) + "Version Match Source"
# winget leaves its spinner frame in front of the header, separated by `\r`.
HEADER_6 = (
    "-\r"
    + "Name".ljust(20)
    + "Id".ljust(20)
    + "Version".ljust(10)
    + "Match".ljust(14)
    + "Source"
)


def _table(*lines: str) -> str:
    return os.linesep.join(lines)


def _row_5(name: str, package_id: str, version: str) -> str:
    return name.ljust(31) + package_id.ljust(32) + version


def test_parse_winget_search_reads_documented_example() -> None:
    text = _table(
        "Name                           Id                              Version Match Source",
        "-" * 83,
        "Foo Bar                        Foo.Bar                         1.2.3",
    )

    assert parse_winget_search(text) == [
        PackageRecord(name="Foo Bar", id="Foo.Bar", version="1.2.3", match="", source="")
    ]


def test_parse_winget_search_keeps_row_order() -> None:
    text = _table(
        HEADER_5,
        "-" * len(HEADER_5),
        _row_5("Zeta Viewer", "Zeta.Viewer", "3.0"),
        _row_5("Alpha Tool", "Alpha.Tool", "1.0.1"),
        _row_5("Mid Suite", "Mid.Suite", "2.2"),
    )

    records = parse_winget_search(text)

    assert [r.id for r in records] == ["Zeta.Viewer", "Alpha.Tool", "Mid.Suite"]
    assert [r.name for r in records] == ["Zeta Viewer", "Alpha Tool", "Mid Suite"]
    assert all(r.name != PLACEHOLDER and r.id != PLACEHOLDER for r in records)


def test_parse_winget_search_reads_match_and_source_for_six_token_header() -> None:
    row = (
        "Power Toys".ljust(20)
        + "Microsoft.PowerToys".ljust(20)
        + "0.81.0".ljust(10)
        + "Tag: launcher".ljust(14)
        + "winget"
    )
    text = _table(HEADER_6, "-" * 70, row)

    assert parse_winget_search(text) == [
        PackageRecord(
            name="Power Toys",
            id="Microsoft.PowerToys",
            version="0.81.0",
            match="Tag: launcher",
            source="winget",
        )
    ]


def test_parse_winget_search_degrades_unexpected_header_to_empty_fields() -> None:
    text = _table("Name Id Version", "---------------", "Foo Foo.Bar 1.0")

    assert parse_winget_search(text) == [
        PackageRecord(name="", id="", version="", match="", source="")
    ]


def test_parse_winget_search_marks_short_rows_with_placeholder() -> None:
    text = _table(
        HEADER_5,
        "-" * len(HEADER_5),
        "Foo",
        _row_5("Good Tool", "Good.Tool", "1.0"),
    )

    records = parse_winget_search(text)

    assert len(records) == 2
    assert records[0].name == PLACEHOLDER
    assert records[0].id == PLACEHOLDER
    assert records[1].name == "Good Tool"


def test_parse_row_keeps_fields_sliced_before_the_failure() -> None:
    layout = infer_layout(HEADER_5)

    record = parse_row("Foo Bar".ljust(31) + "Foo.Bar", layout)

    assert record.name == PLACEHOLDER
    assert record.id == "Foo.Bar"
    assert record.version == PLACEHOLDER


def test_parse_winget_search_skips_rows_without_printable_text() -> None:
    text = _table(
        HEADER_5,
        "─" * 40,
        "───",
        _row_5("Foo Bar", "Foo.Bar", "1.2.3") + "\r",
        "",
    )

    records = parse_winget_search(text)

    assert len(records) == 1
    assert records[0].version == "1.2.3"


def test_parse_winget_search_returns_nothing_for_no_match_message() -> None:
    assert parse_winget_search("No package found matching input criteria.") == []


def test_parse_winget_search_returns_nothing_for_empty_output() -> None:
    assert parse_winget_search("") == []


def test_parse_winget_search_is_deterministic() -> None:
    text = _table(
        HEADER_5,
        "-" * len(HEADER_5),
        _row_5("Foo Bar", "Foo.Bar", "1.2.3"),
        "broken",
    )

    assert parse_winget_search(text) == parse_winget_search(text)


def test_infer_layout_for_five_token_header() -> None:
    assert infer_layout(HEADER_5) == ColumnLayout(
        name_width=31,
        id_width=32,
        version_width=8,
        match_width=0,
        column_count=5,
    )


def test_infer_layout_for_six_token_header() -> None:
    layout = infer_layout(HEADER_6)

    assert layout == ColumnLayout(
        name_width=20,
        id_width=20,
        version_width=10,
        match_width=14,
        column_count=6,
    )
    assert layout.has_match_column


def test_infer_layout_returns_zero_widths_for_other_counts() -> None:
    assert infer_layout("Name Id Version") == ColumnLayout(column_count=3)
    assert infer_layout("") == ColumnLayout(column_count=0)
