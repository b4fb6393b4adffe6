import pytest

from pdfinject.xref import (
    END_OBJ_PATTERN,
    START_OBJ_PATTERN,
    PdfFormatError,
    XrefEntry,
    find_xref_entries,
    parse_xref_line,
)


def test_parse_in_use_line():
    entry = parse_xref_line("0000000017 00000 n")
    assert entry == XrefEntry(offset=17, generation=0, keyword="n")
    assert entry.in_use


def test_parse_free_line_with_padding():
    entry = parse_xref_line("  0000000000 65535 f \n")
    assert entry.offset == 0
    assert entry.generation == 65535
    assert entry.keyword == "f"
    assert not entry.in_use


def test_parse_accepts_bytes():
    assert parse_xref_line(b"0000000123 00000 n").offset == 123


def test_parse_too_few_tokens():
    with pytest.raises(PdfFormatError):
        parse_xref_line("0000000017 00000")


def test_parse_unknown_keyword():
    with pytest.raises(PdfFormatError):
        parse_xref_line("0000000017 00000 x")


def test_parse_non_numeric_offset():
    with pytest.raises(PdfFormatError):
        parse_xref_line("00000000zz 00000 n")


def test_find_entries_skips_lines_before_xref():
    raw = (
        b"%PDF-1.7\n0000000099 00000 n\n1 0 obj\n<<>>\nendobj\n"
        b"xref\n0 3\n0000000000 65535 f \n0000000009 00000 n \n0000000042 00000 n \n"
        b"trailer\n<< /Root 1 0 R >>\nstartxref\n60\n%%EOF\n"
    )
    entries = find_xref_entries(raw)
    assert [e.offset for e in entries] == [0, 9, 42]
    assert [e.keyword for e in entries] == ["f", "n", "n"]


def test_find_entries_requires_xref():
    with pytest.raises(PdfFormatError):
        find_xref_entries(b"%PDF-1.7\n0000000009 00000 n\n")


def test_start_obj_pattern():
    match = START_OBJ_PATTERN.search(b"garbage 12 0 obj\n<<>>")
    assert match is not None
    assert match.group() == b"12 0 obj"
    assert END_OBJ_PATTERN.search(b"<<>>\nendobj") is not None