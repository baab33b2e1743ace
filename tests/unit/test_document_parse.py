from __future__ import annotations

import pytest

from blm import Document
from blm.models.header import Header

"""Unit tests for parsing BLM text into a Document."""


def test_parse_header_definition_and_rows(sample_blm: str):
    doc = Document.parse(sample_blm)

    assert doc.version == "3"
    assert doc.header["eof"] == "^"
    assert doc.header["eor"] == "~"
    assert doc.header["property count"] == "2"
    assert doc.header["generated date"] == "01-JAN-2024 10:00"
    assert doc.definition == ("agent_ref", "address_1", "price")
    assert [row.attributes for row in doc.rows] == [
        {"agent_ref": "1234_001", "address_1": "1 High Street", "price": "250000"},
        {"agent_ref": "1234_002", "address_1": "2 Low Road", "price": "180000"},
    ]
    assert [row.index for row in doc.rows] == [0, 1]


def test_parse_minimal_example():
    text = (
        "#HEADER#\nVERSION : 3\nEOF : '^'\nEOR : '~'\n#END#\n"
        "#DEFINITION#\nname^age^~\n#END#\n"
        "#DATA#\nAlice^30~\nBob^25~\n#END#"
    )
    doc = Document.parse(text)

    assert doc.definition == ("name", "age")
    assert [row.attributes for row in doc.rows] == [
        {"name": "Alice", "age": "30"},
        {"name": "Bob", "age": "25"},
    ]
    assert doc.is_valid


def test_header_value_quotes_and_whitespace_stripped():
    text = "#HEADER#\n  EOF   :   '^'  \nEOR : '~'\n#DEFINITION#\na^~\n#DATA#\n#END#"
    doc = Document.parse(text)
    assert doc.header["eof"] == "^"
    assert doc.eof == "^"


def test_header_later_duplicate_key_wins():
    text = "#HEADER#\nVERSION : 2\nVERSION : 3\nEOF : '^'\nEOR : '~'\n#DEFINITION#\na^~\n#DATA#\n#END#"
    assert Document.parse(text).version == "3"


def test_header_unknown_keys_kept_as_extra():
    text = "#HEADER#\nVERSION : 3\nBranch Name : Example Lettings\nEOF : '^'\nEOR : '~'\n#DEFINITION#\na^~\n#DATA#\n#END#"
    header = Document.parse(text).header
    assert isinstance(header, Header)
    assert header.extra["branch name"] == "Example Lettings"
    assert header["branch name"] == "Example Lettings"


def test_header_lines_without_colon_are_skipped(sample_blm: str):
    header = Document.parse(sample_blm).header
    assert "#definition#" not in header
    assert set(header) == {"version", "eof", "eor", "property count", "generated date"}


def test_generated_date_keeps_time_colon(sample_blm: str):
    assert Document.parse(sample_blm).header.generated_date == "01-JAN-2024 10:00"


def test_definition_drops_empty_fields():
    text = "#HEADER#\nEOF : '^'\nEOR : '~'\n#DEFINITION#\nName^^ Age ^^~\n#DATA#\n#END#"
    assert Document.parse(text).definition == ("name", "age")


def test_definition_uses_first_record_only():
    text = "#HEADER#\nEOF : '^'\nEOR : '~'\n#DEFINITION#\na^b^~c^d^~\n#DATA#\n#END#"
    assert Document.parse(text).definition == ("a", "b")


def test_empty_data_section_has_no_rows():
    text = "#HEADER#\nVERSION : 3\nEOF : '^'\nEOR : '~'\n#DEFINITION#\na^b^~\n#DATA#\n#END#"
    doc = Document.parse(text)
    assert doc.rows == ()
    assert doc.is_valid


def test_rows_use_header_separators_not_guessed_ones():
    text = "#HEADER#\nEOF : '|'\nEOR : ';'\n#DEFINITION#\nname|note|;\n#DATA#\nAlice|a^b~c;\n#END#"
    doc = Document.parse(text)
    assert doc.rows[0].attributes == {"name": "Alice", "note": "a^b~c"}


def test_data_line_with_colon_does_not_break_header():
    text = (
        "#HEADER#\nVERSION : 3\nEOF : '^'\nEOR : '~'\n\n"
        "#DEFINITION#\nref^url^~\n\n#DATA#\nA1^https://example.com/a1^~\n#END#"
    )
    doc = Document.parse(text)
    assert doc.version == "3"
    assert doc.rows[0].attributes["url"] == "https://example.com/a1"


def test_rows_is_data(sample_blm: str):
    doc = Document.parse(sample_blm)
    assert doc.rows is doc.data


def test_parse_bytes_with_encoding(sample_blm: str):
    raw = sample_blm.replace("High Street", "Hôtel Street").encode("latin-1")
    doc = Document.parse(raw, encoding="latin-1")
    assert doc.rows[0].attributes["address_1"] == "1 Hôtel Street"
    assert doc.source is not None and "Hôtel" in doc.source


@pytest.mark.parametrize("version,expected", [
    ("H1", True),
    ("3I", True),
    ("3i", True),
    ("3", False),
    ("h1", False),
])
def test_international_flag(sample_blm: str, version: str, expected: bool):
    doc = Document.parse(sample_blm.replace("VERSION : 3", f"VERSION : {version}"))
    assert doc.version == version
    assert doc.is_international is expected


def test_missing_version_is_domestic(sample_blm: str):
    doc = Document.parse(sample_blm.replace("VERSION : 3\n", ""))
    assert doc.version is None
    assert doc.is_international is False


def test_missing_version_is_not_invented_on_output(sample_blm: str):
    text = Document.parse(sample_blm.replace("VERSION : 3\n", "")).to_blm()
    assert "None" not in text
    assert text.splitlines()[1] == "VERSION : "
    reparsed = Document.parse(text)
    assert reparsed.version == ""
    assert reparsed.is_international is False


def test_stray_end_marker_inside_data_truncates_section(sample_blm: str):
    text = sample_blm.replace("1234_002", "#END#1234_002")
    doc = Document.parse(text)
    assert len(doc.rows) == 1
