"""
Record file codec tests - quoting, parsing and malformed rows
"""
from pathlib import Path

from clinic.database.records import (
    escape_field,
    parse_line,
    read_records,
    serialize_line,
    split_records,
    write_records,
)


def test_escape_plain_field_unchanged():
    assert escape_field("Nancy") == "Nancy"
    assert escape_field("") == ""


def test_escape_quotes_special_fields():
    """Commas, quotes and newlines force quoting, inner quotes are doubled"""
    assert escape_field("a,b") == '"a,b"'
    assert escape_field('say "hi"') == '"say ""hi"""'
    assert escape_field("line1\nline2") == '"line1\nline2"'


def test_parse_simple_line_trims_whitespace():
    assert parse_line(" doc001 , Nancy ,hash, General Medicine ") == [
        "doc001", "Nancy", "hash", "General Medicine"
    ]


def test_parse_quoted_delimiter():
    assert parse_line('pat101,N1,"Doe, Jane",,"asthma, allergies"') == [
        "pat101", "N1", "Doe, Jane", "", "asthma, allergies"
    ]


def test_parse_doubled_quote_is_literal():
    assert parse_line('app1001,"He said ""ok"""') == ["app1001", 'He said "ok"']


def test_round_trip_special_characters():
    """parse(serialize(fields)) returns the same fields"""
    fields = [
        "pat101",
        "N,123",
        'Alice "Al" Smith',
        "",
        "diabetes\nhypertension, controlled",
        "  padded  ",
    ]
    line = serialize_line(fields)
    records = split_records(line + "\n")
    assert len(records) == 1
    assert parse_line(records[0]) == fields


def test_split_records_joins_quoted_newlines_and_skips_blanks():
    text = 'a,"first\nsecond",c\n\n   \nd,e,f\n'
    assert split_records(text) == ['a,"first\nsecond",c', "d,e,f"]


def test_read_records_missing_file(temp_data_dir):
    """Missing file reads as an empty collection"""
    rows, skipped = read_records(str(Path(temp_data_dir) / "missing.txt"), 4)
    assert rows == []
    assert skipped == 0


def test_read_records_drops_wrong_field_count(temp_data_dir):
    path = Path(temp_data_dir) / "doctors.txt"
    path.write_text(
        "doc001,Nancy,hash,General Medicine\n"
        "broken,row\n"
        "\n"
        "doc002,Sarah,hash,Nutritionist,extra\n"
        "doc003,Mariam,hash,Nutritionist\n",
        encoding="utf-8",
    )

    rows, skipped = read_records(str(path), 4)

    assert [row[0] for row in rows] == ["doc001", "doc003"]
    assert skipped == 2


def test_write_then_read(temp_data_dir):
    path = Path(temp_data_dir) / "nested" / "appointments.txt"
    rows = [
        ["app1001", "pat101", "doc001", "2024-07-01", "10:00", "Booked", "Booked by patient."],
        ["app1002", "pat102", "doc002", "2024-07-01", "10:00", "Booked", 'Notes with "quotes", commas\nand lines'],
    ]

    assert write_records(str(path), rows) is True

    loaded, skipped = read_records(str(path), 7)
    assert loaded == rows
    assert skipped == 0


def test_write_records_failure_returns_false(temp_data_dir):
    """Writing onto a directory path fails softly"""
    assert write_records(temp_data_dir, [["a"]]) is False


def test_stray_quote_does_not_swallow_following_rows(temp_data_dir):
    """An unterminated quote only costs its own row"""
    path = Path(temp_data_dir) / "patients.txt"
    path.write_text(
        "pat101,N1,Alice,hash,None\n"
        'pat102,N2,Bo"b,hash,None\n'
        "pat103,N3,Carol,hash,None\n"
        "pat104,N4,Dan,hash,None\n",
        encoding="utf-8",
    )

    rows, skipped = read_records(str(path), 5)

    assert [row[0] for row in rows] == ["pat101", "pat103", "pat104"]
    assert skipped == 1


def test_split_records_keeps_multiline_field_with_field_count():
    text = 'pat101,N1,Alice,hash,"line one\nline two"\npat102,N2,Bob,hash,None\n'
    assert split_records(text, 5) == ['pat101,N1,Alice,hash,"line one\nline two"', "pat102,N2,Bob,hash,None"]
