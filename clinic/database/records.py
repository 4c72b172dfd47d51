"""
Delimited text record files

- One record per line, comma-separated fields
- Fields containing the delimiter, a quote, a line break or edge whitespace are quote-wrapped with inner quotes doubled
- A quoted field may span physical lines; the record continues until its quotes balance
- Rows with the wrong field count are dropped (and counted) instead of failing the whole load
"""
import logging
from pathlib import Path
from typing import List, Optional, Tuple

logger = logging.getLogger(__name__)

DELIMITER = ","
QUOTE = '"'


def escape_field(field: str) -> str:
    """
    Quote a field if it contains the delimiter, a quote, a line break or edge whitespace
    """
    if any(char in field for char in (DELIMITER, QUOTE, "\n", "\r")) or field != field.strip():
        return QUOTE + field.replace(QUOTE, QUOTE * 2) + QUOTE
    return field


def serialize_line(fields: List[str]) -> str:
    return DELIMITER.join(escape_field(field) for field in fields)


def parse_line(line: str) -> List[str]:
    """
    Split one logical record into fields

    Each quote toggles the inside-quotes flag and the delimiter only splits outside quotes.
    A doubled quote inside a quoted section is a literal quote. Whitespace outside quotes
    is trimmed, quoted text is kept as written.
    """
    fields: List[str] = []
    current: List[str] = []
    in_quotes = False
    # Span of `current` produced inside quotes, protected from trimming
    keep_start = keep_end = None

    i = 0
    while i < len(line):
        char = line[i]
        if char == QUOTE:
            if in_quotes and line[i + 1:i + 2] == QUOTE:
                current.append(QUOTE)
                i += 2
                continue
            in_quotes = not in_quotes
            if in_quotes and keep_start is None:
                keep_start = len(current)
            if not in_quotes:
                keep_end = len(current)
        elif char == DELIMITER and not in_quotes:
            fields.append(_close_field(current, keep_start, keep_end))
            current = []
            keep_start = keep_end = None
        else:
            current.append(char)
        i += 1

    if in_quotes:
        keep_end = len(current)
    fields.append(_close_field(current, keep_start, keep_end))
    return fields


def _close_field(chars: List[str], keep_start, keep_end) -> str:
    text = "".join(chars)
    if keep_start is None:
        return text.strip()
    return text[:keep_start].lstrip() + text[keep_start:keep_end] + text[keep_end:].rstrip()


def split_records(text: str, field_count: Optional[int] = None) -> List[str]:
    """
    Group physical lines into logical records, skipping blank lines

    A line with an unbalanced quote count continues onto the next line. With a
    field_count, a continuation line that is a complete record on its own ends
    the open record early, so one stray quote cannot swallow the rest of the file.
    """
    records: List[str] = []
    pending: List[str] = []
    quotes = 0
    for line in text.split("\n"):
        if pending and field_count and _is_complete_record(line, field_count):
            logger.warning(f"Unterminated quoted field spanning {len(pending)} line(s)")
            records.append("\n".join(pending))
            pending = []
            quotes = 0
        pending.append(line)
        quotes += line.count(QUOTE)
        if quotes % 2:
            continue
        record = "\n".join(pending)
        if len(pending) > 1:
            logger.debug(f"Joined {len(pending)} physical lines into one record")
        pending = []
        quotes = 0
        if record.strip():
            records.append(record)
    if pending and "\n".join(pending).strip():
        logger.warning(f"Unterminated quoted field at end of file spanning {len(pending)} line(s)")
        records.append("\n".join(pending))
    return records


def _is_complete_record(line: str, field_count: int) -> bool:
    return line.count(QUOTE) % 2 == 0 and len(parse_line(line)) == field_count


def read_records(filepath: str, field_count: int) -> Tuple[List[List[str]], int]:
    """
    Read a record file, return (rows, skipped)

    Returns an empty list if the file is missing or unreadable.
    """
    path = Path(filepath)
    try:
        with open(path, "r", encoding="utf-8", newline="") as f:
            text = f.read()
    except (OSError, UnicodeDecodeError) as e:
        logger.warning(f"Could not open {path} for reading: {e}")
        return [], 0

    rows: List[List[str]] = []
    skipped = 0
    for record in split_records(text, field_count):
        fields = parse_line(record)
        if len(fields) != field_count:
            skipped += 1
            continue
        rows.append(fields)

    if skipped:
        logger.warning(f"Skipped {skipped} malformed row(s) in {path}")
    return rows, skipped


def write_records(filepath: str, rows: List[List[str]]) -> bool:
    """
    Rewrite a record file with the given rows

    Returns False if the file cannot be written.
    """
    path = Path(filepath)
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "w", encoding="utf-8", newline="") as f:
            for fields in rows:
                f.write(serialize_line(fields) + "\n")
    except OSError as e:
        logger.warning(f"Could not open {path} for writing: {e}")
        return False
    return True
