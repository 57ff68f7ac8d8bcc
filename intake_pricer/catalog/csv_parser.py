"""Delimited-text parser for the price catalog.

The catalog is exported from a spreadsheet, so fields may be quoted, rows may
end in CRLF or LF, and the file may start with a UTF-8 byte order mark.
"""

from __future__ import annotations

from typing import Iterator


_BOM = "\ufeff"


def iter_rows(text: str, delimiter: str = ",") -> Iterator[list[str]]:
    """Yield rows of raw (untrimmed) fields in a single left-to-right scan.

    - ``""`` inside a quoted field is a literal quote
    - an unquoted delimiter ends a field
    - a newline ends the row only outside quotes
    - CR outside quotes is ignored
    """
    if not text:
        return
    if text.startswith(_BOM):
        text = text[1:]

    field: list[str] = []
    row: list[str] = []
    in_quotes = False
    i = 0
    length = len(text)

    while i < length:
        ch = text[i]
        if in_quotes:
            if ch == '"':
                if i + 1 < length and text[i + 1] == '"':
                    field.append('"')
                    i += 1
                else:
                    in_quotes = False
            else:
                field.append(ch)
        elif ch == '"':
            in_quotes = True
        elif ch == delimiter:
            row.append("".join(field))
            field = []
        elif ch == "\n":
            row.append("".join(field))
            yield row
            field, row = [], []
        elif ch != "\r":
            field.append(ch)
        i += 1

    # last line without a trailing newline
    if field or row:
        row.append("".join(field))
        yield row


def parse_rows(text: str, delimiter: str = ",") -> list[list[str]]:
    return list(iter_rows(text, delimiter))
