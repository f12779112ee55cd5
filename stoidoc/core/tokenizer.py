"""
Tab-delimited spreadsheet tokenizer.

Excel's "Text (Tab delimited)" export writes one row per line. A cell of
free text may span several lines: every line but the last then ends with
the "##" continuation marker, and the line break after it belongs to the
cell, not to the table.
"""

from __future__ import annotations

import re
from pathlib import Path
from typing import List, Tuple, Union

from .diagnostics import ConversionError, ErrorCode


TAB = "\t"
LF = "\n"
CR = "\r"
CONTINUATION_MARKER = "##"
TIF_SUFFIX = ".tif"

_QUOTE_RUN = re.compile(r'"{2,}')

# Encodings tried in order when decoding an exported spreadsheet; latin-1
# accepts every byte, so the last entry always succeeds
ENCODINGS = ("utf-8-sig", "cp1252", "latin-1")


def detect_encoding(raw: bytes) -> str:
    """First encoding in ENCODINGS that decodes raw without error."""
    for encoding in ENCODINGS[:-1]:
        try:
            raw.decode(encoding)
        except UnicodeDecodeError:
            continue
        return encoding
    return ENCODINGS[-1]


def decode_spreadsheet(raw: bytes) -> str:
    """Decode exported bytes, trying UTF-8 (with or without BOM) then cp1252."""
    return raw.decode(detect_encoding(raw))


def _has_content(row: str) -> bool:
    return any(c not in (TAB, CR) for c in row)


def read_spreadsheet(text: str) -> List[str]:
    """
    Split spreadsheet text into rows.

    - Line breaks preceded by "##" do not end the row; the break is dropped.
    - Rows holding nothing but tabs are discarded.

    Args:
        text: Whole spreadsheet as text

    Returns:
        Rows in file order, header row first
    """
    text = text.replace(CR + LF, LF)
    lines = text.split(LF)
    rows: List[str] = []
    buffer = ""

    for position, line in enumerate(lines):
        buffer += line
        last = position == len(lines) - 1
        if not last and buffer.endswith(CONTINUATION_MARKER):
            continue
        if _has_content(buffer):
            rows.append(buffer)
        buffer = ""

    return rows


def load_spreadsheet_file(path: Union[str, Path]) -> Tuple[List[str], str]:
    """
    Read and tokenize a spreadsheet file.

    Returns:
        (rows, encoding) where encoding is the one the file was decoded with

    Raises:
        ConversionError: the file is missing or cannot be read
    """
    path = Path(path)
    try:
        raw = path.read_bytes()
    except FileNotFoundError as exc:
        raise ConversionError(ErrorCode.FILE_NOT_FOUND, f"File not found: {path}") from exc
    except OSError as exc:
        raise ConversionError(ErrorCode.FILE_ERROR, f"Could not read file {path}: {exc}") from exc
    encoding = detect_encoding(raw)
    return read_spreadsheet(raw.decode(encoding)), encoding


def read_spreadsheet_file(path: Union[str, Path]) -> List[str]:
    """Read and tokenize a spreadsheet file."""
    rows, _ = load_spreadsheet_file(path)
    return rows


def split_row(row: str) -> List[str]:
    """Split a row into its cells."""
    return row.split(TAB)


def cell(cells: List[str], index: int) -> str:
    """
    Cell contents at a column index, "" past the end of the row.

    A ".tif" file extension is removed so graphic names can be written
    either way in the spreadsheet.
    """
    value = cells[index] if index < len(cells) else ""
    if len(value) > len(TIF_SUFFIX) and value.endswith(TIF_SUFFIX):
        value = value[:-len(TIF_SUFFIX)]
    return value


def unquote(text: str) -> str:
    """
    Undo spreadsheet quoting of a text cell.

    One leading and one trailing double quote are removed, then every run
    of doubled quotes collapses to a single quote.
    """
    if text.startswith('"'):
        text = text[1:]
    if text.endswith('"'):
        text = text[:-1]
    return _QUOTE_RUN.sub('"', text)
