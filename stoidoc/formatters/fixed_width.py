"""
Fixed-width field helpers for IDoc lines.

Every column of an IDoc line is either left-justified text padded with
spaces or a zero-padded number. Values longer than their column are
written in full; the downstream reader tolerates overlong fields but not
truncated ones.
"""

from __future__ import annotations


SPACE = " "
ZERO = "0"

# Width reserved for graphics directory + file name in a characteristic line
GRAPHIC_FIELD_WIDTH = 255


def pad_right(text: str, width: int, fill: str = SPACE) -> str:
    """Left-justify text in a column of the given width."""
    return text.ljust(width, fill)


def pad_left(text: str, width: int, fill: str = SPACE) -> str:
    """Right-justify text in a column of the given width."""
    return text.rjust(width, fill)


def spaces(count: int) -> str:
    """Return a run of spaces; non-positive counts give an empty string."""
    return SPACE * max(count, 0)


def sequence_field(number: int, width: int = 6) -> str:
    """Zero-padded sequence number, e.g. 12 -> '000012'."""
    return pad_left(str(number), width, ZERO)


def graphic_field(directory: str, graphic: str) -> str:
    """
    Graphic reference: directory and file name padded to 255 characters.

    Args:
        directory: Graphics folder, including its trailing separator
        graphic: File name (may be empty)

    Returns:
        directory + graphic, right-padded with spaces to GRAPHIC_FIELD_WIDTH
    """
    return pad_right(directory + graphic, GRAPHIC_FIELD_WIDTH)
