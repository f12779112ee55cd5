"""
Record ordering for serialization.
"""

from __future__ import annotations

from operator import attrgetter
from typing import Iterable, List

from .record import LabelRecord


def sort_labels(records: Iterable[LabelRecord]) -> List[LabelRecord]:
    """
    Order records by label identifier.

    Plain string comparison is used, so "LBL10" sorts before "LBL9".
    Records with equal labels keep their spreadsheet order.
    """
    return sorted(records, key=attrgetter("label"))
