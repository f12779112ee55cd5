"""
Characteristic value lookup table.

Maps a spreadsheet term (a size, a packaging level, a graphic name) to the
value the label system expects. The table is kept sorted so a term can be
found by binary search; its ordering is verified when it is loaded, before
any spreadsheet is read.
"""

from __future__ import annotations

import json
from bisect import bisect_left
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Tuple

from .core.diagnostics import ErrorCode, LookupTableError


_DEFAULT_TABLE_PATH = Path(__file__).parent / "data" / "sap_lookup.json"
_TABLE_CACHE: Optional["LookupTable"] = None
_TABLE_CACHE_PATH: Optional[Path] = None


@dataclass(frozen=True)
class LookupTable:
    """
    Immutable (term, value) table, strictly increasing by term ignoring case.

    Raises:
        LookupTableError: if two neighbouring terms are out of order or equal
    """
    entries: Tuple[Tuple[str, str], ...]
    _keys: Tuple[str, ...] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        keys = tuple(term.lower() for term, _ in self.entries)
        for i in range(len(keys) - 1):
            if keys[i] >= keys[i + 1]:
                raise LookupTableError(
                    ErrorCode.LOOKUP_ORDER,
                    "Correct values in lookup table: "
                    f"{i}) {self.entries[i][0]}, {i + 1}) {self.entries[i + 1][0]}",
                )
        object.__setattr__(self, "_keys", keys)

    @classmethod
    def from_pairs(cls, pairs: Iterable[Tuple[str, str]]) -> "LookupTable":
        return cls(tuple((str(term), str(value)) for term, value in pairs))

    def resolve(self, term: str) -> Optional[str]:
        """
        Find the value for a term, comparing case-insensitively.

        Returns:
            The resolved value, or None if the term is not in the table.
        """
        needle = term.lower()
        index = bisect_left(self._keys, needle)
        if index < len(self._keys) and self._keys[index] == needle:
            return self.entries[index][1]
        return None

    def __contains__(self, term: str) -> bool:
        return self.resolve(term) is not None

    def __len__(self) -> int:
        return len(self.entries)


def _parse_table(data: Dict[str, Any], path: Path) -> LookupTable:
    try:
        records: List[Dict[str, Any]] = data.get("data", [])
        pairs = [(record["term"], record["value"]) for record in records]
    except (AttributeError, KeyError, TypeError) as exc:
        raise LookupTableError(
            ErrorCode.LOOKUP_FORMAT,
            f"Lookup table {path} must hold a \"data\" list of term/value records",
        ) from exc
    return LookupTable.from_pairs(pairs)


def load_lookup_table(table_path: Optional[Path] = None) -> LookupTable:
    """
    Load and verify a lookup table JSON file with a small in-process cache.

    Args:
        table_path: Optional path to a table; defaults to the bundled one.

    Returns:
        The verified LookupTable.

    Raises:
        LookupTableError: missing, unreadable, malformed or unsorted table
    """
    global _TABLE_CACHE, _TABLE_CACHE_PATH
    path = Path(table_path) if table_path else _DEFAULT_TABLE_PATH
    if _TABLE_CACHE is not None and _TABLE_CACHE_PATH == path:
        return _TABLE_CACHE

    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except FileNotFoundError as exc:
        raise LookupTableError(ErrorCode.FILE_NOT_FOUND, f"Lookup table not found: {path}") from exc
    except OSError as exc:
        raise LookupTableError(ErrorCode.FILE_ERROR, f"Could not read lookup table {path}: {exc}") from exc
    except ValueError as exc:
        # JSONDecodeError and UnicodeDecodeError
        raise LookupTableError(ErrorCode.LOOKUP_FORMAT, f"Lookup table {path} is not valid JSON: {exc}") from exc
    table = _parse_table(data, path)
    _TABLE_CACHE = table
    _TABLE_CACHE_PATH = path
    return table
