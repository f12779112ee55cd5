"""
Diagnostics and fatal errors raised while converting a spreadsheet.

Two tiers exist:
- Diagnostics are recorded and logged, and the conversion continues.
- ConversionError aborts the run; no document is produced.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Iterator, List, Optional

from loguru import logger


class ErrorCode(str, Enum):
    """Diagnostic and error codes."""
    # diagnostics
    UNKNOWN_COLUMN = "UNKNOWN_COLUMN"
    IGNORED_COLUMN = "IGNORED_COLUMN"
    COLUMN_ALIAS = "COLUMN_ALIAS"
    INVALID_CHECK_DIGIT = "INVALID_CHECK_DIGIT"
    INVALID_GTIN_LENGTH = "INVALID_GTIN_LENGTH"
    INVALID_GTIN_PREFIX = "INVALID_GTIN_PREFIX"
    INVALID_COUNTRY_PREFIX = "INVALID_COUNTRY_PREFIX"
    NONNUMERIC_GTIN = "NONNUMERIC_GTIN"
    UNRESOLVED_LEVEL = "UNRESOLVED_LEVEL"
    INVALID_REVISION = "INVALID_REVISION"
    INVALID_RELEASE_DATE = "INVALID_RELEASE_DATE"
    # fatal
    EMPTY_SPREADSHEET = "EMPTY_SPREADSHEET"
    DUPLICATE_COLUMN = "DUPLICATE_COLUMN"
    ALIAS_CONFLICT = "ALIAS_CONFLICT"
    INVALID_LABEL = "INVALID_LABEL"
    MISSING_TEMPLATE = "MISSING_TEMPLATE"
    LOOKUP_ORDER = "LOOKUP_ORDER"
    FILE_NOT_FOUND = "FILE_NOT_FOUND"
    FILE_ERROR = "FILE_ERROR"
    LOOKUP_FORMAT = "LOOKUP_FORMAT"


@dataclass
class Diagnostic:
    """A non-fatal finding reported to the operator."""
    code: str
    message: str
    record: Optional[int] = None
    column: Optional[str] = None


class ConversionError(ValueError):
    """A fatal condition; the whole conversion is abandoned."""

    def __init__(self, code: str, message: str, record: Optional[int] = None):
        super().__init__(message)
        self.code = code
        self.message = message
        self.record = record


class LookupTableError(ConversionError):
    """The characteristic lookup table is unsorted or has duplicate terms."""


@dataclass
class DiagnosticLog:
    """Ordered collection of diagnostics; each one is logged when added."""
    entries: List[Diagnostic] = field(default_factory=list)

    def add(
        self,
        code: str,
        message: str,
        *,
        record: Optional[int] = None,
        column: Optional[str] = None,
    ) -> Diagnostic:
        diagnostic = Diagnostic(code=code, message=message, record=record, column=column)
        self.entries.append(diagnostic)
        logger.warning("[{}] {}", getattr(code, "value", code), message)
        return diagnostic

    def codes(self) -> List[str]:
        return [entry.code for entry in self.entries]

    def for_record(self, record: int) -> List[Diagnostic]:
        return [entry for entry in self.entries if entry.record == record]

    def __iter__(self) -> Iterator[Diagnostic]:
        return iter(self.entries)

    def __len__(self) -> int:
        return len(self.entries)
