"""
Core conversion modules for the spreadsheet to IDoc converter.
"""

from .diagnostics import ConversionError, Diagnostic, DiagnosticLog, ErrorCode, LookupTableError
from .options import ConvertOptions
from .record import Flag, LabelRecord
from .tokenizer import read_spreadsheet, read_spreadsheet_file

__all__ = [
    "ConversionError",
    "Diagnostic",
    "DiagnosticLog",
    "ErrorCode",
    "LookupTableError",
    "ConvertOptions",
    "Flag",
    "LabelRecord",
    "read_spreadsheet",
    "read_spreadsheet_file",
]
