"""
Spreadsheet to IDoc converter

Converts a tab-delimited label spreadsheet (Excel "Text (Tab delimited)"
export) into the fixed-column IDoc file read by the label printing system.
"""

from .core.converter import ConversionResult, convert_file, convert_text
from .core.diagnostics import ConversionError, Diagnostic, DiagnosticLog, ErrorCode, LookupTableError
from .core.options import ConvertOptions
from .core.record import Flag, LabelRecord
from .core.sequencer import ControlState, IDocWriter
from .lookup import LookupTable, load_lookup_table
from .validators.validators import validate_check_digit, validate_gtin

__version__ = "1.0.0"
__all__ = [
    "convert_text",
    "convert_file",
    "ConversionResult",
    "ConversionError",
    "Diagnostic",
    "DiagnosticLog",
    "ErrorCode",
    "LookupTableError",
    "ConvertOptions",
    "Flag",
    "LabelRecord",
    "ControlState",
    "IDocWriter",
    "LookupTable",
    "load_lookup_table",
    "validate_check_digit",
    "validate_gtin",
]
