"""
Output formatters for the spreadsheet to IDoc converter.
"""

from .fixed_width import graphic_field, pad_left, pad_right, sequence_field, spaces
from .label_data import export_label_data, to_dataframe

__all__ = [
    "graphic_field",
    "pad_left",
    "pad_right",
    "sequence_field",
    "spaces",
    "export_label_data",
    "to_dataframe",
]
