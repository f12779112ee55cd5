"""
Validation modules for the spreadsheet to IDoc converter.
"""

from .validators import (
    calculate_check_digit_mod10,
    equals_no,
    equals_yes,
    interpret_graphic_flag,
    interpret_yes_no,
    is_numeric,
    split_gtin_prefixes,
    validate_check_digit,
    validate_gtin,
    validate_release_date,
    validate_revision,
    ValidationResult,
    APPROVED_COMPANY_PREFIXES,
    NUMERIC,
)

__all__ = [
    "calculate_check_digit_mod10",
    "equals_no",
    "equals_yes",
    "interpret_graphic_flag",
    "interpret_yes_no",
    "is_numeric",
    "split_gtin_prefixes",
    "validate_check_digit",
    "validate_gtin",
    "validate_release_date",
    "validate_revision",
    "ValidationResult",
    "APPROVED_COMPANY_PREFIXES",
    "NUMERIC",
]
