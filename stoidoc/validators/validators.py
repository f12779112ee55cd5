"""
Label Value Validation Functions

Implements the checks applied to spreadsheet cells:
- Check digit validation (GS1 Mod10) and GTIN-13/14 prefix checks
- Yes/no interpretation, including the F_ and ISO_ artwork variants
- Revision ("R<n>") and label release date ("<year>-<month>") checks

Validators never raise for bad cell content; they return a
ValidationResult that the caller turns into diagnostics.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Any, Dict, List

from ..core.record import Flag


@dataclass
class ValidationResult:
    """Result of a validation operation."""
    valid: bool
    errors: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)
    meta: Dict[str, Any] = field(default_factory=dict)


NUMERIC = frozenset('0123456789')

GTIN_13 = 13
GTIN_14 = 14

# Company prefixes registered for the label owner
APPROVED_COMPANY_PREFIXES = frozenset({4026704, 5060112})
MAX_COUNTRY_PREFIX = 4

YES_VALUES = frozenset({"y", "yes"})
NO_VALUES = frozenset({"n", "no"})
YES_F_VALUES = frozenset({"f_y", "f_yes"})
YES_ISO_VALUES = frozenset({"iso_y", "iso_yes"})

REVISION_PATTERN = re.compile(r'^R\s*([+-]?\d+)')
RELEASE_DATE_PATTERN = re.compile(r'^\s*([+-]?\d+)-\s*([+-]?\d+)')


def is_numeric(value: str) -> bool:
    """True if value is a non-empty string of ASCII digits."""
    return bool(value) and all(c in NUMERIC for c in value)


def equals_yes(value: str) -> bool:
    return value.lower() in YES_VALUES


def equals_no(value: str) -> bool:
    return value.lower() in NO_VALUES


def interpret_yes_no(value: str) -> Flag:
    """
    Plain yes/no column: Y/Yes -> YES, N/No -> NO, anything else UNSET.
    """
    if equals_yes(value):
        return Flag.YES
    if equals_no(value):
        return Flag.NO
    return Flag.UNSET


def interpret_graphic_flag(value: str) -> Flag:
    """
    Yes/no column that selects a graphic.

    Besides Y/N, the cell may carry the variant marker of the artwork to
    use: F_Y / F_Yes selects the "F_" graphic, ISO_Y / ISO_Yes the "ISO_"
    graphic.
    """
    lowered = value.lower()
    if lowered in YES_F_VALUES:
        return Flag.YES_F
    if lowered in YES_ISO_VALUES:
        return Flag.YES_ISO
    return interpret_yes_no(value)


def calculate_check_digit_mod10(digits: str) -> int:
    """
    Calculate GS1 Mod10 check digit.
    
    Algorithm (GS1 General Specifications):
    1. From right to left, alternate multipliers 3 and 1
    2. Sum all products
    3. Check digit = (10 - (sum mod 10)) mod 10
    
    Args:
        digits: Numeric string without check digit
    
    Returns:
        Calculated check digit (0-9)
    """
    if not is_numeric(digits):
        raise ValueError("Input must be a non-empty numeric string")
    
    total = 0
    for i, digit in enumerate(reversed(digits)):
        multiplier = 3 if i % 2 == 0 else 1
        total += int(digit) * multiplier
    
    return (10 - (total % 10)) % 10


def validate_check_digit(value: str) -> ValidationResult:
    """
    Validate the trailing GS1 check digit of a numeric key.
    
    Args:
        value: The complete value including check digit
    
    Returns:
        ValidationResult with check digit status
    """
    result = ValidationResult(valid=True)
    
    if not is_numeric(value):
        result.valid = False
        result.errors.append("Value must be numeric for check digit validation")
        return result
    
    if len(value) < 2:
        result.valid = False
        result.errors.append("Value too short for check digit validation")
        return result
    
    data_digits = value[:-1]
    provided_check = int(value[-1])
    calculated_check = calculate_check_digit_mod10(data_digits)
    
    result.meta['calculated_check_digit'] = calculated_check
    result.meta['provided_check_digit'] = provided_check
    result.meta['check_digit_valid'] = (provided_check == calculated_check)
    
    if provided_check != calculated_check:
        result.valid = False
        result.errors.append(
            f"Check digit mismatch: expected {calculated_check}, got {provided_check}"
        )
    
    return result


def split_gtin_prefixes(value: str) -> tuple:
    """
    Return (country_prefix, company_prefix) of a GTIN-13 or GTIN-14.

    The country prefix is the leading digit and the company prefix the
    seven digits after it, for both lengths.
    """
    return int(value[0]), int(value[1:8])


def validate_gtin(value: str) -> ValidationResult:
    """
    Validate a GTIN-13 or GTIN-14 barcode value.

    Checks, each reported separately in meta:
    - numeric: all characters are digits
    - length_valid: 13 or 14 digits
    - check_digit_valid: GTIN-14 only; a GTIN-13 is not digit-checked
    - country_prefix_valid: leading digit <= 4
    - company_prefix_valid: digits 2-8 are an approved company prefix;
      the all-zero placeholder GTIN always passes

    Every failed check adds an error; the value is never rejected.
    """
    result = ValidationResult(valid=True)
    result.meta['numeric'] = is_numeric(value)

    if not result.meta['numeric']:
        result.valid = False
        result.errors.append(f"Nonnumeric GTIN \"{value}\"")
        return result

    result.meta['length_valid'] = len(value) in (GTIN_13, GTIN_14)
    if not result.meta['length_valid']:
        result.valid = False
        result.errors.append(f"Invalid GTIN check digit or length \"{value}\"")
        return result

    if len(value) == GTIN_14:
        check_result = validate_check_digit(value)
        result.meta.update(check_result.meta)
        if not check_result.valid:
            result.valid = False
            result.errors.append(f"Invalid GTIN check digit \"{value}\"")

    country_prefix, company_prefix = split_gtin_prefixes(value)
    placeholder = int(value) == 0
    result.meta['country_prefix'] = country_prefix
    result.meta['company_prefix'] = company_prefix
    result.meta['placeholder'] = placeholder
    result.meta['country_prefix_valid'] = country_prefix <= MAX_COUNTRY_PREFIX
    result.meta['company_prefix_valid'] = (
        placeholder or company_prefix in APPROVED_COMPANY_PREFIXES
    )

    if not result.meta['country_prefix_valid']:
        result.valid = False
        result.errors.append(f"Invalid GTIN country prefix \"{country_prefix}\"")
    if not result.meta['company_prefix_valid']:
        result.valid = False
        result.errors.append(f"Invalid GTIN prefix \"{company_prefix}\"")

    return result


def validate_revision(value: str) -> ValidationResult:
    """
    Validate a label revision of the form R<n>, 0 <= n <= 99.
    """
    result = ValidationResult(valid=True)
    match = REVISION_PATTERN.match(value)
    if not match or not 0 <= int(match.group(1)) <= 99:
        result.valid = False
        result.errors.append(f"Invalid revision value \"{value}\"")
        return result
    result.meta['revision'] = int(match.group(1))
    return result


def validate_release_date(value: str) -> ValidationResult:
    """
    Validate a label release date of the form <year>-<month>.

    The year must be after 2019 and the month between 1 and 12.
    """
    result = ValidationResult(valid=True)
    match = RELEASE_DATE_PATTERN.match(value)
    if not match:
        result.valid = False
        result.errors.append(f"Invalid release date value \"{value}\"")
        return result

    year, month = int(match.group(1)), int(match.group(2))
    if year <= 2019 or not 1 <= month <= 12:
        result.valid = False
        result.errors.append(f"Invalid release date value \"{value}\"")
        return result

    result.meta['year'] = year
    result.meta['month'] = month
    return result
