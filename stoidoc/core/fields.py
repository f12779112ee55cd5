"""
Column registry and field dispatcher.

Each known spreadsheet column name maps to a FieldSpec naming the
LabelRecord attribute it fills and how a cell is interpreted. The
dispatcher walks the header once and copies every cell of a known column
into the matching attribute of every record.
"""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass
from typing import Dict, List, Optional

from loguru import logger

from .diagnostics import ConversionError, DiagnosticLog, ErrorCode
from .options import ConvertOptions
from .record import Flag, LabelRecord, new_records
from .tokenizer import cell, split_row
from ..validators.validators import equals_no, interpret_graphic_flag, interpret_yes_no


# Cell interpretation
TEXT = "text"
FREE_TEXT = "free_text"
FLAG = "flag"
GRAPHIC_FLAG = "graphic_flag"

# Longest value kept for each class of attribute
MATERIAL_LEN = 40
TEXT_LEN = 29
TEMPLATE_LEN = 17
LEVEL_LEN = 17
LABEL_LEN = 9
GTIN_LEN = 14
BOMLEVEL_LEN = 4
REVISION_LEN = 3
RELEASE_LEN = 7


@dataclass(frozen=True)
class FieldSpec:
    """
    How one spreadsheet column fills a LabelRecord attribute.

    Attributes:
        attribute: LabelRecord attribute name
        kind: TEXT, FREE_TEXT, FLAG or GRAPHIC_FLAG
        max_length: Longest text kept (None for no limit)
        non_standard: Only mapped when non-standard fields are enabled
        yes_only: Flag column where an explicit "no" is left unset
    """
    attribute: str
    kind: str = TEXT
    max_length: Optional[int] = TEXT_LEN
    non_standard: bool = False
    yes_only: bool = False


def _text(attribute: str, max_length: Optional[int] = TEXT_LEN, non_standard: bool = False) -> FieldSpec:
    return FieldSpec(attribute, TEXT, max_length, non_standard)


def _graphic_flag(attribute: str, yes_only: bool = False) -> FieldSpec:
    return FieldSpec(attribute, GRAPHIC_FLAG, None, yes_only=yes_only)


COLUMNS: Dict[str, FieldSpec] = {
    "LABEL": _text("label", LABEL_LEN),
    "MATERIAL": _text("material", MATERIAL_LEN),
    "PCODE": _text("material", MATERIAL_LEN),
    "TDLINE": FieldSpec("tdline", FREE_TEXT, None),
    "TEMPLATENUMBER": _text("template", TEMPLATE_LEN),
    "TEMPLATE": _text("template", TEMPLATE_LEN),
    "REVISION": _text("revision", REVISION_LEN),
    "LABEL_RELEASE_DATE": _text("release", RELEASE_LEN),
    "SIZE": _text("size"),
    "LEVEL": _text("level", LEVEL_LEN),
    "QUANTITY": _text("quantity", MATERIAL_LEN),
    "BARCODETEXT": _text("barcodetext", GTIN_LEN),
    "BARCODE1": _text("barcode1"),
    "GS1": _text("gs1"),
    "LTNUMBER": _text("ltnumber"),
    "BOMLEVEL": _text("bomlevel", BOMLEVEL_LEN),

    "ADDRESS": _text("address"),
    "CAUTIONSTATE": _text("cautionstatement"),
    "CE0120": _text("cemark"),
    "CEMARK": _text("cemark"),
    "CE": _text("cemark"),
    "COOSTATE": _text("coostate"),
    "DISTRIBUTEDBY": _text("distby"),
    "ECREPADDRESS": _text("ecrepaddress"),
    "FLGRAPHIC": _text("flgraphic"),
    "INSERTGRAPHIC": _text("insertgraphic"),
    "LABELGRAPH1": _text("labelgraph1"),
    "LABELGRAPH2": _text("labelgraph2"),
    "LATEXSTATEMENT": _text("latexstatement"),
    "LOGO1": _text("logo1"),
    "LOGO2": _text("logo2"),
    "LOGO3": _text("logo3"),
    "LOGO4": _text("logo4"),
    "LOGO5": _text("logo5"),
    "MDR1": _text("mdr1"),
    "MDR2": _text("mdr2"),
    "MDR3": _text("mdr3"),
    "MDR4": _text("mdr4"),
    "MDR5": _text("mdr5"),
    "MANUFACTUREDBY": _text("manufacturedby"),
    "PATENTSTA": _text("patentstatement"),
    "STERILESTA": _text("sterilitystatement"),
    "STERILITYTYPE": _text("sterilitytype"),
    "TEMPRANGE": _text("temprange"),
    "VERSION": _text("version"),

    "GTIN": _text("gtin", GTIN_LEN, non_standard=True),
    "IPN": _text("ipn", non_standard=True),
    "DESCRIPTION": _text("description", non_standard=True),
    "OLDLABEL": _text("oldlabel", non_standard=True),
    "OLDTEMPLATE": _text("oldtemplate", non_standard=True),
    "PREVLABEL": _text("prevlabel", non_standard=True),
    "PREVTEMPLATE": _text("prevtemplate", non_standard=True),

    "CAUTION": _graphic_flag("caution"),
    "CONSULTIFU": _graphic_flag("consultifu"),
    "CONTAINSLATEX": _graphic_flag("latex"),
    "DONOTUSEDAM": _graphic_flag("donotusedamaged"),
    "DONOTPAKDAM": _graphic_flag("donotusedamaged"),
    "ELECTROSURIFU": _graphic_flag("electroifu"),
    "KEEPDRY": _graphic_flag("keepdry", yes_only=True),
    "LATEXFREE": _graphic_flag("latexfree"),
    "MANINBOX": _graphic_flag("maninbox"),
    "NORESTERILE": _graphic_flag("noresterilize"),
    "NONSTERILE": _graphic_flag("nonsterile"),
    "PVCFREE": _graphic_flag("pvcfree"),
    "REUSABLE": _graphic_flag("reusable"),
    "SINGLEUSE": _graphic_flag("singleuseonly"),
    "SINGLEPATIENTUSE": _graphic_flag("singlepatientuse"),
    "ECREP": _graphic_flag("ecrep"),
    "EXPDATE": _graphic_flag("expdate"),
    "KEEPAWAYHEAT": _graphic_flag("keepawayheat"),
    "LOTGRAPHIC": _graphic_flag("lotgraphic"),
    "MANUFACTURER": _graphic_flag("manufacturer"),
    "MFGDATE": _graphic_flag("mfgdate"),
    "PHTDEHP": _graphic_flag("phtdehp"),
    "PHTBBP": _graphic_flag("phtbbp"),
    "PHTDINP": _graphic_flag("phtdinp"),
    "REF": _graphic_flag("ref"),
    "REFNUMBER": _graphic_flag("refnumber"),
    "RXONLY": _graphic_flag("rxonly"),
    "SERIAL": _graphic_flag("serial"),
    "TFXLOGO": _graphic_flag("tfxlogo"),
    "SIZELOGO": FieldSpec("sizelogo", FLAG, None),
}

# Misspellings that get a hint on top of the unknown-column diagnostic
COLUMN_HINTS = {
    "CAUTIONSTATEMENT": "CAUTIONSTATE",
}

MATERIAL_COLUMN = "MATERIAL"
MATERIAL_ALIAS = "PCODE"


def parse_header(row: str) -> List[str]:
    """Column names of the header row, whitespace-stripped."""
    return [name.strip() for name in split_row(row)]


def find_duplicate_columns(header: List[str]) -> List[str]:
    """Column names appearing more than once (empty names ignored), sorted."""
    counts = Counter(name for name in header if name)
    return sorted(name for name, count in counts.items() if count > 1)


def check_header(header: List[str]) -> None:
    """
    Reject headers that cannot be mapped unambiguously.

    Raises:
        ConversionError: duplicate column names, or both MATERIAL and PCODE
    """
    duplicates = find_duplicate_columns(header)
    if duplicates:
        raise ConversionError(
            ErrorCode.DUPLICATE_COLUMN,
            f"Duplicate column names in spreadsheet: {', '.join(duplicates)}",
        )
    if MATERIAL_COLUMN in header and MATERIAL_ALIAS in header:
        raise ConversionError(
            ErrorCode.ALIAS_CONFLICT,
            f"Found both \"{MATERIAL_COLUMN}\" and \"{MATERIAL_ALIAS}\" column headings. "
            "Eliminate one of these.",
        )


def read_value(spec: FieldSpec, value: str):
    """
    Interpret one cell for a column.

    Returns:
        The text to store, or a Flag for yes/no columns.
    """
    if spec.kind == FLAG:
        return interpret_yes_no(value)
    if spec.kind == GRAPHIC_FLAG:
        flag = interpret_graphic_flag(value)
        if spec.yes_only and flag is Flag.NO:
            return Flag.UNSET
        return flag

    if equals_no(value):
        return ""
    if spec.max_length is not None:
        return value[:spec.max_length]
    return value


def assign_column(records: List[LabelRecord], data_rows: List[List[str]], index: int, spec: FieldSpec) -> None:
    """Fill spec.attribute of every record from the cell at column index."""
    for record, cells in zip(records, data_rows):
        value = read_value(spec, cell(cells, index))
        # a blank yes/no cell leaves an earlier alias column's answer alone
        if isinstance(value, Flag) and value is Flag.UNSET:
            continue
        setattr(record, spec.attribute, value)


def map_columns(
    rows: List[str],
    options: ConvertOptions,
    diagnostics: DiagnosticLog,
) -> List[LabelRecord]:
    """
    Build one LabelRecord per data row.

    Args:
        rows: Tokenized spreadsheet, header row first
        options: Conversion options (non-standard field handling)
        diagnostics: Receives unknown, ignored and aliased column notices

    Returns:
        Records in spreadsheet order

    Raises:
        ConversionError: empty spreadsheet or an ambiguous header
    """
    if not rows:
        raise ConversionError(ErrorCode.EMPTY_SPREADSHEET, "Spreadsheet has no header row")

    header = parse_header(rows[0])
    check_header(header)

    data_rows = [split_row(row) for row in rows[1:]]
    records = new_records(len(data_rows))
    mapped = 0

    for index, name in enumerate(header):
        if not name:
            continue

        spec = COLUMNS.get(name)
        if spec is None:
            hint = COLUMN_HINTS.get(name)
            message = f"Ignoring column \"{name}\""
            if hint:
                message = f"Change \"{name}\" to \"{hint}\". {message}"
            diagnostics.add(ErrorCode.UNKNOWN_COLUMN, message, column=name)
            continue

        if spec.non_standard and not options.non_standard_fields:
            diagnostics.add(ErrorCode.IGNORED_COLUMN, f"Ignoring column \"{name}\"", column=name)
            continue

        if name == MATERIAL_ALIAS:
            diagnostics.add(
                ErrorCode.COLUMN_ALIAS,
                f"Column \"{MATERIAL_ALIAS}\" substituted for \"{MATERIAL_COLUMN}\"",
                column=name,
            )

        assign_column(records, data_rows, index, spec)
        mapped += 1

    logger.debug("Mapped {} columns into {} label records", mapped, len(records))
    return records
