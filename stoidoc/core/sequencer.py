"""
IDoc Sequencer / Serializer

Writes label records as a flat IDoc file for the label printing system.

Every data line carries its own sequence number and the sequence number
of its parent segment:

    control record (EDI_DC40)              no sequence number
    material segment   Z2BTMH01000  02     parent = own - 1
    label segment      Z2BTLH01000  03     parent = current material
    text lines         Z2BTTX01000  04     parent = current label
    characteristics    Z2BTLC01000  04     parent = current label

One counter numbers every line of the document. A material segment is
only written when the material differs from the last one written, so
consecutive labels of one material hang off a single material segment.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Iterable, List, Optional, Tuple

from loguru import logger

from .diagnostics import ConversionError, DiagnosticLog, ErrorCode
from .options import ConvertOptions
from .record import Flag, LabelRecord
from .tokenizer import CONTINUATION_MARKER, unquote
from ..formatters.fixed_width import graphic_field, pad_right, sequence_field, spaces
from ..lookup import LookupTable
from ..validators.validators import (
    equals_no,
    equals_yes,
    validate_gtin,
    validate_release_date,
    validate_revision,
)


# Segment tags
MATERIAL_SEGMENT = "Z2BTMH01000"
LABEL_SEGMENT = "Z2BTLH01000"
TEXT_SEGMENT = "Z2BTTX01000"
CHARACTERISTIC_SEGMENT = "Z2BTLC01000"

# Hierarchy levels
MATERIAL_LEVEL = "02"
LABEL_LEVEL = "03"
TEXT_LEVEL = "04"
CHARACTERISTIC_LEVEL = "04"

SEGMENT_FILLER = 19
ROUTING_CODE = "500000000000"

ID_WIDTH = 18
NAME_WIDTH = 30
VALUE_WIDTH = 30
INFO_WIDTH = 255

TEXT_HEADER = "GRUNE  ENMATERIAL  "
TEXT_INDENT = 61
TEXT_WIDTH = 74
FIRST_TEXT_MARK = "*"
NEXT_TEXT_MARK = "/"
NOT_APPLICABLE = "n/a"

LABEL_PREFIX = "LBL"
BLANK_GRAPHIC = "blank-01.tif"
GRAPHIC_EXT = ".tif"
NO_ANSWER = "NO"
MAX_GRAPHIC_NAME = 29
GRAPHIC_SLOT_NAME = "GRAPHIC0"

# Control record constants
CONTROL_TAG = "EDI_DC40  "
IDOC_RELEASE = "740"
IDOC_TYPE = " 3012  Z1BTDOC"
MESSAGE_TYPE = "ZSC_BTEND"
SENDER = "SAPMEP    LS  MEPCLNT500"
RECEIVER = "I041      US  BARTENDER"
LANGUAGE_VIEW = "Material_EN"


# GRAPHIC01..GRAPHIC14: each affirmative flag takes the next free slot
GRAPHIC_SLOTS: Tuple[Tuple[str, str], ...] = (
    ("caution", "Caution.tif"),
    ("consultifu", "ConsultIFU.tif"),
    ("latex", "Latex.tif"),
    ("donotusedamaged", "DoNotUsePakDam.tif"),
    ("latexfree", "Latex Free.tif"),
    ("maninbox", "ManInBox.tif"),
    ("noresterilize", "DoNotRe-sterilize.tif"),
    ("nonsterile", "Non-sterile.tif"),
    ("pvcfree", "PVC_Free.tif"),
    ("reusable", "Reusable.tif"),
    ("singleuseonly", "SINGLEUSE.tif"),
    ("singlepatientuse", "SinglePatienUse.tif"),
    ("electroifu", "ElectroSurIFU.tif"),
    ("keepdry", "KeepDry.tif"),
)

# Yes/no characteristics with one fixed graphic each
BOOLEAN_GRAPHICS: Tuple[Tuple[str, str, str], ...] = (
    ("ECREP", "ecrep", "EC Rep.tif"),
    ("EXPDATE", "expdate", "Expiration Date.tif"),
    ("KEEPAWAYHEAT", "keepawayheat", "KeepAwayHeat.tif"),
    ("LOTGRAPHIC", "lotgraphic", "Lot.tif"),
    ("MANUFACTURER", "manufacturer", "Manufacturer.tif"),
    ("MFGDATE", "mfgdate", "DateofManufacture.tif"),
    ("PHTDEHP", "phtdehp", "PHT-DEHP.tif"),
    ("PHTBBP", "phtbbp", "PHT-BBP.tif"),
    ("PHTDINP", "phtdinp", "PHT-DINP.tif"),
    ("REFNUMBER", "refnumber", "REF.tif"),
    ("REF", "ref", "REF.tif"),
    ("RXONLY", "rxonly", "RX Only.tif"),
    ("SERIAL", "serial", "Serial Number.tif"),
    ("TFXLOGO", "tfxlogo", "TeleflexMedical.tif"),
)

# Characteristics whose cell names a graphic: (name, attribute, graphic for "Y")
GRAPHIC_COLUMNS: Tuple[Tuple[str, str, str], ...] = (
    ("ADDRESS", "address", "Nothing"),
    ("CAUTIONSTATE", "cautionstatement", "Nothing"),
    ("CE0120", "cemark", "Nothing"),
    ("COOSTATE", "coostate", "Nothing"),
    ("DISTRIBUTEDBY", "distby", "Nothing"),
    ("ECREPADDRESS", "ecrepaddress", "Nothing"),
    ("FLGRAPHIC", "flgraphic", "Nothing"),
    ("LABELGRAPH1", "labelgraph1", "Nothing"),
    ("LABELGRAPH2", "labelgraph2", "Nothing"),
    ("LATEXSTATEMENT", "latexstatement", "Nothing"),
    ("LOGO1", "logo1", "Nothing"),
    ("LOGO2", "logo2", "Nothing"),
    ("LOGO3", "logo3", "Nothing"),
    ("LOGO4", "logo4", "Nothing"),
    ("LOGO5", "logo5", "Nothing"),
    ("MDR1", "mdr1", "Nothing"),
    ("MDR2", "mdr2", "Nothing"),
    ("MDR3", "mdr3", "Nothing"),
    ("MDR4", "mdr4", "Nothing"),
    ("MDR5", "mdr5", "Nothing"),
    ("MANUFACTUREDBY", "manufacturedby", "Nothing"),
    ("PATENTSTA", "patentstatement", "Nothing"),
    ("STERILESTA", "sterilitystatement", "Nothing"),
    ("STERILITYTYPE", "sterilitytype", "blank-01.txt"),
    ("TEMPRANGE", "temprange", "Nothing"),
    ("VERSION", "version", "Nothing"),
    ("INSERTGRAPHIC", "insertgraphic", "yes"),
)

# Written only when non-standard fields are enabled
NON_STANDARD_CHARACTERISTICS: Tuple[Tuple[str, str], ...] = (
    ("OLDLABEL", "oldlabel"),
    ("OLDTEMPLATE", "oldtemplate"),
    ("PREVLABEL", "prevlabel"),
    ("PREVTEMPLATE", "prevtemplate"),
    ("BOMLEVEL", "bomlevel"),
)


@dataclass
class ControlState:
    """
    Sequence numbering for one document.

    Attributes:
        control_number: Document control number
        sequence_number: Number the next line will receive
        material_parent: Parent written on the last material segment
        label_parent: Parent for the next label segment
        characteristic_parent: Parent for text and characteristic lines
        last_material: Material of the last material segment written
    """
    control_number: str
    sequence_number: int = 1
    material_parent: int = 0
    label_parent: int = 1
    characteristic_parent: int = 0
    last_material: str = ""

    def _take(self) -> int:
        number = self.sequence_number
        self.sequence_number += 1
        return number

    def is_new_material(self, material: str) -> bool:
        return bool(material) and material != self.last_material

    def open_material(self, material: str) -> Tuple[int, int]:
        """Number a material segment; returns (own, parent)."""
        own = self._take()
        # the material segment points at the line before it
        self.material_parent = own - 1
        self.label_parent = own
        self.last_material = material
        return own, self.material_parent

    def open_label(self) -> Tuple[int, int]:
        """Number a label segment; returns (own, parent)."""
        own = self._take()
        self.characteristic_parent = own
        return own, self.label_parent

    def open_child(self) -> Tuple[int, int]:
        """Number a text or characteristic line; returns (own, parent)."""
        return self._take(), self.characteristic_parent


class IDocWriter:
    """
    Serializes sorted label records into IDoc lines.

    Lines accumulate in `lines`; `document()` joins them. A fatal content
    error raises ConversionError and leaves the document incomplete.
    """

    def __init__(
        self,
        options: ConvertOptions,
        lookup: LookupTable,
        diagnostics: DiagnosticLog,
        state: Optional[ControlState] = None,
    ):
        self.options = options
        self.lookup = lookup
        self.diagnostics = diagnostics
        self.state = state or ControlState(control_number=options.control_number)
        self.graphics_path = options.active_graphics_path
        self.lines: List[str] = []

    # ------------------------------------------------------------------
    # line builders

    def _prefix(self, segment: str, own: int, parent: int, level: str) -> str:
        return (
            segment
            + spaces(SEGMENT_FILLER)
            + ROUTING_CODE
            + self.state.control_number
            + sequence_field(own)
            + sequence_field(parent)
            + level
        )

    def _characteristic(self, name: str, value: str, tail: str) -> None:
        own, parent = self.state.open_child()
        self.lines.append(
            self._prefix(CHARACTERISTIC_SEGMENT, own, parent, CHARACTERISTIC_LEVEL)
            + pad_right(name, NAME_WIDTH)
            + pad_right(value, VALUE_WIDTH)
            + tail
        )

    def _info(self, name: str, value: str) -> None:
        """Characteristic whose value is repeated as its description."""
        if not value:
            return
        if equals_no(value):
            value = NO_ANSWER
        self._characteristic(name, value, pad_right(value, INFO_WIDTH))

    def _info_lookup(self, name: str, value: str, resolved: str) -> None:
        self._characteristic(name, value, pad_right(resolved, INFO_WIDTH))

    def _graphic(self, name: str, value: str, graphic: str) -> None:
        self._characteristic(name, value, graphic_field(self.graphics_path, graphic))

    def _graphic_column(self, name: str, value: str, yes_graphic: str) -> None:
        """
        Characteristic naming a graphic file.

        "Y" selects the column's fixed graphic, "N" the blank graphic;
        any other value is a graphic name, translated through the lookup
        table when it has an entry.
        """
        if not value:
            return
        if equals_yes(value):
            graphic = yes_graphic
        elif equals_no(value):
            graphic = BLANK_GRAPHIC
        else:
            graphic = (self.lookup.resolve(value) or value[:MAX_GRAPHIC_NAME]) + GRAPHIC_EXT
        self._graphic(name, value, graphic)

    def _graphic_slot(self, slot: int, flag: Flag, graphic: str) -> None:
        self._graphic(f"{GRAPHIC_SLOT_NAME}{slot}", flag.value, flag.graphic_prefix + graphic)

    def _boolean_graphic(self, name: str, flag: Flag, graphic: str) -> None:
        if flag is Flag.UNSET:
            return
        if flag.is_yes:
            self._graphic(name, flag.value, flag.graphic_prefix + graphic)
        else:
            self._graphic(name, Flag.NO.value, BLANK_GRAPHIC)

    # ------------------------------------------------------------------
    # validation helpers

    def _check_gtin(self, name: str, value: str, number: int, report_nonnumeric: bool = True) -> None:
        result = validate_gtin(value)
        meta = result.meta
        if not meta['numeric']:
            if report_nonnumeric:
                self.diagnostics.add(
                    ErrorCode.NONNUMERIC_GTIN,
                    f"Nonnumeric GTIN \"{value}\" in record {number}.",
                    record=number, column=name,
                )
            return
        if not meta['length_valid']:
            self.diagnostics.add(
                ErrorCode.INVALID_GTIN_LENGTH,
                f"Invalid GTIN check digit or length \"{value}\" in record {number}.",
                record=number, column=name,
            )
            return
        if meta.get('check_digit_valid') is False:
            self.diagnostics.add(
                ErrorCode.INVALID_CHECK_DIGIT,
                f"Invalid GTIN check digit \"{value}\" in record {number}.",
                record=number, column=name,
            )
        if not meta['country_prefix_valid']:
            self.diagnostics.add(
                ErrorCode.INVALID_COUNTRY_PREFIX,
                f"Invalid GTIN country prefix \"{meta['country_prefix']}\" in record {number}.",
                record=number, column=name,
            )
        if not meta['company_prefix_valid']:
            self.diagnostics.add(
                ErrorCode.INVALID_GTIN_PREFIX,
                f"Invalid GTIN prefix \"{meta['company_prefix']}\" in record {number}.",
                record=number, column=name,
            )

    # ------------------------------------------------------------------
    # segments

    def write_control_record(self, timestamp: Optional[datetime] = None) -> None:
        """First line of the document; consumes no sequence number."""
        timestamp = timestamp or datetime.now()
        self.lines.append(
            CONTROL_TAG
            + ROUTING_CODE
            + self.state.control_number
            + IDOC_RELEASE
            + IDOC_TYPE
            + spaces(53)
            + MESSAGE_TYPE
            + spaces(40)
            + SENDER
            + spaces(91)
            + RECEIVER
            + spaces(92)
            + timestamp.strftime("%Y%m%d%H%M%S")
            + spaces(112)
            + LANGUAGE_VIEW
            + spaces(9)
        )

    def _write_material(self, record: LabelRecord) -> None:
        if not self.state.is_new_material(record.material):
            return
        own, parent = self.state.open_material(record.material)
        self.lines.append(
            self._prefix(MATERIAL_SEGMENT, own, parent, MATERIAL_LEVEL)
            + pad_right(record.material, ID_WIDTH)
        )

    def _write_label(self, record: LabelRecord, number: int) -> None:
        if not record.label.startswith(LABEL_PREFIX):
            raise ConversionError(
                ErrorCode.INVALID_LABEL,
                f"The first 3 characters of the record are not \"{LABEL_PREFIX}\", record {number}.",
                record=number,
            )
        own, parent = self.state.open_label()
        self.lines.append(
            self._prefix(LABEL_SEGMENT, own, parent, LABEL_LEVEL)
            + pad_right(record.label, ID_WIDTH)
        )

    def _write_text_lines(self, record: LabelRecord) -> None:
        """
        Free text, one line per "##"-separated segment.

        The marker stays on the line it ends; the first line is flagged
        "*" and its continuations "/".
        """
        text = record.tdline
        if not text or text.lower() == NOT_APPLICABLE or equals_no(text):
            return

        text = unquote(text)
        mark = FIRST_TEXT_MARK
        while text:
            segment, marker, text = text.partition(CONTINUATION_MARKER)
            own, parent = self.state.open_child()
            self.lines.append(
                self._prefix(TEXT_SEGMENT, own, parent, TEXT_LEVEL)
                + TEXT_HEADER
                + record.label
                + spaces(TEXT_INDENT)
                + pad_right(segment + marker, TEXT_WIDTH)
                + mark
            )
            mark = NEXT_TEXT_MARK

    def _write_characteristics(self, record: LabelRecord, number: int) -> None:
        non_standard = self.options.non_standard_fields

        if not record.template:
            raise ConversionError(
                ErrorCode.MISSING_TEMPLATE,
                f"Missing template number in record {number}. Aborting.",
                record=number,
            )
        self._info("TEMPLATENUMBER", record.template)

        if record.revision:
            if validate_revision(record.revision).valid:
                self._info("REVISION", record.revision)
            else:
                self.diagnostics.add(
                    ErrorCode.INVALID_REVISION,
                    f"Invalid revision value \"{record.revision}\" in record {number}. "
                    "REVISION record skipped.",
                    record=number, column="REVISION",
                )

        if record.release:
            if validate_release_date(record.release).valid:
                self._info("LABEL_RELEASE_DATE", record.release)
            else:
                self.diagnostics.add(
                    ErrorCode.INVALID_RELEASE_DATE,
                    f"Invalid release date value \"{record.release}\" in record {number}. "
                    "LABEL_RELEASE_DATE record skipped.",
                    record=number, column="LABEL_RELEASE_DATE",
                )

        if record.size and not equals_no(record.size):
            size = unquote(record.size)
            resolved = self.lookup.resolve(size)
            if resolved is not None:
                self._info_lookup("SIZE", size, resolved)
            else:
                self._info("SIZE", size)

        if record.level and not equals_no(record.level):
            resolved = self.lookup.resolve(record.level)
            if resolved is None:
                self.diagnostics.add(
                    ErrorCode.UNRESOLVED_LEVEL,
                    f"Level value \"{record.level}\" in record {number} is not a standard "
                    "LEVEL value. Please check it.",
                    record=number, column="LEVEL",
                )
            self._info_lookup("LEVEL", record.level, resolved or record.level)

        self._info("QUANTITY", record.quantity)

        if record.barcodetext and not equals_no(record.barcodetext):
            self._check_gtin("BARCODETEXT", record.barcodetext, number)
            self._info("BARCODETEXT", record.barcodetext)

        if non_standard and record.gtin and not equals_no(record.gtin):
            self._check_gtin("GTIN", record.gtin, number)
            self._info("GTIN", record.gtin)

        self._info("LTNUMBER", record.ltnumber)

        if non_standard:
            self._info("IPN", record.ipn)

        slot = 1
        for attribute, graphic in GRAPHIC_SLOTS:
            flag = getattr(record, attribute)
            if flag.is_yes:
                self._graphic_slot(slot, flag, graphic)
                slot += 1

        if record.barcode1 and not equals_no(record.barcode1):
            self._check_gtin("BARCODE1", record.barcode1, number, report_nonnumeric=False)
            self._graphic_column("BARCODE1", record.barcode1, "Nothing")

        if record.gs1 and not equals_no(record.gs1):
            self._check_gtin("GS1", record.gs1, number, report_nonnumeric=False)
            # a GS1 value with spaces is free text, not a graphic name
            if " " in record.gs1:
                self._graphic("GS1", record.gs1, "")
            else:
                self._graphic_column("GS1", record.gs1, "GS1")

        for name, attribute, graphic in BOOLEAN_GRAPHICS:
            self._boolean_graphic(name, getattr(record, attribute), graphic)

        if record.sizelogo.is_yes:
            self._graphic("SIZELOGO", Flag.YES.value, "Yes")
        else:
            self._graphic("SIZELOGO", Flag.NO.value, "No")

        for name, attribute, yes_graphic in GRAPHIC_COLUMNS:
            self._graphic_column(name, getattr(record, attribute), yes_graphic)

        if non_standard:
            for name, attribute in NON_STANDARD_CHARACTERISTICS:
                self._info(name, getattr(record, attribute))
            description = record.description
            if description.startswith('"'):
                description = description[1:]
            if description.endswith('"'):
                description = description[:-1]
            self._info("DESCRIPTION", description)

    def write_record(self, record: LabelRecord, number: int) -> None:
        """
        Write every segment of one label.

        Args:
            record: The label record
            number: 1-based position in serialization order (for messages)

        Raises:
            ConversionError: label not prefixed "LBL" or template missing
        """
        self._write_material(record)
        self._write_label(record, number)
        self._write_text_lines(record)
        self._write_characteristics(record, number)

    def write_records(self, records: Iterable[LabelRecord]) -> None:
        count = 0
        for number, record in enumerate(records, 1):
            self.write_record(record, number)
            count = number
        logger.debug("Wrote {} label records, {} sequence numbers", count, self.state.sequence_number - 1)

    def document(self) -> str:
        """The document text, one IDoc line per text line."""
        return "".join(line + "\n" for line in self.lines)
