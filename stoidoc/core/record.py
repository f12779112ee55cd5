"""
Label record model.

One LabelRecord holds every attribute of one spreadsheet row. Text
attributes are plain strings where "" means absent; yes/no columns are
held as a Flag.
"""

from __future__ import annotations

from dataclasses import dataclass, fields
from enum import Enum
from typing import Dict, List


class Flag(str, Enum):
    """
    State of a yes/no spreadsheet column.

    The value of each member is the literal written to the value column
    of an IDoc characteristic line.
    """
    UNSET = ""
    NO = "N"
    YES = "Y"
    YES_F = "F_Y"
    YES_ISO = "ISO_Y"

    @property
    def is_yes(self) -> bool:
        return self in (Flag.YES, Flag.YES_F, Flag.YES_ISO)

    @property
    def graphic_prefix(self) -> str:
        """Prefix selecting the alternate artwork for a yes-variant."""
        if self is Flag.YES_F:
            return "F_"
        if self is Flag.YES_ISO:
            return "ISO_"
        return ""


@dataclass
class LabelRecord:
    """
    All attributes of one label.

    Attributes:
        row: 1-based spreadsheet row the record was read from
        label: Label identifier, must start with "LBL"
        material: Material number; repeated values share one material segment
        tdline: Free text, segments separated by "##"
    """
    row: int = 0

    # identity
    label: str = ""
    material: str = ""

    # characteristics
    template: str = ""
    revision: str = ""
    release: str = ""
    size: str = ""
    level: str = ""
    quantity: str = ""
    barcodetext: str = ""
    gtin: str = ""
    ltnumber: str = ""
    ipn: str = ""
    barcode1: str = ""
    gs1: str = ""
    tdline: str = ""

    # graphic columns
    address: str = ""
    cautionstatement: str = ""
    cemark: str = ""
    coostate: str = ""
    distby: str = ""
    ecrepaddress: str = ""
    flgraphic: str = ""
    labelgraph1: str = ""
    labelgraph2: str = ""
    latexstatement: str = ""
    logo1: str = ""
    logo2: str = ""
    logo3: str = ""
    logo4: str = ""
    logo5: str = ""
    mdr1: str = ""
    mdr2: str = ""
    mdr3: str = ""
    mdr4: str = ""
    mdr5: str = ""
    manufacturedby: str = ""
    patentstatement: str = ""
    sterilitystatement: str = ""
    sterilitytype: str = ""
    temprange: str = ""
    version: str = ""
    insertgraphic: str = ""

    # non-standard
    oldlabel: str = ""
    oldtemplate: str = ""
    prevlabel: str = ""
    prevtemplate: str = ""
    bomlevel: str = ""
    description: str = ""

    # flags
    caution: Flag = Flag.UNSET
    consultifu: Flag = Flag.UNSET
    donotusedamaged: Flag = Flag.UNSET
    electroifu: Flag = Flag.UNSET
    keepdry: Flag = Flag.UNSET
    latex: Flag = Flag.UNSET
    latexfree: Flag = Flag.UNSET
    maninbox: Flag = Flag.UNSET
    nonsterile: Flag = Flag.UNSET
    noresterilize: Flag = Flag.UNSET
    pvcfree: Flag = Flag.UNSET
    reusable: Flag = Flag.UNSET
    singlepatientuse: Flag = Flag.UNSET
    singleuseonly: Flag = Flag.UNSET
    ecrep: Flag = Flag.UNSET
    expdate: Flag = Flag.UNSET
    keepawayheat: Flag = Flag.UNSET
    lotgraphic: Flag = Flag.UNSET
    manufacturer: Flag = Flag.UNSET
    mfgdate: Flag = Flag.UNSET
    phtbbp: Flag = Flag.UNSET
    phtdehp: Flag = Flag.UNSET
    phtdinp: Flag = Flag.UNSET
    ref: Flag = Flag.UNSET
    refnumber: Flag = Flag.UNSET
    rxonly: Flag = Flag.UNSET
    serial: Flag = Flag.UNSET
    sizelogo: Flag = Flag.UNSET
    tfxlogo: Flag = Flag.UNSET

    def to_dict(self) -> Dict[str, str]:
        """Attribute name -> text, flags rendered as their literal value."""
        out: Dict[str, str] = {}
        for f in fields(self):
            value = getattr(self, f.name)
            if isinstance(value, Flag):
                value = value.value
            out[f.name] = str(value)
        return out


def new_records(count: int) -> List[LabelRecord]:
    """Blank records for spreadsheet rows 1..count."""
    return [LabelRecord(row=i + 1) for i in range(count)]
