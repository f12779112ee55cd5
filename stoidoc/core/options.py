"""
Run-time configuration for a conversion.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional


DEFAULT_CONTROL_NUMBER = os.getenv("STOIDOC_CONTROL_NUMBER", "2541435")
DEFAULT_GRAPHICS_PATH = os.getenv(
    "STOIDOC_GRAPHICS_PATH",
    "T:\\MEDICAL\\NA\\RTP\\TEAM CENTER\\TEMPLATES\\GRAPHICS\\",
)
DEFAULT_ALT_GRAPHICS_PATH = os.getenv(
    "STOIDOC_ALT_GRAPHICS_PATH",
    "C:\\Labeling Resources\\Personal Graphics\\",
)

LABEL_DATA_FORMATS = ("txt", "xlsx")

# Width of the control number column on every IDoc line
CONTROL_NUMBER_LEN = 7


@dataclass
class ConvertOptions:
    """
    Configuration options for a conversion.

    Attributes:
        control_number: Document control number stamped on every line
        graphics_path: Folder prefixed to every graphic file name
        alt_graphics_path: Folder used instead when use_alt_graphics is set
        use_alt_graphics: Select the alternate graphics folder (CLI -J)
        non_standard_fields: Map and emit GTIN, IPN, DESCRIPTION, OLDLABEL,
            OLDTEMPLATE, PREVLABEL, PREVTEMPLATE and BOMLEVEL (CLI -n)
        label_data: Also write the secondary label data file (CLI -L)
        label_data_format: 'txt' (tab-delimited) or 'xlsx'
        lookup_path: Optional replacement for the bundled lookup table
    """
    control_number: str = DEFAULT_CONTROL_NUMBER
    graphics_path: str = DEFAULT_GRAPHICS_PATH
    alt_graphics_path: str = DEFAULT_ALT_GRAPHICS_PATH
    use_alt_graphics: bool = False
    non_standard_fields: bool = False
    label_data: bool = False
    label_data_format: str = "txt"
    lookup_path: Optional[Path] = None

    def __post_init__(self) -> None:
        if len(self.control_number) != CONTROL_NUMBER_LEN:
            raise ValueError(
                f"Control number must be {CONTROL_NUMBER_LEN} characters: "
                f"{self.control_number!r}"
            )
        if self.label_data_format not in LABEL_DATA_FORMATS:
            raise ValueError(
                f"Unknown label data format: {self.label_data_format!r} "
                f"(expected one of {', '.join(LABEL_DATA_FORMATS)})"
            )

    @property
    def active_graphics_path(self) -> str:
        if self.use_alt_graphics:
            return self.alt_graphics_path
        return self.graphics_path
