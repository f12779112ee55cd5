"""
Spreadsheet to IDoc conversion pipeline.

Tokenizer -> field dispatcher -> sorter -> sequencer, with the lookup
table and validators consulted along the way. A fatal condition raises
ConversionError before any output is written.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import List, Optional, Union

from loguru import logger

from .diagnostics import ConversionError, DiagnosticLog, ErrorCode
from .fields import map_columns
from .options import ConvertOptions
from .record import LabelRecord
from .sequencer import IDocWriter
from .sorter import sort_labels
from .tokenizer import load_spreadsheet_file, read_spreadsheet
from ..formatters.label_data import export_label_data
from ..lookup import LookupTable, load_lookup_table


IDOC_SUFFIX = "_IDoc (stoidoc).txt"
LABEL_DATA_SUFFIX = "_labeldata"

OUTPUT_ENCODINGS = {"utf-8-sig": "utf-8"}


@dataclass
class ConversionResult:
    """
    Outcome of a successful conversion.

    Attributes:
        document: The IDoc text, newline-terminated lines
        records: Label records in serialization order
        diagnostics: Non-fatal findings, in the order they were raised
        encoding: Encoding of the source spreadsheet; output files use it
            too so cell bytes and column widths carry through unchanged
    """
    document: str
    records: List[LabelRecord] = field(default_factory=list)
    diagnostics: DiagnosticLog = field(default_factory=DiagnosticLog)
    encoding: str = "utf-8"

    @property
    def output_encoding(self) -> str:
        # the byte order mark of the source is not repeated
        return OUTPUT_ENCODINGS.get(self.encoding, self.encoding)

    @property
    def line_count(self) -> int:
        return self.document.count("\n")


def idoc_output_path(input_path: Union[str, Path]) -> Path:
    """Default IDoc file for an input spreadsheet, beside the input."""
    path = Path(input_path)
    return path.with_name(path.stem + IDOC_SUFFIX)


def label_data_output_path(input_path: Union[str, Path], fmt: str = "txt") -> Path:
    path = Path(input_path)
    return path.with_name(f"{path.stem}{LABEL_DATA_SUFFIX}.{fmt}")


def _convert_rows(
    rows: List[str],
    options: ConvertOptions,
    lookup: Optional[LookupTable],
    timestamp: Optional[datetime],
) -> ConversionResult:
    if lookup is None:
        lookup = load_lookup_table(options.lookup_path)

    diagnostics = DiagnosticLog()
    records = sort_labels(map_columns(rows, options, diagnostics))

    writer = IDocWriter(options, lookup, diagnostics)
    writer.write_control_record(timestamp)
    writer.write_records(records)

    return ConversionResult(
        document=writer.document(),
        records=records,
        diagnostics=diagnostics,
    )


def convert_text(
    text: str,
    options: Optional[ConvertOptions] = None,
    *,
    lookup: Optional[LookupTable] = None,
    timestamp: Optional[datetime] = None,
) -> ConversionResult:
    """
    Convert tab-delimited spreadsheet text to an IDoc document.

    Args:
        text: Whole spreadsheet, header row first
        options: Conversion options (defaults if None)
        lookup: Lookup table; loaded from options.lookup_path if None
        timestamp: Creation time for the control record (now if None)

    Returns:
        ConversionResult with the document, sorted records and diagnostics

    Raises:
        ConversionError: on any fatal condition
    """
    options = options or ConvertOptions()
    return _convert_rows(read_spreadsheet(text), options, lookup, timestamp)


def convert_file(
    input_path: Union[str, Path],
    options: Optional[ConvertOptions] = None,
    output_path: Optional[Union[str, Path]] = None,
    *,
    lookup: Optional[LookupTable] = None,
    timestamp: Optional[datetime] = None,
) -> ConversionResult:
    """
    Convert a spreadsheet file and write the IDoc (and label data) files.

    Nothing is written when the conversion fails. Output text files are
    written in the encoding the spreadsheet was read with.

    Returns:
        ConversionResult of the conversion

    Raises:
        ConversionError: on any fatal condition, including unreadable input
            and unwritable output files
    """
    options = options or ConvertOptions()
    input_path = Path(input_path)
    rows, encoding = load_spreadsheet_file(input_path)
    result = _convert_rows(rows, options, lookup, timestamp)
    result.encoding = encoding

    output_path = Path(output_path) if output_path else idoc_output_path(input_path)
    logger.info("Creating IDoc file \"{}\"", output_path)
    try:
        output_path.write_text(result.document, encoding=result.output_encoding)
    except (OSError, UnicodeEncodeError) as exc:
        raise ConversionError(
            ErrorCode.FILE_ERROR, f"Could not write output file {output_path}: {exc}"
        ) from exc

    if options.label_data:
        data_path = label_data_output_path(input_path, options.label_data_format)
        try:
            export_label_data(
                result.records, data_path, options.label_data_format,
                encoding=result.output_encoding,
            )
        except (OSError, UnicodeEncodeError) as exc:
            raise ConversionError(
                ErrorCode.FILE_ERROR, f"Could not write output file {data_path}: {exc}"
            ) from exc
        logger.info("Creating label data file \"{}\"", data_path)

    logger.info(
        "Converted {} labels into {} IDoc lines ({} diagnostics)",
        len(result.records), result.line_count, len(result.diagnostics),
    )
    return result
