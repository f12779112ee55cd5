"""
CLI interface for the spreadsheet to IDoc converter.

Usage:
    python -m stoidoc <spreadsheet.txt> [options]

Options:
    -J                     Use the alternate graphics folder
    -L                     Also write a "label data" file
    -n                     Include non-standard columns (GTIN, IPN, ...)
    --output PATH          IDoc file (default: <input>_IDoc (stoidoc).txt)
"""

import argparse
import sys
import time
from pathlib import Path
from typing import Optional

from loguru import logger

from .core.converter import convert_file
from .core.diagnostics import ConversionError
from .core.options import DEFAULT_CONTROL_NUMBER, LABEL_DATA_FORMATS, ConvertOptions
from .lookup import load_lookup_table


LOG_FORMAT = "<level>{level: <8}</level> {message}"


def configure_logging(level: str = "INFO") -> None:
    """Replace loguru's default sink with a compact stderr sink."""
    logger.remove()
    logger.add(sys.stderr, level=level, format=LOG_FORMAT, backtrace=False, diagnose=False)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='stoidoc',
        description='Convert a tab-delimited label spreadsheet into an IDoc file'
    )

    parser.add_argument(
        'input',
        help='Tab-delimited spreadsheet (Excel "Text (Tab delimited)" export)'
    )

    parser.add_argument(
        '-J',
        dest='alt_graphics',
        action='store_true',
        help='Use the alternate graphics folder'
    )

    parser.add_argument(
        '-L',
        dest='label_data',
        action='store_true',
        help='Also create a "Label Data" output file'
    )

    parser.add_argument(
        '-n',
        dest='non_standard',
        action='store_true',
        help='Include non-standard columns: GTIN, IPN, DESCRIPTION, OLDLABEL, '
             'OLDTEMPLATE, PREVLABEL, PREVTEMPLATE, BOMLEVEL'
    )

    parser.add_argument(
        '--output',
        default=None,
        help='IDoc output file (defaults to "<input>_IDoc (stoidoc).txt")'
    )

    parser.add_argument(
        '--label-data-format',
        choices=LABEL_DATA_FORMATS,
        default='txt',
        help='Format of the label data file'
    )

    parser.add_argument(
        '--control-number',
        default=DEFAULT_CONTROL_NUMBER,
        help='Document control number'
    )

    parser.add_argument(
        '--lookup',
        default=None,
        help='Path to a lookup table JSON file (defaults to package data file)'
    )

    verbosity = parser.add_mutually_exclusive_group()
    verbosity.add_argument(
        '--quiet',
        action='store_true',
        help='Only report fatal errors'
    )
    verbosity.add_argument(
        '--verbose',
        action='store_true',
        help='Report progress details'
    )

    return parser


def main(argv: Optional[list] = None) -> int:
    """Main CLI entry point."""
    start = time.perf_counter()
    args = build_parser().parse_args(argv)

    if args.quiet:
        configure_logging("ERROR")
    elif args.verbose:
        configure_logging("DEBUG")
    else:
        configure_logging()

    try:
        options = ConvertOptions(
            control_number=args.control_number,
            use_alt_graphics=args.alt_graphics,
            non_standard_fields=args.non_standard,
            label_data=args.label_data,
            label_data_format=args.label_data_format,
            lookup_path=Path(args.lookup) if args.lookup else None,
        )
    except ValueError as exc:
        logger.error("{}", exc)
        print("Aborting.")
        return 1

    if options.use_alt_graphics:
        print("Alternate graphics path selected. Run program without '-J' flag to remove.")
    if options.label_data:
        print("\"Label Data\" output file option selected. Run program without '-L' flag to remove.")
    if options.non_standard_fields:
        print("Including non-SAP column headings in IDoc. Run program without '-n' flag to remove.")

    try:
        lookup = load_lookup_table(options.lookup_path)
        convert_file(args.input, options, args.output, lookup=lookup)
    except ConversionError as exc:
        logger.error("[{}] {}", getattr(exc.code, "value", exc.code), exc.message)
        if exc.record is not None:
            print(f"Content error in text-delimited spreadsheet, line {exc.record}. Aborting.")
        else:
            print("Aborting.")
        return 1

    elapsed = time.perf_counter() - start
    print(f"\nTime elapsed in stoidoc: {elapsed:.5f}")
    return 0


if __name__ == '__main__':
    sys.exit(main())
