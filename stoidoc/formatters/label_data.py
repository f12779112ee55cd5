"""
Label data export (tab-delimited text or Excel).
"""

from __future__ import annotations

from pathlib import Path
from typing import List, Union

import pandas as pd

from ..core.record import LabelRecord


SHEET_NAME = "Label Data"


def to_dataframe(records: List[LabelRecord]) -> pd.DataFrame:
    """
    One row per record, one upper-case column per populated attribute.

    Attributes left empty on every record are dropped; the spreadsheet row
    number is not exported.
    """
    rows = []
    for record in records:
        row = record.to_dict()
        row.pop("row")
        rows.append(row)

    df = pd.DataFrame(rows)
    if df.empty:
        return df

    populated = [column for column in df.columns if (df[column] != "").any()]
    df = df[populated]
    df.columns = [column.upper() for column in df.columns]
    return df


def export_text(df: pd.DataFrame, path: Union[str, Path], encoding: str = "utf-8") -> Path:
    path = Path(path)
    df.to_csv(path, sep="\t", index=False, encoding=encoding)
    return path


def export_excel(df: pd.DataFrame, path: Union[str, Path], sheet_name: str = SHEET_NAME) -> Path:
    path = Path(path)
    with pd.ExcelWriter(path, engine="openpyxl") as writer:
        df.to_excel(writer, sheet_name=sheet_name, index=False)
    return path


def export_label_data(
    records: List[LabelRecord],
    path: Union[str, Path],
    fmt: str = "txt",
    encoding: str = "utf-8",
) -> Path:
    """
    Write the label data file in the given format ('txt' or 'xlsx').

    The encoding applies to the text format only.
    """
    df = to_dataframe(records)
    if fmt == "xlsx":
        return export_excel(df, path)
    return export_text(df, path, encoding)
