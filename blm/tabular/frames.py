from __future__ import annotations

from pathlib import Path
from typing import Any

import pandas as pd

from ..models.document import Document

"""Conversion between BLM documents and pandas DataFrames.

- document_to_frame: DEFINITION becomes the column index, one frame row per
  data row (string values, nothing is coerced).
- document_from_frame: column names are trimmed and lower-cased so the result
  survives a BLM round trip; missing cells become empty strings.
- read_table / write_table: .csv and .xlsx (openpyxl) on disk.
"""

__all__ = [
    "ConversionError",
    "document_from_frame",
    "document_to_frame",
    "read_table",
    "write_table",
]

TABLE_SUFFIXES = (".csv", ".xlsx")


class ConversionError(Exception):
    """Raised when a table cannot be read, written or converted."""


def document_to_frame(document: Document) -> pd.DataFrame:
    definition = document.definition
    records = []
    for row in document.rows:
        if len(row.values) != len(definition):
            raise ConversionError(f"row {row.index} does not match the definition; validate the document first")
        records.append(row.values)
    return pd.DataFrame(records, columns=list(definition), dtype="object")


def document_from_frame(frame: pd.DataFrame, name: str | None = None, **options: Any) -> Document:
    """Build a Document from a DataFrame.

    ``options`` are passed to Document.from_records (international, eof, eor).
    """
    columns = [str(c).strip().lower() for c in frame.columns]
    if len(set(columns)) != len(columns):
        raise ConversionError(f"duplicate column names after normalization: {columns}")
    records: list[dict[str, Any]] = []
    for raw in frame.itertuples(index=False, name=None):
        records.append({col: ("" if pd.isna(val) else str(val)) for col, val in zip(columns, raw)})
    if not records:
        # keep the column layout even without data rows
        return Document(
            header=Document.from_records([], **options).header,
            definition=columns,
            data=[],
            name=name,
        )
    return Document.from_records(records, name=name, **options)


def read_table(path: Path) -> pd.DataFrame:
    suffix = path.suffix.lower()
    if suffix not in TABLE_SUFFIXES:
        raise ConversionError(f"unsupported table format: {path.name}")
    try:
        if suffix == ".csv":
            return pd.read_csv(path, dtype=str, keep_default_na=False)
        return pd.read_excel(path, dtype=str, keep_default_na=False, engine="openpyxl")
    except (OSError, ValueError) as e:
        raise ConversionError(f"unable to read {path}: {e}") from e


def write_table(frame: pd.DataFrame, path: Path) -> None:
    suffix = path.suffix.lower()
    if suffix not in TABLE_SUFFIXES:
        raise ConversionError(f"unsupported table format: {path.name}")
    try:
        if suffix == ".csv":
            frame.to_csv(path, index=False)
        else:
            frame.to_excel(path, index=False, engine="openpyxl")
    except (OSError, ValueError) as e:
        raise ConversionError(f"unable to write {path}: {e}") from e
