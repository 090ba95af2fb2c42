# File: coursejoin/scripts/load_csv.py
"""Read delimited text into typed tables.

Tables are plain DataFrames whose columns all have ``object`` dtype, so a cell
keeps the exact value ``infer_scalar`` produced (``None`` stays distinct from
a NaN number, integers stay floats, dates stay ``datetime``).
"""
from __future__ import annotations

from pathlib import Path
from typing import Dict, Iterable, List, Sequence

import pandas as pd

from coursejoin.scripts.autotype import infer_scalar
from coursejoin.scripts.errors import InputMissingError, MalformedInputError
from coursejoin.scripts.validate import require_columns


def _infer(value):
    # Short rows and blank lines come back from pandas as NaN rather than "".
    return infer_scalar(value) if isinstance(value, str) else None


def _object_column(values: Iterable, index) -> pd.Series:
    return pd.Series(list(values), index=index, dtype=object)


def load_table(
    path,
    required: Sequence[str] = (),
    delimiter: str = ",",
    label: str | None = None,
) -> pd.DataFrame:
    """Load a delimited file with a header row into a typed table."""
    src = Path(path)
    if not src.is_file():
        raise InputMissingError(src, label)

    try:
        raw = pd.read_csv(
            src,
            sep=delimiter,
            header=None,
            dtype=str,
            na_filter=False,
            keep_default_na=False,
            index_col=False,
            skip_blank_lines=False,
            encoding="utf-8",
        )
    except pd.errors.EmptyDataError:
        raise MalformedInputError(src, "no header row") from None
    except pd.errors.ParserError as exc:
        raise MalformedInputError(src, str(exc).strip()) from exc
    except UnicodeDecodeError as exc:
        raise MalformedInputError(src, f"not valid UTF-8 ({exc.reason})") from exc
    except OSError as exc:
        raise InputMissingError(src, label, reason="could not be read") from exc

    # Header names are used verbatim. A repeated name keeps its first position
    # and takes the value of its last column.
    positions: Dict[str, int] = {}
    for i, name in enumerate(raw.iloc[0]):
        positions[name if isinstance(name, str) else ""] = i

    body = raw.iloc[1:]
    index = pd.RangeIndex(len(body))
    typed = pd.DataFrame(
        {name: _object_column((_infer(v) for v in body.iloc[:, i]), index) for name, i in positions.items()},
        columns=list(positions),
        index=index,
    )
    require_columns(typed, required, src)
    return typed


def from_records(records: Iterable[dict], columns: Sequence[str] = ()) -> pd.DataFrame:
    """Build a typed table from mappings; columns follow first-seen key order."""
    records = list(records)
    names: List[str] = list(dict.fromkeys([*columns, *(k for r in records for k in r)]))
    index = pd.RangeIndex(len(records))
    return pd.DataFrame(
        {name: _object_column((r.get(name) for r in records), index) for name in names},
        columns=names,
        index=index,
    )


def to_records(df: pd.DataFrame) -> List[dict]:
    columns = list(df.columns)
    return [dict(zip(columns, row)) for row in df.itertuples(index=False, name=None)]


__all__ = ["load_table", "from_records", "to_records"]
