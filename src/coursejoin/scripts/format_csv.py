# File: coursejoin/scripts/format_csv.py
from __future__ import annotations

import os
from pathlib import Path
from typing import TextIO

import pandas as pd

from coursejoin.scripts.autotype import format_scalar

QUOTE = '"'
LINE_BREAKS = ("\r", "\n")


def _quote(text: str, delimiter: str) -> str:
    if delimiter in text or QUOTE in text or any(ch in text for ch in LINE_BREAKS):
        return QUOTE + text.replace(QUOTE, QUOTE * 2) + QUOTE
    return text


def format_table(df: pd.DataFrame, delimiter: str = ",") -> str:
    """Render a typed table as delimited text with a header row.

    Nulls become empty fields. Fields containing the delimiter, a quote, a
    carriage return or a newline are quoted, with embedded quotes doubled.
    Every line, the last included, ends with ``\\n``.
    """
    lines = [delimiter.join(_quote(str(name), delimiter) for name in df.columns)]
    lines.extend(
        delimiter.join(_quote(format_scalar(v), delimiter) for v in row)
        for row in df.itertuples(index=False, name=None)
    )
    return "\n".join(lines) + "\n"


def write_output(text: str, stream: TextIO) -> None:
    # Single write of the fully rendered table.
    stream.write(text)
    stream.flush()


def atomic_write(path, text: str, encoding: str = "utf-8") -> str:
    dst = Path(path)
    dst.parent.mkdir(parents=True, exist_ok=True)
    tmp = dst.with_name(dst.name + ".tmp")
    with open(tmp, "w", encoding=encoding, newline="") as fh:
        fh.write(text)
    os.replace(tmp, dst)
    return str(dst)


__all__ = ["format_table", "write_output", "atomic_write"]
