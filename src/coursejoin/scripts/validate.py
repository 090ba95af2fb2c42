# File: coursejoin/scripts/validate.py
from typing import Iterable

import pandas as pd

from coursejoin.scripts.errors import MissingColumnsError


def require_columns(df: pd.DataFrame, required: Iterable[str], source) -> None:
    """Raise if any of ``required`` is absent from ``df``."""
    missing = [c for c in required if c not in df.columns]
    if missing:
        raise MissingColumnsError(source, missing)
