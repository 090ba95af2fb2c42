# File: coursejoin/scripts/join_coords.py
"""Attach racecourse coordinates to race rows.

A strict left join: every race row comes out exactly once, in input order,
with ``course_x``/``course_y`` copied from the coordinate row whose ``name``
equals the race's ``course``. Names are compared exactly (see ``match_key``);
when a name repeats in the coordinate table the last row wins. Races whose
course has no coordinates get ``None`` in both fields.
"""
from __future__ import annotations

from typing import Dict, Iterable, List, Mapping

import pandas as pd

from coursejoin.scripts.autotype import match_key
from coursejoin.scripts.load_csv import from_records, to_records
from coursejoin.scripts.validate import require_columns

KEY = "course"
ON = "name"
FIELDS: Dict[str, str] = {"x": "course_x", "y": "course_y"}

MATCH_COL = "_match_key"


def _keys(series: pd.Series) -> pd.Series:
    return pd.Series([match_key(v) for v in series], index=series.index, dtype=object)


def build_lookup(coords: pd.DataFrame, on: str = ON, fields: Mapping[str, str] = FIELDS) -> pd.DataFrame:
    """Coordinate fields indexed by match key, keeping the last row per name."""
    require_columns(coords, [on, *fields], "coordinates")
    lookup = coords[list(fields)].copy()
    lookup[MATCH_COL] = _keys(coords[on])
    lookup = lookup.drop_duplicates(subset=[MATCH_COL], keep="last")
    return lookup.set_index(MATCH_COL)


def join_coordinates(
    races: pd.DataFrame,
    coords: pd.DataFrame,
    key: str = KEY,
    on: str = ON,
    fields: Mapping[str, str] = FIELDS,
) -> pd.DataFrame:
    """Return a copy of ``races`` with the looked-up coordinate fields added.

    Target columns already present in ``races`` are overwritten in place;
    new ones are appended after the existing columns.
    """
    require_columns(races, [key], "races")
    lookup = build_lookup(coords, on, fields)
    keys = _keys(races[key])

    joined = races.copy()
    for source, target in fields.items():
        values = dict(zip(lookup.index, lookup[source]))
        joined[target] = pd.Series([values.get(k) for k in keys], index=races.index, dtype=object)
    return joined


def join_records(
    races: Iterable[dict],
    coords: Iterable[dict],
    key: str = KEY,
    on: str = ON,
    fields: Mapping[str, str] = FIELDS,
) -> List[dict]:
    """``join_coordinates`` over plain mappings."""
    races = list(races)
    if not races:
        return []
    joined = join_coordinates(
        from_records(races),
        from_records(coords, columns=[on, *fields]),
        key=key,
        on=on,
        fields=fields,
    )
    return to_records(joined)


def duplicate_names(coords: pd.DataFrame, on: str = ON) -> list:
    """Names that occur more than once, in order of first occurrence."""
    keys = _keys(coords[on])
    first_of_repeated = keys.duplicated(keep=False) & ~keys.duplicated(keep="first")
    return list(coords[on][first_of_repeated])


def unmatched_keys(races: pd.DataFrame, coords: pd.DataFrame, key: str = KEY, on: str = ON) -> list:
    """Distinct race keys with no coordinate row, in order of first occurrence."""
    known = set(_keys(coords[on]))
    keys = _keys(races[key])
    missing = ~keys.isin(known) & ~keys.duplicated(keep="first")
    return list(races[key][missing])


def summarize_join(races: pd.DataFrame, coords: pd.DataFrame, key: str = KEY, on: str = ON) -> Dict[str, int]:
    known = set(_keys(coords[on]))
    matched = int(_keys(races[key]).isin(known).sum())
    return {
        "races": int(len(races)),
        "coords": int(len(coords)),
        "matched": matched,
        "unmatched": int(len(races)) - matched,
    }


__all__ = [
    "build_lookup",
    "join_coordinates",
    "join_records",
    "duplicate_names",
    "unmatched_keys",
    "summarize_join",
]
