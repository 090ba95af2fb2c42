# File: coursejoin/scripts/pipeline.py
"""Load both inputs, join them and write the enriched race table."""
from __future__ import annotations

from typing import Callable, Optional, TextIO, Tuple

import pandas as pd

from coursejoin.scripts.config import load_settings
from coursejoin.scripts.format_csv import format_table, write_output
from coursejoin.scripts.join_coords import duplicate_names, join_coordinates
from coursejoin.scripts.load_csv import load_table


def load_inputs(races_path, coords_path, settings: dict) -> Tuple[pd.DataFrame, pd.DataFrame]:
    """Read races then coordinates; both must load before anything is joined."""
    delimiter = settings["format"]["delimiter"]
    datasets = settings["datasets"]
    races = load_table(
        races_path,
        required=datasets["races"].get("required", ()),
        delimiter=delimiter,
        label=datasets["races"].get("label"),
    )
    coords = load_table(
        coords_path,
        required=datasets["coords"].get("required", ()),
        delimiter=delimiter,
        label=datasets["coords"].get("label"),
    )
    return races, coords


def join_inputs(races: pd.DataFrame, coords: pd.DataFrame, settings: dict) -> pd.DataFrame:
    join = settings["join"]
    return join_coordinates(races, coords, key=join["key"], on=join["on"], fields=join["fields"])


def run(
    races_path,
    coords_path,
    output: TextIO,
    settings: Optional[dict] = None,
    on_duplicate: Optional[Callable[[object], None]] = None,
) -> pd.DataFrame:
    """Join the two files and write the result to ``output`` in a single write.

    Errors from loading propagate before ``output`` is touched. ``on_duplicate``
    is called once per coordinate name that appears more than once; the last
    such row is the one used either way.
    """
    settings = settings or load_settings()
    races, coords = load_inputs(races_path, coords_path, settings)

    if on_duplicate is not None:
        for name in duplicate_names(coords, on=settings["join"]["on"]):
            on_duplicate(name)

    joined = join_inputs(races, coords, settings)
    write_output(format_table(joined, settings["format"]["delimiter"]), output)
    return joined
