# File: coursejoin/scripts/cli.py
import io
from pathlib import Path
from typing import Tuple

import typer

from coursejoin.scripts.autotype import format_scalar
from coursejoin.scripts.config import load_settings
from coursejoin.scripts.errors import CourseJoinError, InputMissingError
from coursejoin.scripts.format_csv import atomic_write
from coursejoin.scripts.join_coords import duplicate_names, summarize_join, unmatched_keys
from coursejoin.scripts.pipeline import join_inputs, load_inputs, run

APP = typer.Typer(help="Join race records with racecourse coordinates.")

EXIT_MISSING = 2
EXIT_MALFORMED = 3


def _fail(exc: CourseJoinError) -> typer.Exit:
    typer.echo(f"[error] {exc}", err=True)
    return typer.Exit(code=EXIT_MISSING if isinstance(exc, InputMissingError) else EXIT_MALFORMED)


def _resolve_paths(settings: dict, races: str | None, coords: str | None) -> Tuple[Path, Path]:
    datasets = settings["datasets"]
    races_path = Path(races or datasets["races"]["path"]).expanduser()
    coords_path = Path(coords or datasets["coords"]["path"]).expanduser()
    return races_path, coords_path


def _warn_duplicate(name) -> None:
    typer.echo(f"[warn] Duplicate coordinate name '{format_scalar(name)}'; using the last row", err=True)


@APP.command("join")
def cmd_join(
    races: str = typer.Option(None, help="Race records CSV (overrides the config path)"),
    coords: str = typer.Option(None, help="Racecourse coordinates CSV (overrides the config path)"),
    output: str = typer.Option("-", help="Destination file, or '-' for stdout"),
    config: str = typer.Option(None, help="Alternate datasets.yml"),
    warn_duplicates: bool = typer.Option(
        True, "--warn-duplicates/--no-warn-duplicates", help="Report repeated coordinate names on stderr"
    ),
):
    buffer = io.StringIO()
    try:
        settings = load_settings(config)
        races_path, coords_path = _resolve_paths(settings, races, coords)
        run(
            races_path,
            coords_path,
            buffer,
            settings=settings,
            on_duplicate=_warn_duplicate if warn_duplicates else None,
        )
    except CourseJoinError as exc:
        raise _fail(exc)

    if output == "-":
        typer.echo(buffer.getvalue(), nl=False)
    else:
        dst = atomic_write(output, buffer.getvalue())
        typer.echo(f"Wrote {dst}", err=True)


@APP.command("check")
def cmd_check(
    races: str = typer.Option(None, help="Race records CSV (overrides the config path)"),
    coords: str = typer.Option(None, help="Racecourse coordinates CSV (overrides the config path)"),
    config: str = typer.Option(None, help="Alternate datasets.yml"),
):
    try:
        settings = load_settings(config)
        races_path, coords_path = _resolve_paths(settings, races, coords)
        races_df, coords_df = load_inputs(races_path, coords_path, settings)
        # Runs the join for its column checks; the table itself is discarded.
        join_inputs(races_df, coords_df, settings)
    except CourseJoinError as exc:
        raise _fail(exc)

    key, on = settings["join"]["key"], settings["join"]["on"]
    for name in duplicate_names(coords_df, on=on):
        _warn_duplicate(name)
    for course in unmatched_keys(races_df, coords_df, key=key, on=on):
        typer.echo(f"[warn] No coordinates for course '{format_scalar(course)}'", err=True)

    summary = summarize_join(races_df, coords_df, key=key, on=on)
    typer.echo(" ".join(f"{k}={v}" for k, v in summary.items()))


if __name__ == "__main__":
    APP()
