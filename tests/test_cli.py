# File: tests/test_cli.py
from typer.testing import CliRunner

from coursejoin.scripts.cli import APP

runner = CliRunner()

RACES = (
    "date,course,distance\n"
    "2024-05-26,Tokyo,2400\n"
    "2024-11-04,Saga,2000\n"
)
COORDS = "name,x,y\nTokyo,139.4861,35.6625\nKyoto,135.7225,34.9072\n"
JOINED = (
    "date,course,distance,course_x,course_y\n"
    "2024-05-26,Tokyo,2400,139.4861,35.6625\n"
    "2024-11-04,Saga,2000,,\n"
)


def test_join_to_stdout(write_csv):
    races = write_csv("races.csv", RACES)
    coords = write_csv("coords.csv", COORDS)
    result = runner.invoke(APP, ["join", "--races", str(races), "--coords", str(coords)])
    assert result.exit_code == 0, result.output
    assert result.stdout == JOINED


def test_join_to_file(write_csv, tmp_path):
    races = write_csv("races.csv", RACES)
    coords = write_csv("coords.csv", COORDS)
    dst = tmp_path / "out" / "joined.csv"
    result = runner.invoke(APP, ["join", "--races", str(races), "--coords", str(coords), "--output", str(dst)])
    assert result.exit_code == 0, result.output
    assert dst.read_text(encoding="utf-8") == JOINED


def test_join_missing_input_exits_2(write_csv, tmp_path):
    coords = write_csv("coords.csv", COORDS)
    result = runner.invoke(APP, ["join", "--races", str(tmp_path / "absent.csv"), "--coords", str(coords)])
    assert result.exit_code == 2
    assert "[error]" in result.output
    assert "course_x" not in result.output


def test_join_malformed_input_exits_3(write_csv):
    races = write_csv("races.csv", 'course,distance\n"Tokyo,2400\n')
    coords = write_csv("coords.csv", COORDS)
    result = runner.invoke(APP, ["join", "--races", str(races), "--coords", str(coords)])
    assert result.exit_code == 3
    assert "course_x" not in result.output


def test_join_missing_required_column_exits_3(write_csv):
    races = write_csv("races.csv", RACES)
    coords = write_csv("coords.csv", "name,x\nTokyo,1\n")
    result = runner.invoke(APP, ["join", "--races", str(races), "--coords", str(coords)])
    assert result.exit_code == 3
    assert "missing required columns" in result.output


def test_join_warns_on_duplicate_names(write_csv):
    races = write_csv("races.csv", "course\nTokyo\n")
    coords = write_csv("coords.csv", "name,x,y\nTokyo,1,2\nTokyo,10,20\n")
    result = runner.invoke(APP, ["join", "--races", str(races), "--coords", str(coords)])
    assert result.exit_code == 0
    assert "[warn] Duplicate coordinate name 'Tokyo'" in result.output
    assert "Tokyo,10,20\n" in result.output


def test_join_uses_config_paths(write_csv, tmp_path):
    races = write_csv("races.csv", RACES)
    coords = write_csv("coords.csv", COORDS)
    config = tmp_path / "datasets.yml"
    config.write_text(
        f"datasets:\n  races:\n    path: '{races}'\n  coords:\n    path: '{coords}'\n",
        encoding="utf-8",
    )
    result = runner.invoke(APP, ["join", "--config", str(config)])
    assert result.exit_code == 0, result.output
    assert result.stdout == JOINED


def test_check_reports_summary(write_csv):
    races = write_csv("races.csv", RACES)
    coords = write_csv("coords.csv", COORDS)
    result = runner.invoke(APP, ["check", "--races", str(races), "--coords", str(coords)])
    assert result.exit_code == 0, result.output
    assert "races=2 coords=2 matched=1 unmatched=1" in result.output
    assert "[warn] No coordinates for course 'Saga'" in result.output
