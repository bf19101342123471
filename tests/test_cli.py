"""CLI tests for sharedbrain.

Design:
- Uses fixtures from conftest.py (notes_dir, dest_dir, runner)
- Tests BEHAVIORS not implementations
"""

from pathlib import Path

from click.testing import CliRunner

from conftest import write_note
from sharedbrain import __version__ as SHAREDBRAIN_VERSION
from sharedbrain.cli import cli


def test_version_short_circuits(runner: CliRunner, tmp_path: Path):
    result = runner.invoke(cli, ["--version"])

    assert result.exit_code == 0
    assert SHAREDBRAIN_VERSION in result.output
    assert list(tmp_path.iterdir()) == []


def test_missing_arguments(runner: CliRunner):
    result = runner.invoke(cli, [])

    assert result.exit_code != 0
    assert "Missing argument" in result.output


def test_missing_dest(runner: CliRunner, notes_dir: Path):
    result = runner.invoke(cli, [str(notes_dir)])

    assert result.exit_code != 0
    assert "DEST" in result.output


def test_content_must_exist(runner: CliRunner, tmp_path: Path, dest_dir: Path):
    result = runner.invoke(cli, [str(tmp_path / "nope"), str(dest_dir)])

    assert result.exit_code != 0


def test_generates_notes(runner: CliRunner, notes_dir: Path, dest_dir: Path):
    write_note(notes_dir, "First.md", "* This is a line with a link to [[second]]\n")
    write_note(notes_dir, "Second.md", "Hello\n")

    result = runner.invoke(cli, [str(notes_dir), str(dest_dir)])

    assert result.exit_code == 0, result.output
    assert "Wrote 2 notes" in result.output
    assert "0 stubs, 1 backlinks" in result.output
    second = (dest_dir / "Second.md").read_text()
    assert (
        "* [First](../first/)\n"
        "    * * This is a line with a link to [second](../second/)"
    ) in second


def test_stub_date_option(runner: CliRunner, notes_dir: Path, dest_dir: Path):
    write_note(notes_dir, "2020-04-21.md", "[[Topic]]\n")
    write_note(notes_dir, "2020-04-24.md", "[[Topic]]\n")

    result = runner.invoke(cli, ["--stub-date", "earliest", str(notes_dir), str(dest_dir)])

    assert result.exit_code == 0, result.output
    assert "date = 2020-04-21T21:00:00Z" in (dest_dir / "Topic.md").read_text()


def test_invalid_stub_date_env(runner: CliRunner, notes_dir: Path, dest_dir: Path):
    result = runner.invoke(
        cli,
        [str(notes_dir), str(dest_dir)],
        env={"SHAREDBRAIN_STUB_DATE_POLICY": "sometimes"},
    )

    assert result.exit_code == 1
    assert "SHAREDBRAIN_STUB_DATE_POLICY" in result.output


def test_pipeline_error_exits_nonzero(runner: CliRunner, notes_dir: Path, dest_dir: Path):
    write_note(notes_dir, "Bad.md", "+++\ntitle = 'open'\n")

    result = runner.invoke(cli, [str(notes_dir), str(dest_dir)])

    assert result.exit_code == 1
    assert "bad.md" in result.output
    assert not dest_dir.exists()


def test_invalid_date_file_exits_nonzero(runner: CliRunner, notes_dir: Path, dest_dir: Path):
    write_note(notes_dir, "2020-02-30.md", "Leap day?\n")

    result = runner.invoke(cli, [str(notes_dir), str(dest_dir)])

    assert result.exit_code == 1
    assert "2020-02-30" in result.output


def test_error_reported_once(runner: CliRunner, notes_dir: Path, dest_dir: Path):
    write_note(notes_dir, "Bad.md", "+++\ntitle = 'open'\n")

    result = runner.invoke(cli, [str(notes_dir), str(dest_dir)])

    assert result.exit_code == 1
    assert result.output.count("bad.md") == 1
