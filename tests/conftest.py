"""Shared test fixtures for sharedbrain test suite.

Design:
- notes_dir: empty source directory in tmp_path
- dest_dir: output directory path (not created, the generator creates it)
- runner: CliRunner for CLI tests
"""

from pathlib import Path

import pytest
from click.testing import CliRunner


# ─────────────────────────────────────────────────────────────────────────────
# Core Fixtures
# ─────────────────────────────────────────────────────────────────────────────


@pytest.fixture
def runner() -> CliRunner:
    """CLI runner with isolated environment."""
    return CliRunner()


@pytest.fixture
def notes_dir(tmp_path: Path) -> Path:
    """Create an empty source directory for notes."""
    root = tmp_path / "content"
    root.mkdir()
    return root


@pytest.fixture
def dest_dir(tmp_path: Path) -> Path:
    """Output directory for generated notes."""
    return tmp_path / "dest"


@pytest.fixture(autouse=True)
def _clear_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("SHAREDBRAIN_STUB_DATE_POLICY", raising=False)
    monkeypatch.delenv("SHAREDBRAIN_QUIET", raising=False)


# ─────────────────────────────────────────────────────────────────────────────
# Helper Functions (for test code, not fixtures)
# ─────────────────────────────────────────────────────────────────────────────


def write_note(root: Path, name: str, content: str, metadata: str | None = None) -> Path:
    """Write a note, with an optional TOML metadata block.

    Usage in tests:
        from conftest import write_note
        write_note(notes_dir, "First.md", "Links to [[Second]]", 'title = "One"')
    """
    path = root / name
    text = content
    if metadata is not None:
        text = f"+++\n{metadata}\n+++\n{content}"
    path.write_text(text, encoding="utf-8")
    return path
