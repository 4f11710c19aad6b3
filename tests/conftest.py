"""Shared test fixtures for merkle-diff."""

from pathlib import Path

import pytest
from click.testing import CliRunner


@pytest.fixture
def cli_runner():
    """Click CLI test runner."""
    return CliRunner()


@pytest.fixture
def sentences() -> list[str]:
    """Four lines used by the demo's left-hand document."""
    return [
        "This sentence is equal",
        "This sentence is ok but on byte is different --> 1",
        "Again this is correct",
        "Different sentence",
    ]


@pytest.fixture
def altered_sentences(sentences: list[str]) -> list[str]:
    """The same lines with the second and fourth entries changed."""
    altered = list(sentences)
    altered[1] = "This sentence is ok but on byte is different --> 2"
    altered[3] = "Nothing is common"
    return altered


def write_lines(path: Path, lines: list[str]) -> Path:
    """Write lines to a file, one per line."""
    path.write_text("\n".join(lines) + "\n", encoding="utf-8")
    return path


@pytest.fixture
def isolated_env(monkeypatch):
    """Clear merkle-diff environment overrides."""
    for name in ("MERKLE_DIFF_HASH_ALGORITHM", "MERKLE_DIFF_ENCODING", "MERKLE_DIFF_PRUNE"):
        monkeypatch.delenv(name, raising=False)
