from pathlib import Path

import pytest
from click.testing import CliRunner

from worktodo.commands.archive import archive


@pytest.fixture()
def runner() -> CliRunner:
    return CliRunner()


def test_archive_success(runner: CliRunner, tmp_path: Path):
    queue = tmp_path / "worktodo.txt"
    save = tmp_path / "save.txt"
    queue.write_text("Test=1277,70,0\nTest=1279,70,0\n", encoding="utf-8")

    result = runner.invoke(archive, ["--file", str(queue), "--archive", str(save)])
    assert result.exit_code == 0
    assert "Archived first entry" in result.output
    assert save.read_text(encoding="utf-8") == "Test=1277,70,0\n"
    assert queue.read_text(encoding="utf-8") == "Test=1279,70,0\n"


def test_archive_nothing(runner: CliRunner, tmp_path: Path):
    queue = tmp_path / "worktodo.txt"
    save = tmp_path / "save.txt"
    queue.write_text("\n", encoding="utf-8")

    result = runner.invoke(archive, ["--file", str(queue), "--archive", str(save)])
    assert result.exit_code == 1
    assert "Nothing archived" in result.output
    assert not save.exists()
