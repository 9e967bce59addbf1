# -----------------------------------------------------------------------------
# /*
#  * Copyright (C) 2025 CodeStory
#  *
#  * This program is free software; you can redistribute it and/or modify
#  * it under the terms of the GNU General Public License as published by
#  * the Free Software Foundation; Version 2.
#  *
#  * This program is distributed in the hope that it will be useful,
#  * but WITHOUT ANY WARRANTY; without even the implied warranty of
#  * MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE. See the
#  * GNU General Public License for more details.
#  *
#  * You should have received a copy of the GNU General Public License
#  * along with this program; if not, you can contact us at support@codestory.build
#  */
# -----------------------------------------------------------------------------

import shutil
import subprocess
from pathlib import Path

import pytest
from typer.testing import CliRunner

from restory.context import GlobalConfig, GlobalContext


class GitRepo:
    """A throwaway repository driven through the real git binary."""

    def __init__(self, path: Path):
        self.path = path

    def git(self, *args: str) -> str:
        result = subprocess.run(
            ["git", *args],
            cwd=self.path,
            capture_output=True,
            text=True,
            check=True,
        )
        return result.stdout

    def write(self, relative_path: str, content: str) -> None:
        file_path = self.path / relative_path
        file_path.parent.mkdir(parents=True, exist_ok=True)
        file_path.write_text(content, encoding="utf-8", newline="\n")

    def read(self, relative_path: str) -> str:
        return (self.path / relative_path).read_text(encoding="utf-8")

    def commit_files(self, message: str, files: dict[str, str]) -> str:
        for relative_path, content in files.items():
            self.write(relative_path, content)
        self.git("add", "-A")
        self.git("commit", "--no-verify", "-m", message)
        return self.head()

    def head(self, ref: str = "HEAD") -> str:
        return self.git("rev-parse", ref).strip()

    def subjects(self, ref: str = "HEAD") -> list[str]:
        """Commit subjects on ``ref``, oldest first."""
        out = self.git("log", "--reverse", "--format=%s", ref)
        return out.splitlines()

    def show_file(self, ref: str, relative_path: str) -> str:
        return self.git("show", f"{ref}:{relative_path}")

    def current_branch(self) -> str:
        return self.git("symbolic-ref", "--short", "HEAD").strip()

    def status(self) -> str:
        return self.git("status", "--porcelain")

    def context(self, **overrides) -> GlobalContext:
        return GlobalContext.from_global_config(GlobalConfig(**overrides), self.path)


# -----------------------------------------------------------------------------
# Fixtures
# -----------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def isolated_logs(tmp_path, monkeypatch):
    monkeypatch.setattr(
        "restory.core.logging.logging.LOG_DIR", tmp_path / "logs"
    )


@pytest.fixture
def repo_factory(tmp_path):
    if shutil.which("git") is None:
        pytest.skip("git is not installed")

    def create(name: str = "repo") -> GitRepo:
        repo = GitRepo(tmp_path / name)
        repo.path.mkdir()
        repo.git("init", "--quiet")
        repo.git("symbolic-ref", "HEAD", "refs/heads/main")
        repo.git("config", "user.name", "Test User")
        repo.git("config", "user.email", "test@example.com")
        repo.git("config", "commit.gpgsign", "false")
        repo.git("config", "core.autocrlf", "false")
        repo.commit_files("Initial commit", {"README.md": "# test\n"})
        return repo

    return create


@pytest.fixture
def cli():
    from restory.cli import app

    runner = CliRunner()

    def invoke(repo_path: Path | None, *args: str):
        repo_args = ["--repo", str(repo_path)] if repo_path is not None else []
        return runner.invoke(app, ["--silent", *repo_args, *args])

    return invoke
