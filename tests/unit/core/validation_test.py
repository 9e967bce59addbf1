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

from pathlib import Path
from unittest.mock import Mock

import pytest

from restory.core.data.split_point import SplitPoint
from restory.core.exceptions import GitError, ValidationError
from restory.core.git_commands.git_commands import GitCommands
from restory.core.git_interface.interface import GitInterface
from restory.core.validation import (
    validate_branch_name,
    validate_git_repository,
    validate_message,
    validate_patch_file,
    validate_ref,
    validate_split_points,
)


def test_validate_git_repository_ok():
    git = Mock(spec=GitInterface)
    git.run_git_text_out.return_value = "true\n"
    validate_git_repository(GitCommands(git))
    git.run_git_text_out.assert_called_once_with(["rev-parse", "--is-inside-work-tree"])


def test_validate_git_repository_fails():
    git = Mock(spec=GitInterface)
    git.repo_path = Path("/not/a/repo")
    git.run_git_text_out.return_value = None
    with pytest.raises(GitError, match="Not a git repository"):
        validate_git_repository(GitCommands(git))


@pytest.mark.parametrize("ref", ["HEAD~2", "abc1234", "feature/x", " main "])
def test_validate_ref_accepts(ref):
    assert validate_ref(ref) == ref.strip()


@pytest.mark.parametrize("ref", ["", None, "   ", "--all", "two words"])
def test_validate_ref_rejects(ref):
    with pytest.raises(ValidationError):
        validate_ref(ref)


def test_validate_branch_name_allows_none():
    assert validate_branch_name(None) is None
    assert validate_branch_name("dev") == "dev"


def test_validate_split_points():
    points = validate_split_points(["a.py:3", "b.py:4:2"])
    assert points == [SplitPoint("a.py", 3), SplitPoint("b.py", 4, 2)]


def test_validate_split_points_requires_one():
    with pytest.raises(ValidationError):
        validate_split_points([])


def test_validate_patch_file(tmp_path):
    patch = tmp_path / "change.patch"
    patch.write_text("diff --git a/x b/x\n")
    assert validate_patch_file(str(patch)) == patch.resolve()

    with pytest.raises(ValidationError):
        validate_patch_file(tmp_path / "missing.patch")
    with pytest.raises(ValidationError):
        validate_patch_file(tmp_path)


def test_validate_message():
    assert validate_message("  Fix typo \n") == "Fix typo"
    with pytest.raises(ValidationError):
        validate_message("   ")
