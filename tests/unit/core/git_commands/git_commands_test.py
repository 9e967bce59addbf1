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

import subprocess
from pathlib import Path
from unittest.mock import Mock

import pytest

from restory.core.exceptions import GitError
from restory.core.git_commands.git_commands import GitCommands
from restory.core.git_interface.interface import GitInterface

# -----------------------------------------------------------------------------
# Fixtures
# -----------------------------------------------------------------------------


def completed(stdout: str = "", returncode: int = 0, stderr: str = ""):
    return subprocess.CompletedProcess(
        args=["git"], returncode=returncode, stdout=stdout, stderr=stderr
    )


@pytest.fixture
def mock_git():
    git = Mock(spec=GitInterface)
    git.run_git_text.return_value = completed()
    return git


@pytest.fixture
def git_commands(mock_git):
    return GitCommands(mock_git)


# -----------------------------------------------------------------------------
# Queries
# -----------------------------------------------------------------------------


@pytest.mark.parametrize(
    "out,expected", [("true\n", True), ("false\n", False), (None, False)]
)
def test_is_git_repository(git_commands, mock_git, out, expected):
    mock_git.run_git_text_out.return_value = out

    assert git_commands.is_git_repository() is expected
    mock_git.run_git_text_out.assert_called_once_with(
        ["rev-parse", "--is-inside-work-tree"]
    )


def test_resolve_ref(git_commands, mock_git):
    mock_git.run_git_text_out.return_value = "abc123\n"

    assert git_commands.resolve_ref("HEAD~1") == "abc123"
    mock_git.run_git_text_out.assert_called_once_with(
        ["rev-parse", "--verify", "--quiet", "HEAD~1^{commit}"]
    )


def test_resolve_ref_missing(git_commands, mock_git):
    mock_git.run_git_text_out.return_value = None
    with pytest.raises(GitError, match="Commit not found: nope"):
        git_commands.resolve_ref("nope")


def test_current_branch(git_commands, mock_git):
    mock_git.run_git_text_out.return_value = "main\n"
    assert git_commands.get_current_branch() == "main"

    mock_git.run_git_text_out.return_value = None
    assert git_commands.get_current_branch() is None


def test_parent_of_root_is_none(git_commands, mock_git):
    mock_git.run_git_text_out.return_value = None
    assert git_commands.try_get_parent_hash("abc") is None


def test_list_commits(git_commands, mock_git):
    mock_git.run_git_text.return_value = completed("c1\nc2\n\n")

    assert git_commands.list_commits("base", "HEAD") == ["c1", "c2"]
    args = mock_git.run_git_text.call_args[0][0]
    assert args == ["rev-list", "--reverse", "base..HEAD"]


@pytest.mark.parametrize("returncode, expected", [(0, True), (1, False)])
def test_is_ancestor(git_commands, mock_git, returncode, expected):
    mock_git.run_git_text.return_value = completed(returncode=returncode)
    assert git_commands.is_ancestor("a", "b") is expected


def test_is_ancestor_git_failure(git_commands, mock_git):
    mock_git.run_git_text.return_value = completed(returncode=128, stderr="bad object")
    with pytest.raises(GitError) as exc_info:
        git_commands.is_ancestor("a", "b")
    assert exc_info.value.details == "bad object"


def test_working_tree_clean(git_commands, mock_git):
    mock_git.run_git_text.return_value = completed("")
    assert git_commands.is_working_tree_clean()

    mock_git.run_git_text.return_value = completed(" M file.txt\n")
    assert not git_commands.is_working_tree_clean()


def test_has_staged_changes(git_commands, mock_git):
    mock_git.run_git_text.return_value = completed(returncode=1)
    assert git_commands.has_staged_changes()

    mock_git.run_git_text.return_value = completed(returncode=0)
    assert not git_commands.has_staged_changes()


def test_find_remote_branch_prefers_configured_remote(git_commands, mock_git):
    mock_git.run_git_text_out.return_value = (
        "fork/feature\norigin/feature\norigin/main\n"
    )

    assert git_commands.find_remote_branch("feature", "origin") == "origin/feature"
    assert git_commands.find_remote_branch("feature", "upstream") == "fork/feature"
    assert git_commands.find_remote_branch("missing", "origin") is None


def test_find_stash_ref(git_commands, mock_git):
    mock_git.run_git_text_out.return_value = (
        "stash@{0} On main: restory-autostash-abc\n"
        "stash@{1} WIP on main: 1234567 older\n"
    )

    assert git_commands.find_stash_ref("restory-autostash-abc") == "stash@{0}"
    assert git_commands.find_stash_ref("restory-autostash-zzz") is None


def test_in_progress_operation(git_commands, mock_git, tmp_path):
    mock_git.repo_path = tmp_path
    (tmp_path / ".git" / "rebase-merge").mkdir(parents=True)
    mock_git.run_git_text_out.side_effect = lambda args, **kwargs: f".git/{args[-1]}\n"

    assert git_commands.get_in_progress_operation() == "rebase"


def test_no_operation_in_progress(git_commands, mock_git, tmp_path):
    mock_git.repo_path = tmp_path
    mock_git.run_git_text_out.side_effect = lambda args, **kwargs: f".git/{args[-1]}\n"

    assert git_commands.get_in_progress_operation() is None


# -----------------------------------------------------------------------------
# Mutations
# -----------------------------------------------------------------------------


def test_failed_primitive_raises_with_stderr(git_commands, mock_git):
    mock_git.run_git_text.return_value = completed(
        returncode=1, stderr="error: patch failed\n"
    )

    with pytest.raises(GitError) as exc_info:
        git_commands.apply_patch(Path("/tmp/piece.patch"), mode="plain")

    assert "piece.patch" in exc_info.value.message
    assert exc_info.value.details == "error: patch failed"


@pytest.mark.parametrize(
    "mode, flags",
    [
        ("plain", []),
        ("tolerant", ["--recount", "--unidiff-zero", "-C1"]),
        ("three_way", ["--3way"]),
    ],
)
def test_apply_modes(git_commands, mock_git, mode, flags):
    git_commands.apply_patch("/tmp/x.patch", mode=mode)
    args = mock_git.run_git_text.call_args[0][0]
    assert args == ["apply", *flags, "/tmp/x.patch"]


def test_cherry_pick_never_opens_an_editor(git_commands, mock_git):
    mock_git.run_git_text.side_effect = [completed(), completed("newhash\n")]

    assert git_commands.cherry_pick("abc", cwd="/tmp/wt") == "newhash"

    pick_call = mock_git.run_git_text.call_args_list[0]
    assert pick_call.args[0] == ["cherry-pick", "--allow-empty", "abc"]
    assert pick_call.kwargs["env"]["GIT_EDITOR"] == "true"
    assert pick_call.kwargs["cwd"] == "/tmp/wt"


def test_commit_returns_new_hash(git_commands, mock_git):
    mock_git.run_git_text.side_effect = [completed(), completed("c0ffee\n")]

    assert git_commands.commit("Message") == "c0ffee"
    assert mock_git.run_git_text.call_args_list[0].args[0] == [
        "commit",
        "--no-verify",
        "-m",
        "Message",
    ]


def test_rebase_onto(git_commands, mock_git):
    git_commands.rebase_onto("parent", "commit", "main")
    call = mock_git.run_git_text.call_args
    assert call.args[0] == ["rebase", "--onto", "parent", "commit", "main"]
    assert call.kwargs["env"]["GIT_SEQUENCE_EDITOR"] == "true"


def test_stash_push_reports_created_stash(git_commands, mock_git):
    mock_git.run_git_text_out.side_effect = [
        "",
        "stash@{0} On main: restory-autostash-1\n",
    ]

    assert git_commands.stash_push("restory-autostash-1") is True
    assert mock_git.run_git_text.call_args.args[0] == [
        "stash",
        "push",
        "--include-untracked",
        "-m",
        "restory-autostash-1",
    ]


def test_stash_push_with_nothing_to_stash(git_commands, mock_git):
    mock_git.run_git_text_out.return_value = ""
    assert git_commands.stash_push("restory-autostash-1") is False


def test_add_worktree_from_remote(git_commands, mock_git):
    git_commands.add_worktree(Path("/tmp/wt"), "feature", "origin/feature")
    assert mock_git.run_git_text.call_args.args[0] == [
        "worktree",
        "add",
        "-b",
        "feature",
        "/tmp/wt",
        "origin/feature",
    ]


def test_add_worktree_for_local_branch(git_commands, mock_git):
    git_commands.add_worktree(Path("/tmp/wt"), "feature")
    assert mock_git.run_git_text.call_args.args[0] == [
        "worktree",
        "add",
        "/tmp/wt",
        "feature",
    ]


@pytest.mark.parametrize(
    "force, expected",
    [
        (False, ["push", "origin", "main"]),
        (True, ["push", "--force-with-lease", "origin", "main"]),
    ],
)
def test_push(git_commands, mock_git, force, expected):
    git_commands.push("main", "origin", force_with_lease=force)
    assert mock_git.run_git_text.call_args.args[0] == expected
