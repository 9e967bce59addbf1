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
from typing import Literal

from loguru import logger

from ..exceptions import GitError
from ..git_interface.interface import GitInterface

ApplyMode = Literal["plain", "tolerant", "three_way"]

# git apply flags per tolerance mode. Split pieces carry less context than a
# normal diff, so "tolerant" recounts the hunks and accepts reduced context.
_APPLY_FLAGS: dict[str, list[str]] = {
    "plain": [],
    "tolerant": ["--recount", "--unidiff-zero", "-C1"],
    "three_way": ["--3way"],
}

# never let git open an editor halfway through a recipe
_NO_EDITOR_ENV = {"GIT_EDITOR": "true", "GIT_SEQUENCE_EDITOR": "true"}

_IN_PROGRESS_MARKERS = {
    "rebase-merge": "rebase",
    "rebase-apply": "rebase",
    "MERGE_HEAD": "merge",
    "CHERRY_PICK_HEAD": "cherry-pick",
    "REVERT_HEAD": "revert",
}


class GitCommands:
    """
    The version-control primitives the rewrite recipes are built from.

    Every primitive either returns its result or raises ``GitError`` naming
    the failed operation, with git's stderr kept in ``details``. Query
    helpers that can legitimately come back empty (parent of a root commit,
    current branch on a detached HEAD) return None instead.
    """

    def __init__(self, git: GitInterface):
        self.git = git

    # -------------------------------
    # helpers
    # -------------------------------

    def _run(
        self,
        args: list[str],
        error: str,
        cwd: str | Path | None = None,
        input_text: str | None = None,
        env: dict | None = None,
    ) -> str:
        result = self.git.run_git_text(args, input_text=input_text, env=env, cwd=cwd)
        if result.returncode != 0:
            raise GitError(error, (result.stderr or "").strip() or None)
        return result.stdout or ""

    # -------------------------------
    # queries
    # -------------------------------

    def is_git_repository(self) -> bool:
        out = self.git.run_git_text_out(["rev-parse", "--is-inside-work-tree"])
        return (out or "").strip() == "true"

    def get_current_branch(self) -> str | None:
        """Return the checked-out branch name, or None on a detached HEAD."""
        out = self.git.run_git_text_out(["symbolic-ref", "--quiet", "--short", "HEAD"])
        branch = (out or "").strip()
        return branch or None

    def resolve_ref(self, ref: str) -> str:
        out = self.git.run_git_text_out(
            ["rev-parse", "--verify", "--quiet", f"{ref}^{{commit}}"]
        )
        resolved = (out or "").strip()
        if not resolved:
            raise GitError(f"Commit not found: {ref}")
        return resolved

    def try_get_parent_hash(self, commit_hash: str) -> str | None:
        out = self.git.run_git_text_out(
            ["rev-parse", "--verify", "--quiet", f"{commit_hash}^"]
        )
        parent = (out or "").strip()
        return parent or None

    def get_subject(self, commit_hash: str) -> str | None:
        out = self.git.run_git_text_out(["log", "-1", "--format=%s", commit_hash])
        subject = (out or "").strip()
        return subject or None

    def show_commit_patch(self, commit_hash: str) -> str:
        return self._run(
            [
                "show",
                "--format=",
                "--no-color",
                "--no-ext-diff",
                "--no-renames",
                commit_hash,
            ],
            error=f"Failed to read the diff of commit {commit_hash[:7]}",
        )

    def list_commits(self, start_exclusive: str, end_inclusive: str) -> list[str]:
        """Commits in ``(start_exclusive, end_inclusive]``, oldest first."""
        out = self._run(
            ["rev-list", "--reverse", f"{start_exclusive}..{end_inclusive}"],
            error=f"Failed to list commits in {start_exclusive[:7]}..{end_inclusive}",
        )
        return [line.strip() for line in out.splitlines() if line.strip()]

    def is_ancestor(self, ancestor: str, descendant: str) -> bool:
        result = self.git.run_git_text(
            ["merge-base", "--is-ancestor", ancestor, descendant]
        )
        # 0: ancestor, 1: not an ancestor, anything else: git failed
        if result.returncode == 0:
            return True
        if result.returncode == 1:
            return False
        raise GitError(
            f"Failed to check ancestry of {ancestor[:7]} in {descendant}",
            (result.stderr or "").strip() or None,
        )

    def is_working_tree_clean(self) -> bool:
        out = self._run(
            ["status", "--porcelain"], error="Failed to read working tree status"
        )
        return not out.strip()

    def has_staged_changes(self, cwd: str | Path | None = None) -> bool:
        result = self.git.run_git_text(["diff", "--cached", "--quiet"], cwd=cwd)
        # --quiet exits 1 when there are differences
        if result.returncode == 0:
            return False
        if result.returncode == 1:
            return True
        raise GitError(
            "Failed to inspect the index", (result.stderr or "").strip() or None
        )

    def branch_exists(self, branch: str) -> bool:
        result = self.git.run_git_text(
            ["show-ref", "--verify", "--quiet", f"refs/heads/{branch}"]
        )
        return result.returncode == 0

    def find_remote_branch(
        self, branch: str, preferred_remote: str | None = None
    ) -> str | None:
        """
        Return ``<remote>/<branch>`` for a remote-tracking ref of ``branch``,
        preferring ``preferred_remote`` when several remotes carry it.
        """
        out = self.git.run_git_text_out(
            ["for-each-ref", "--format=%(refname:short)", "refs/remotes"]
        )
        candidates = [
            ref.strip()
            for ref in (out or "").splitlines()
            if ref.strip().split("/", 1)[-1] == branch
            and "/" in ref.strip()
        ]
        if not candidates:
            return None
        if preferred_remote:
            preferred = f"{preferred_remote}/{branch}"
            if preferred in candidates:
                return preferred
        return candidates[0]

    def get_in_progress_operation(self, cwd: str | Path | None = None) -> str | None:
        """Return the name of an unfinished rebase/merge/cherry-pick/revert, if any."""
        base = Path(cwd) if cwd is not None else Path(self.git.repo_path)
        for marker, operation in _IN_PROGRESS_MARKERS.items():
            out = self.git.run_git_text_out(["rev-parse", "--git-path", marker], cwd=cwd)
            if not out or not out.strip():
                continue
            marker_path = Path(out.strip())
            if not marker_path.is_absolute():
                marker_path = base / marker_path
            if marker_path.exists():
                return operation
        return None

    # -------------------------------
    # mutations
    # -------------------------------

    def reset_hard(self, ref: str, cwd: str | Path | None = None) -> None:
        self._run(
            ["reset", "--hard", ref],
            error=f"Failed to reset the working tree to {ref[:12]}",
            cwd=cwd,
        )

    def apply_patch(
        self,
        patch_path: str | Path,
        mode: ApplyMode = "plain",
        cwd: str | Path | None = None,
    ) -> None:
        self._run(
            ["apply", *_APPLY_FLAGS[mode], str(patch_path)],
            error=f"Failed to apply patch {Path(patch_path).name} ({mode} mode)",
            cwd=cwd,
        )

    def stage_all(self, cwd: str | Path | None = None) -> None:
        self._run(["add", "-A"], error="Failed to stage changes", cwd=cwd)

    def commit(self, message: str, cwd: str | Path | None = None) -> str:
        self._run(
            ["commit", "--no-verify", "-m", message],
            error=f"Failed to create commit {message!r}",
            cwd=cwd,
            env=_NO_EDITOR_ENV,
        )
        return self._run(
            ["rev-parse", "HEAD"], error="Failed to read the new commit", cwd=cwd
        ).strip()

    def cherry_pick(self, commit_hash: str, cwd: str | Path | None = None) -> str:
        self._run(
            ["cherry-pick", "--allow-empty", commit_hash],
            error=f"Failed to cherry-pick {commit_hash[:7]}",
            cwd=cwd,
            env=_NO_EDITOR_ENV,
        )
        return self._run(
            ["rev-parse", "HEAD"], error="Failed to read the new commit", cwd=cwd
        ).strip()

    def rebase_onto(self, new_base: str, upstream: str, branch: str) -> None:
        """Replay ``(upstream, branch]`` on top of ``new_base``."""
        self._run(
            ["rebase", "--onto", new_base, upstream, branch],
            error=f"Failed to rebase {branch} onto {new_base[:7]}",
            env=_NO_EDITOR_ENV,
        )

    def update_branch(self, branch: str, target: str) -> None:
        self._run(
            ["branch", "-f", branch, target],
            error=f"Failed to move branch {branch} to {target[:7]}",
        )

    def checkout(self, ref: str) -> None:
        self._run(["checkout", ref], error=f"Failed to check out {ref}")

    def stash_push(self, label: str) -> bool:
        """Stash everything including untracked files. Returns True if a stash was created."""
        before = self.find_stash_ref(label)
        self._run(
            ["stash", "push", "--include-untracked", "-m", label],
            error="Failed to stash uncommitted changes",
        )
        return before is None and self.find_stash_ref(label) is not None

    def find_stash_ref(self, label: str) -> str | None:
        out = self.git.run_git_text_out(["stash", "list", "--format=%gd %s"])
        for line in (out or "").splitlines():
            ref, _, subject = line.partition(" ")
            if subject.endswith(label):
                return ref
        return None

    def stash_pop(self, stash_ref: str) -> None:
        self._run(
            ["stash", "pop", stash_ref], error=f"Failed to restore stash {stash_ref}"
        )

    def add_worktree(
        self, path: str | Path, branch: str, start_point: str | None = None
    ) -> None:
        """
        Create a linked worktree at ``path`` with ``branch`` checked out.

        With ``start_point`` the branch is created there first (used when the
        branch only exists on a remote).
        """
        if start_point:
            args = ["worktree", "add", "-b", branch, str(path), start_point]
        else:
            args = ["worktree", "add", str(path), branch]
        self._run(args, error=f"Failed to create a worktree for {branch}")

    def remove_worktree(self, path: str | Path) -> None:
        self._run(
            ["worktree", "remove", "--force", str(path)],
            error=f"Failed to remove worktree {path}",
        )
        self._run(["worktree", "prune"], error="Failed to prune worktrees")

    def push(
        self,
        branch: str,
        remote: str,
        force_with_lease: bool = False,
        cwd: str | Path | None = None,
    ) -> None:
        args = ["push"]
        if force_with_lease:
            args.append("--force-with-lease")
        args.extend([remote, branch])
        logger.debug(
            "Pushing {branch} to {remote} (force_with_lease={force})",
            branch=branch,
            remote=remote,
            force=force_with_lease,
        )
        self._run(args, error=f"Failed to push {branch} to {remote}", cwd=cwd)
