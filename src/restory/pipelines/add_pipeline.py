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

from loguru import logger

from restory.context import AddContext, GlobalContext
from restory.core.exceptions import (
    DetachedHeadError,
    GitError,
    StateConflictError,
    path_not_found,
)
from restory.core.pipeline.recipe import Recipe


class AddPipeline:
    """
    Inserts a new commit built from a patch file into existing history.

    The commits after ``after_ref`` are split into an optional replayed
    "older" commit, the "newer" commit the patch is committed on top of,
    and the rest which are replayed afterwards.
    """

    def __init__(self, global_context: GlobalContext, add_context: AddContext):
        self.global_context = global_context
        self.add_context = add_context

    def run(self) -> str:
        git_commands = self.global_context.git_commands
        recipe = Recipe("add")
        patch_file = self.add_context.patch_file

        with recipe.step("preflight"):
            if not patch_file.is_file():
                raise path_not_found(str(patch_file))
            if git_commands.get_current_branch() is None:
                raise DetachedHeadError("Detached HEAD is not supported for add")
            if not git_commands.is_working_tree_clean():
                raise StateConflictError(
                    "Working tree has uncommitted changes",
                    self._dirty_tree_hint(patch_file),
                )

        with recipe.step("resolve"):
            after = git_commands.resolve_ref(self.add_context.after_ref)
            commits = git_commands.list_commits(after, "HEAD")
            if not commits:
                raise StateConflictError(
                    f"No commits after {after[:7]} on the current branch"
                )

        if len(commits) >= 2:
            older, newer, rest = commits[0], commits[1], commits[2:]
        else:
            older, newer, rest = None, commits[0], []

        with recipe.step("reset"):
            git_commands.reset_hard(after)

        with recipe.step("replay insertion point"):
            if older is not None:
                git_commands.cherry_pick(older)
            git_commands.cherry_pick(newer)

        with recipe.step("apply patch"):
            try:
                git_commands.apply_patch(patch_file, mode="plain")
            except GitError as e:
                logger.debug(
                    "Plain apply failed, retrying with three-way apply: {error}",
                    error=e.details or e.message,
                )
                git_commands.apply_patch(patch_file, mode="three_way")

        with recipe.step("commit"):
            git_commands.stage_all()
            new_commit = git_commands.commit(self.add_context.message)

        with recipe.step("replay"):
            for commit_hash in rest:
                git_commands.cherry_pick(commit_hash)

        return new_commit

    def _dirty_tree_hint(self, patch_file: Path) -> str:
        hint = "Commit or stash them first; add resets the working tree"
        repo_path = self.global_context.repo_path.resolve()
        if patch_file.resolve().is_relative_to(repo_path):
            # an untracked patch file would also be swept into the commit
            hint += (
                f". The patch file {patch_file} is inside the repository and "
                "counts as a change; move it outside the repository"
            )
        return hint
