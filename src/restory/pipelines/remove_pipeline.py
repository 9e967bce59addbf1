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

from loguru import logger

from restory.context import GlobalContext, RemoveContext
from restory.core.exceptions import (
    DetachedHeadError,
    NotAncestorError,
    StateConflictError,
    root_commit_unsupported,
)
from restory.core.pipeline.recipe import Recipe


class RemovePipeline:
    """
    Drops a single commit from a branch, keeping every commit after it.

    A branch tip is removed by moving the branch to the parent. Anything
    deeper is removed with ``rebase --onto <parent> <commit> <branch>``;
    conflicts stop the rebase and are left for the user to resolve.
    """

    def __init__(self, global_context: GlobalContext, remove_context: RemoveContext):
        self.global_context = global_context
        self.remove_context = remove_context

    def run(self) -> str:
        git_commands = self.global_context.git_commands
        recipe = Recipe("remove")

        with recipe.step("preflight"):
            current_branch = git_commands.get_current_branch()
            if current_branch is None:
                raise DetachedHeadError("Detached HEAD is not supported for remove")
            branch = self.remove_context.branch or current_branch
            if not git_commands.branch_exists(branch):
                raise StateConflictError(f"Branch not found: {branch}")

        with recipe.step("resolve"):
            commit = git_commands.resolve_ref(self.remove_context.commit_ref)
            if not git_commands.is_ancestor(commit, branch):
                raise NotAncestorError(
                    f"Commit {commit[:7]} is not an ancestor of {branch}"
                )
            parent = git_commands.try_get_parent_hash(commit)
            if parent is None:
                raise root_commit_unsupported("remove")
            tip = git_commands.resolve_ref(branch)

        is_tip = commit == tip
        touches_checkout = branch == current_branch or not is_tip
        if touches_checkout:
            with recipe.step("check working tree"):
                if not git_commands.is_working_tree_clean():
                    raise StateConflictError(
                        "Working tree has uncommitted changes",
                        "Commit or stash them first; remove rewrites the checkout",
                    )

        if is_tip:
            with recipe.step("drop tip"):
                if branch == current_branch:
                    git_commands.reset_hard(parent)
                else:
                    git_commands.update_branch(branch, parent)
        else:
            with recipe.step("rebase"):
                git_commands.rebase_onto(parent, commit, branch)
            if branch != current_branch:
                # rebase leaves the rebased branch checked out
                with recipe.step("restore checkout"):
                    git_commands.checkout(current_branch)

        logger.debug(
            "Removed {commit} from {branch}", commit=commit[:7], branch=branch
        )

        if self.remove_context.push:
            with recipe.step("push"):
                git_commands.push(
                    branch,
                    self.global_context.remote,
                    force_with_lease=self.remove_context.force,
                )

        return branch
