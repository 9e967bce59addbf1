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

import uuid

from colorama import Fore, Style
from loguru import logger

from restory.constants import STASH_LABEL_PREFIX
from restory.context import GlobalContext, MoveContext, RemoveContext
from restory.core.exceptions import (
    DetachedHeadError,
    StateConflictError,
    restoryError,
)
from restory.core.pipeline.recipe import Recipe
from restory.core.pipeline.resources import linked_worktree
from restory.pipelines.remove_pipeline import RemovePipeline


class MovePipeline:
    """
    Copies a commit onto another branch, optionally removing it from the
    current one.

    The destination branch is modified in a temporary linked worktree so
    the primary checkout never switches branches. Uncommitted changes are
    stashed when requested and restored at the end, unless a rebase or
    cherry-pick was left in progress.
    """

    def __init__(self, global_context: GlobalContext, move_context: MoveContext):
        self.global_context = global_context
        self.move_context = move_context
        self.recipe = Recipe("move")

    def run(self) -> str:
        git_commands = self.global_context.git_commands
        destination = self.move_context.destination_branch

        with self.recipe.step("preflight"):
            source_branch = git_commands.get_current_branch()
            if source_branch is None:
                raise DetachedHeadError("Detached HEAD is not supported for move")
            if destination == source_branch:
                raise StateConflictError(
                    f"Destination branch {destination} is the current branch"
                )
            # reset target for manual recovery, taken before any mutation
            source_tip = git_commands.resolve_ref(source_branch)

        stash_label = None
        with self.recipe.step("stash"):
            if not git_commands.is_working_tree_clean():
                if not self.move_context.auto_stash:
                    raise StateConflictError(
                        "Working tree has uncommitted changes",
                        "Commit or stash them first, or pass --auto-stash",
                    )
                label = f"{STASH_LABEL_PREFIX}{uuid.uuid4().hex[:12]}"
                if git_commands.stash_push(label):
                    stash_label = label
                    logger.info("Stashed uncommitted changes as {label}", label=label)

        try:
            self._move(source_branch, destination)
        except BaseException:
            if stash_label is not None:
                self._restore_stash(
                    stash_label, source_branch, source_tip, raise_on_failure=False
                )
            raise

        if stash_label is not None:
            self._restore_stash(stash_label, source_branch, source_tip)

        return destination

    def _move(self, source_branch: str, destination: str) -> None:
        git_commands = self.global_context.git_commands
        remote = self.global_context.remote

        with self.recipe.step("resolve"):
            commit = git_commands.resolve_ref(self.move_context.commit_ref)
            start_point = None
            if not git_commands.branch_exists(destination):
                start_point = git_commands.find_remote_branch(destination, remote)
                if start_point is None:
                    raise StateConflictError(
                        f"Branch {destination} exists neither locally nor on a remote"
                    )

        with self.recipe.step("cherry-pick"):
            with linked_worktree(git_commands, destination, start_point) as worktree:
                new_commit = git_commands.cherry_pick(commit, cwd=worktree)
                logger.debug(
                    "Picked {commit} onto {branch} as {new}",
                    commit=commit[:7],
                    branch=destination,
                    new=new_commit[:7],
                )
                if self.move_context.push:
                    git_commands.push(
                        destination,
                        remote,
                        force_with_lease=self.move_context.force,
                        cwd=worktree,
                    )

        if self.move_context.remove_from_source:
            with self.recipe.step("remove from source"):
                RemovePipeline(
                    self.global_context,
                    RemoveContext(
                        commit_ref=commit,
                        branch=source_branch,
                        push=self.move_context.push,
                        force=self.move_context.force,
                    ),
                ).run()

    def _restore_stash(
        self,
        label: str,
        source_branch: str,
        source_tip: str,
        raise_on_failure: bool = True,
    ) -> None:
        git_commands = self.global_context.git_commands

        stash_ref = git_commands.find_stash_ref(label)
        if stash_ref is None:
            logger.warning("Stash {label} not found, nothing restored", label=label)
            return

        operation = git_commands.get_in_progress_operation()
        if operation is not None:
            self._warn_manual_recovery(stash_ref, source_branch, source_tip, operation)
            return

        try:
            git_commands.stash_pop(stash_ref)
        except restoryError:
            self._warn_manual_recovery(stash_ref, source_branch, source_tip, None)
            if raise_on_failure:
                raise
            return
        logger.info("Restored stashed changes from {ref}", ref=stash_ref)

    def _warn_manual_recovery(
        self,
        stash_ref: str,
        source_branch: str,
        source_tip: str,
        operation: str | None,
    ) -> None:
        reason = (
            f"A {operation} is in progress"
            if operation
            else "The stash could not be applied cleanly"
        )
        logger.warning(
            f"{Fore.YELLOW}{reason}; your uncommitted changes were left in "
            f"{stash_ref}.{Style.RESET_ALL}"
        )
        logger.warning(
            "To recover: finish or abort the operation "
            f"(e.g. 'git {operation or 'rebase'} --abort'). To return "
            f"{source_branch} to where it was before the move, run "
            f"'git checkout {source_branch}' and 'git reset --hard {source_tip}'. "
            f"Then run 'git stash pop {stash_ref}'."
        )
