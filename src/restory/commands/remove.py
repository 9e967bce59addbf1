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

import typer
from loguru import logger

from restory.context import GlobalContext, RemoveContext
from restory.core.exceptions import handle_restory_exception
from restory.core.logging.utils import time_block
from restory.core.validation import validate_branch_name, validate_ref


def run_remove(
    global_context: GlobalContext,
    commit_ref: str,
    branch: str | None,
    push: bool,
    force: bool,
) -> str:
    remove_context = RemoveContext(
        commit_ref=validate_ref(commit_ref),
        branch=validate_branch_name(branch),
        push=push,
        force=force,
    )

    logger.debug("Remove command started", remove_context=remove_context)

    from restory.pipelines.remove_pipeline import RemovePipeline

    with time_block("Remove Pipeline E2E"):
        branch_name = RemovePipeline(global_context, remove_context).run()

    logger.success(
        "Removed {commit} from {branch}",
        commit=remove_context.commit_ref,
        branch=branch_name,
    )
    return branch_name


def main(
    ctx: typer.Context,
    commit_ref: str = typer.Argument(..., help="Commit to remove"),
    branch: str | None = typer.Option(
        None, "--branch", "-b", help="Branch to remove it from (default: current)"
    ),
    push: bool = typer.Option(False, "--push", help="Push the branch afterwards"),
    force: bool = typer.Option(
        False, "--force", help="Push with --force-with-lease"
    ),
) -> None:
    """Remove a commit from a branch, keeping the commits after it.

    Examples:
        restory remove abc123
        restory remove abc123 --branch feature --push --force
    """
    with handle_restory_exception():
        global_context: GlobalContext = ctx.obj
        typer.echo(run_remove(global_context, commit_ref, branch, push, force))
