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

from restory.context import GlobalContext, MoveContext
from restory.core.exceptions import handle_restory_exception
from restory.core.logging.utils import time_block
from restory.core.validation import validate_ref


def run_move(
    global_context: GlobalContext,
    commit_ref: str,
    destination: str,
    remove: bool,
    auto_stash: bool,
    push: bool,
    force: bool,
) -> str:
    move_context = MoveContext(
        commit_ref=validate_ref(commit_ref),
        destination_branch=validate_ref(destination),
        remove_from_source=remove,
        auto_stash=auto_stash,
        push=push,
        force=force,
    )

    logger.debug("Move command started", move_context=move_context)

    from restory.pipelines.move_pipeline import MovePipeline

    with time_block("Move Pipeline E2E"):
        branch = MovePipeline(global_context, move_context).run()

    logger.success(
        "{action} {commit} to {branch}",
        action="Moved" if remove else "Copied",
        commit=move_context.commit_ref,
        branch=branch,
    )
    return branch


def main(
    ctx: typer.Context,
    commit_ref: str = typer.Argument(..., help="Commit to move"),
    destination: str = typer.Argument(..., help="Destination branch"),
    remove: bool = typer.Option(
        False, "--remove", help="Also remove the commit from the current branch"
    ),
    auto_stash: bool = typer.Option(
        False, "--auto-stash", help="Stash uncommitted changes and restore them after"
    ),
    push: bool = typer.Option(False, "--push", help="Push changed branches"),
    force: bool = typer.Option(
        False, "--force", help="Push with --force-with-lease"
    ),
) -> None:
    """Cherry-pick a commit onto another branch without switching branches.

    Examples:
        restory move abc123 release
        restory move abc123 feature --remove --auto-stash
    """
    with handle_restory_exception():
        global_context: GlobalContext = ctx.obj
        typer.echo(
            run_move(
                global_context, commit_ref, destination, remove, auto_stash, push, force
            )
        )
