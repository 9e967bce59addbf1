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

from restory.context import AddContext, GlobalContext
from restory.core.exceptions import handle_restory_exception
from restory.core.logging.utils import time_block
from restory.core.validation import (
    validate_message,
    validate_patch_file,
    validate_ref,
)


def run_add(
    global_context: GlobalContext, after_ref: str, patch_file: str, message: str
) -> str:
    add_context = AddContext(
        after_ref=validate_ref(after_ref),
        patch_file=validate_patch_file(patch_file),
        message=validate_message(message),
    )

    logger.debug("Add command started", add_context=add_context)

    from restory.pipelines.add_pipeline import AddPipeline

    with time_block("Add Pipeline E2E"):
        new_commit = AddPipeline(global_context, add_context).run()

    logger.success("Inserted commit {commit}", commit=new_commit[:7])
    return new_commit


def main(
    ctx: typer.Context,
    after_ref: str = typer.Argument(
        ..., help="Commit after which history is rewritten"
    ),
    patch_file: str = typer.Argument(..., help="Patch file to commit"),
    message: str = typer.Option(..., "--message", "-m", help="Commit message"),
) -> None:
    """Insert a commit built from PATCH_FILE into existing history.

    The patch is committed on top of the second commit after AFTER_REF (or
    the only one, if there is just one), and later commits are replayed.

    Examples:
        restory add HEAD~3 fix.patch -m "Fix typo"
    """
    with handle_restory_exception():
        global_context: GlobalContext = ctx.obj
        typer.echo(run_add(global_context, after_ref, patch_file, message))
