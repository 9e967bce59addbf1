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

from restory.context import GlobalContext, SplitContext
from restory.core.exceptions import handle_restory_exception
from restory.core.logging.utils import time_block
from restory.core.validation import validate_ref, validate_split_points


def run_split(
    global_context: GlobalContext, commit_ref: str, split_points: list[str]
) -> list[str]:
    split_context = SplitContext(
        commit_ref=validate_ref(commit_ref),
        split_points=validate_split_points(split_points),
    )

    logger.debug(
        "Split command started",
        commit_ref=split_context.commit_ref,
        split_points=[str(p) for p in split_context.split_points],
    )

    from restory.pipelines.split_pipeline import SplitPipeline

    with time_block("Split Pipeline E2E"):
        new_commits = SplitPipeline(global_context, split_context).run()

    logger.success(
        "Split {ref} into {n} commits", ref=split_context.commit_ref, n=len(new_commits)
    )
    return new_commits


def main(
    ctx: typer.Context,
    commit_ref: str = typer.Argument(..., help="Commit to split"),
    at: list[str] = typer.Option(
        ...,
        "--at",
        help=(
            "Split point PATH:LINE[:COLUMN[:LENGTH]], in the commit's new-file "
            "line numbers. Repeatable; several columns on one line are allowed."
        ),
    ),
) -> None:
    """Split one commit into several at the given positions of its diff.

    Examples:
        # Split before line 10 of app.py
        restory split abc123 --at app.py:10

        # Split in the middle of line 4, then again before line 20
        restory split HEAD~2 --at src/main.py:4:8 --at src/main.py:20
    """
    with handle_restory_exception():
        global_context: GlobalContext = ctx.obj
        for commit_hash in run_split(global_context, commit_ref, at):
            typer.echo(commit_hash)
