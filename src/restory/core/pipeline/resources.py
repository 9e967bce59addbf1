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

import contextlib
import os
import shutil
import tempfile
from pathlib import Path

from loguru import logger

from ...constants import PATCH_FILE_PREFIX, WORKTREE_PREFIX
from ..exceptions import FileSystemError, restoryError
from ..git_commands.git_commands import GitCommands


@contextlib.contextmanager
def temporary_patch_file(patch: str, keep: bool = False):
    """Write ``patch`` to a temp file, removed on exit unless ``keep`` is set."""
    try:
        fd, name = tempfile.mkstemp(prefix=PATCH_FILE_PREFIX, suffix=".patch")
    except OSError as e:
        raise FileSystemError("Failed to create a temporary patch file", str(e)) from e

    path = Path(name)
    try:
        with os.fdopen(fd, "w", encoding="utf-8", newline="\n") as f:
            f.write(patch)
        yield path
    finally:
        if keep:
            logger.debug("Keeping patch file {path}", path=path)
        else:
            path.unlink(missing_ok=True)


@contextlib.contextmanager
def linked_worktree(
    git_commands: GitCommands, branch: str, start_point: str | None = None
):
    """
    Check ``branch`` out in a throwaway linked worktree and yield its path.

    The worktree is removed on every exit path. Removal is best effort: a
    failure is logged and never masks the error that ended the block.
    """
    path = Path(tempfile.mkdtemp(prefix=WORKTREE_PREFIX))
    # git worktree add wants to create the directory itself
    path.rmdir()
    created = False
    try:
        git_commands.add_worktree(path, branch, start_point)
        created = True
        yield path
    finally:
        if created:
            try:
                git_commands.remove_worktree(path)
            except restoryError as e:
                logger.warning(
                    "Could not remove worktree {path}: {error}", path=path, error=e
                )
        if path.exists():
            shutil.rmtree(path, ignore_errors=True)
