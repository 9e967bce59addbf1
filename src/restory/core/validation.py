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

"""
Validation of user input before any git command runs.
"""

from collections.abc import Sequence
from pathlib import Path

from restory.core.data.split_point import SplitPoint
from restory.core.exceptions import (
    ValidationError,
    invalid_ref,
    not_git_repository,
    path_not_found,
)
from restory.core.git_commands.git_commands import GitCommands


def validate_git_repository(git_commands: GitCommands) -> None:
    if not git_commands.is_git_repository():
        raise not_git_repository(str(git_commands.git.repo_path))


def validate_ref(ref: str | None) -> str:
    """Refs go straight to git, so reject anything git could read as an option."""
    cleaned = (ref or "").strip()
    if not cleaned or cleaned.startswith("-") or any(c.isspace() for c in cleaned):
        raise invalid_ref(ref or "")
    return cleaned


def validate_branch_name(branch: str | None) -> str | None:
    if branch is None:
        return None
    return validate_ref(branch)


def validate_split_points(values: Sequence[str] | None) -> list[SplitPoint]:
    if not values:
        raise ValidationError(
            "At least one split point is required",
            "Pass --at PATH:LINE[:COLUMN[:LENGTH]] one or more times",
        )
    return [SplitPoint.parse(value) for value in values]


def validate_patch_file(path: str | Path) -> Path:
    patch_path = Path(path).expanduser()
    if not patch_path.is_file():
        raise path_not_found(str(path))
    # git runs in the repository, not in the caller's directory
    return patch_path.resolve()


def validate_message(message: str | None) -> str:
    cleaned = (message or "").strip()
    if not cleaned:
        raise ValidationError("Commit message cannot be empty")
    return cleaned
