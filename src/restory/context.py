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

from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path

from pydantic import BaseModel, Field

from restory.constants import DEFAULT_REMOTE, DEFAULT_SPLIT_SUBJECT
from restory.core.data.split_point import SplitPoint
from restory.core.git_commands.git_commands import GitCommands
from restory.core.git_interface.interface import GitInterface
from restory.core.git_interface.SubprocessGitInterface import (
    SubprocessGitInterface,
)


class GlobalConfig(BaseModel):
    verbose: bool = Field(default=False, description="Enable verbose logging output")
    silent: bool = Field(default=False, description="Only print errors")
    remote: str = Field(
        default=DEFAULT_REMOTE, description="Remote used for --push and remote branches"
    )
    keep_patch_files: bool = Field(
        default=False,
        description="Keep the temporary patch files written while splitting",
    )
    fallback_subject: str = Field(
        default=DEFAULT_SPLIT_SUBJECT,
        description="Subject used for split commits when the original has none",
    )


@dataclass(frozen=True)
class GlobalContext:
    repo_path: Path
    git_interface: GitInterface
    git_commands: GitCommands
    verbose: bool
    silent: bool
    remote: str
    keep_patch_files: bool
    fallback_subject: str

    @classmethod
    def from_global_config(cls, config: GlobalConfig, repo_path: Path):
        git_interface = SubprocessGitInterface(repo_path)
        git_commands = GitCommands(git_interface)

        return GlobalContext(
            repo_path,
            git_interface,
            git_commands,
            config.verbose,
            config.silent,
            config.remote,
            config.keep_patch_files,
            config.fallback_subject,
        )


@dataclass(frozen=True)
class SplitContext:
    commit_ref: str
    split_points: Sequence[SplitPoint]


@dataclass(frozen=True)
class AddContext:
    after_ref: str
    patch_file: Path
    message: str


@dataclass(frozen=True)
class RemoveContext:
    commit_ref: str
    branch: str | None = None
    push: bool = False
    force: bool = False


@dataclass(frozen=True)
class MoveContext:
    commit_ref: str
    destination_branch: str
    remove_from_source: bool = False
    auto_stash: bool = False
    push: bool = False
    force: bool = False
