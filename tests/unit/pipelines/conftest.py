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
from unittest.mock import Mock

import pytest

from restory.context import GlobalContext
from restory.core.git_commands.git_commands import GitCommands
from restory.core.git_interface.interface import GitInterface


@pytest.fixture
def git_commands():
    commands = Mock(spec=GitCommands)
    commands.get_current_branch.return_value = "main"
    commands.is_working_tree_clean.return_value = True
    commands.is_ancestor.return_value = True
    commands.branch_exists.return_value = True
    return commands


@pytest.fixture
def global_context(git_commands):
    return GlobalContext(
        repo_path=Path("."),
        git_interface=Mock(spec=GitInterface),
        git_commands=git_commands,
        verbose=False,
        silent=False,
        remote="origin",
        keep_patch_files=False,
        fallback_subject="Split commit",
    )
