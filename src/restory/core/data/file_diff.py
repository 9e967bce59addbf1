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

from dataclasses import dataclass, field


@dataclass
class FileDiff:
    """
    One file section of a combined diff.

    ``header`` is the raw section text before the first hunk (the
    ``diff --git`` line, mode and ``index`` lines, ``---``/``+++``) and
    ``hunks`` holds each hunk as raw text, in order of appearance.
    """

    file_path: str
    hunks: list[str] = field(default_factory=list)
    header: str = ""

    def hunk_text(self) -> str:
        return "".join(self.hunks)


@dataclass
class PatchParseResult:
    """
    Parser output together with what it had to drop.

    Sections without a recognizable path or without hunks are skipped by
    the parser; ``dropped_sections`` keeps their raw text so callers that
    need the whole patch can tell something was left out.
    """

    section_count: int
    file_diffs: list[FileDiff] = field(default_factory=list)
    dropped_sections: list[str] = field(default_factory=list)

    @property
    def is_complete(self) -> bool:
        return not self.dropped_sections
