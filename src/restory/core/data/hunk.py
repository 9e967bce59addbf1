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

import re
from dataclasses import dataclass, field

from ..exceptions import PatchParseError
from ..patch.hunk_builder import build_hunk

HUNK_HEADER_RE = re.compile(
    r"^@@ -(?P<old_start>\d+)(?:,(?P<old_count>\d+))?"
    r" \+(?P<new_start>\d+)(?:,(?P<new_count>\d+))? @@"
)

CONTEXT = " "
ADDITION = "+"
REMOVAL = "-"
NO_NEWLINE = "\\"


def line_contribution(line: str | None) -> tuple[int, int]:
    """
    Return how many (old, new) file lines a single body line accounts for.

    Empty lines and unknown prefixes count as context. git never emits
    those, but hand-edited patches and editors that strip trailing
    whitespace do, and treating them as context is what keeps such a
    patch applicable.
    """
    prefix = line[:1] if line else ""
    if prefix == REMOVAL:
        return 1, 0
    if prefix == ADDITION:
        return 0, 1
    if prefix == NO_NEWLINE:
        return 0, 0
    return 1, 1


def count_body(body: list[str]) -> tuple[int, int]:
    old_count = 0
    new_count = 0
    for line in body:
        old, new = line_contribution(line)
        old_count += old
        new_count += new
    return old_count, new_count


def is_change_line(line: str | None) -> bool:
    return bool(line) and line[0] in (ADDITION, REMOVAL)


def split_hunk_lines(hunk_text: str) -> list[str]:
    """Split hunk text into lines, dropping only the final line terminator."""
    lines = hunk_text.split("\n")
    if lines and lines[-1] == "" and hunk_text.endswith("\n"):
        lines.pop()
    return lines


@dataclass
class Hunk:
    """
    One block of a unified diff.

    Only the start positions are taken from a parsed header; the counts are
    always derived from the body so a hunk is internally consistent no
    matter what the text it came from claimed.
    """

    old_start: int
    old_count: int
    new_start: int
    new_count: int
    body: list[str] = field(default_factory=list)

    @classmethod
    def parse(cls, hunk_text: str) -> "Hunk":
        lines = split_hunk_lines(hunk_text)
        if not lines:
            raise PatchParseError("Cannot parse an empty hunk")

        match = HUNK_HEADER_RE.match(lines[0])
        if not match:
            raise PatchParseError(
                "Hunk header does not match '@@ -old[,count] +new[,count] @@'",
                details=lines[0],
            )

        body = lines[1:]
        old_count, new_count = count_body(body)
        return cls(
            old_start=int(match.group("old_start")),
            old_count=old_count,
            new_start=int(match.group("new_start")),
            new_count=new_count,
            body=body,
        )

    @classmethod
    def from_body(cls, old_start: int, new_start: int, body: list[str]) -> "Hunk":
        old_count, new_count = count_body(body)
        return cls(old_start, old_count, new_start, new_count, list(body))

    def has_changes(self) -> bool:
        return any(is_change_line(line) for line in self.body)

    def render(self) -> str:
        return build_hunk(
            self.old_start, self.old_count, self.new_start, self.new_count, self.body
        )
