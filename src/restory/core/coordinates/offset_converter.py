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
Conversion between (line, column) positions and character offsets.

Lines and columns are 1-based, offsets 0-based. Lines are separated by
``\\n``; the column just past the last character of a line (where its
newline sits) is a valid position.
"""

from ..exceptions import ValidationError


def _line_starts(content: str) -> list[int]:
    starts = [0]
    for index, char in enumerate(content):
        if char == "\n":
            starts.append(index + 1)
    return starts


def position_to_offset(content: str, line: int, column: int = 1) -> int:
    starts = _line_starts(content)
    if not 1 <= line <= len(starts):
        raise ValidationError(f"Line {line} is out of range (1..{len(starts)})")

    start = starts[line - 1]
    end = starts[line] - 1 if line < len(starts) else len(content)
    max_column = end - start + 1
    if not 1 <= column <= max_column:
        raise ValidationError(
            f"Column {column} is out of range for line {line} (1..{max_column})"
        )
    return start + column - 1


def offset_to_position(content: str, offset: int) -> tuple[int, int]:
    if not 0 <= offset <= len(content):
        raise ValidationError(f"Offset {offset} is out of range (0..{len(content)})")

    starts = _line_starts(content)
    line = 1
    # last line start at or before the offset
    for index, start in enumerate(starts):
        if start > offset:
            break
        line = index + 1
    return line, offset - starts[line - 1] + 1
