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
Splitting a single hunk into two well-formed hunks.

A split is requested either by a new-file line (optionally with a column,
which cuts that line in two) or directly by a body-line index. Whatever
the mode, the second hunk must start strictly inside the body: a split
that would leave one half empty is rejected, never silently accepted.
"""

from ..data.hunk import (
    ADDITION,
    CONTEXT,
    NO_NEWLINE,
    Hunk,
    count_body,
    line_contribution,
)
from ..exceptions import SplitOutOfRangeError, ValidationError
from .hunk_builder import build_hunk


def _index_for_line(hunk: Hunk, line: int) -> int:
    # position of a body line = the new-file line it occupies, or for a
    # removal the new-file line that follows it
    new_line = hunk.new_start
    for index, body_line in enumerate(hunk.body):
        is_marker = body_line.startswith(NO_NEWLINE)
        if not is_marker and new_line >= line:
            return index
        new_line += line_contribution(body_line)[1]
    return len(hunk.body)


def _cut_line(hunk: Hunk, line: int, column: int) -> tuple[list[str], int]:
    """Replace the body line at new-file ``line`` by its two halves."""
    new_line = hunk.new_start
    for index, body_line in enumerate(hunk.body):
        prefix = body_line[:1]
        if prefix in (CONTEXT, ADDITION) and new_line == line:
            content = body_line[1:]
            if not content:
                raise SplitOutOfRangeError(
                    f"Line {line} is empty and cannot be split at column {column}"
                )
            if not 2 <= column <= len(content) + 1:
                raise SplitOutOfRangeError(
                    f"Column {column} is outside line {line} "
                    f"(valid columns: 2..{len(content) + 1})"
                )
            left = prefix + content[: column - 1]
            right = prefix + content[column - 1 :]
            body = hunk.body[:index] + [left, right] + hunk.body[index + 1 :]
            return body, index + 1
        new_line += line_contribution(body_line)[1]

    raise SplitOutOfRangeError(
        f"Line {line} is not an added or context line of this hunk"
    )


def _build_halves(hunk: Hunk, body: list[str], index: int) -> tuple[str, str]:
    if not 0 < index < len(body):
        raise SplitOutOfRangeError(
            f"Split index {index} must fall strictly inside the hunk body "
            f"(1..{len(body) - 1})"
        )

    first_body = body[:index]
    second_body = body[index:]
    first_old, first_new = count_body(first_body)
    second_old, second_new = count_body(second_body)

    first = build_hunk(
        hunk.old_start, first_old, hunk.new_start, first_new, first_body
    )
    second = build_hunk(
        hunk.old_start + first_old,
        second_old,
        hunk.new_start + first_new,
        second_new,
        second_body,
    )
    return first, second


def split_hunk(
    hunk_text: str,
    line: int | None = None,
    column: int = 1,
    index: int | None = None,
) -> tuple[str, str]:
    """
    Split ``hunk_text`` into two hunk strings.

    Args:
        hunk_text: A single hunk, header line included
        line: New-file line that becomes the first line of the second hunk
        column: 1-based column; above 1 the target line itself is cut and
            the second hunk starts with its right half
        index: 0-based body index of the first line of the second hunk,
            used instead of ``line``/``column``

    Returns:
        The two hunks, each with counts recomputed from its own body.
    """
    if (line is None) == (index is None):
        raise ValidationError("split_hunk needs exactly one of 'line' or 'index'")

    hunk = Hunk.parse(hunk_text)

    if index is not None:
        return _build_halves(hunk, hunk.body, index)

    if column > 1:
        body, split_index = _cut_line(hunk, line, column)
        return _build_halves(hunk, body, split_index)

    return _build_halves(hunk, hunk.body, _index_for_line(hunk, line))
