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


def format_hunk_header(
    old_start: int, old_count: int, new_start: int, new_count: int
) -> str:
    return f"@@ -{old_start},{old_count} +{new_start},{new_count} @@"


def build_hunk(
    old_start: int,
    old_count: int,
    new_start: int,
    new_count: int,
    body: Sequence[str | None],
) -> str:
    """
    Format a header and body lines back into hunk text.

    A blank context line must be written as a lone space: git apply treats
    a truly empty line inside a hunk as a corrupt patch. The result always
    ends with a newline, even when the body is empty.
    """
    lines = [format_hunk_header(old_start, old_count, new_start, new_count)]
    lines.extend(line if line else " " for line in body)
    return "\n".join(lines) + "\n"
