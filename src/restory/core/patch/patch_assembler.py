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
Reassembly of per-commit patches from split hunk pieces.

Pieces are applied one after another, each on top of the tree the previous
ones produced. That intermediate tree is neither the old nor the new file,
so a few header details are adjusted when a file's change is spread over
several commits:

- blob ``index`` lines are dropped, they describe the unsplit change;
- a created file is only created by its first piece, later pieces modify it;
- a deleted file is only deleted by its last piece, earlier pieces modify it.
"""

import re
from collections.abc import Mapping, Sequence

from ..data.file_diff import FileDiff
from ..data.hunk import Hunk

_INDEX_LINE_RE = re.compile(
    r"^index [0-9a-fA-F]+\.\.[0-9a-fA-F]+.*(?:\n|\Z)", re.MULTILINE
)
_NEW_FILE_RE = re.compile(r"^new file mode .*(?:\n|\Z)", re.MULTILINE)
_DELETED_FILE_RE = re.compile(r"^deleted file mode .*(?:\n|\Z)", re.MULTILINE)
_OLD_DEV_NULL_RE = re.compile(r"^--- /dev/null$", re.MULTILINE)
_NEW_DEV_NULL_RE = re.compile(r"^\+\+\+ /dev/null$", re.MULTILINE)


def strip_index_lines(header: str) -> str:
    return _INDEX_LINE_RE.sub("", header)


def piece_has_changes(hunk_text: str) -> bool:
    return Hunk.parse(hunk_text).has_changes()


def piece_header(header: str, file_path: str, index: int, piece_count: int) -> str:
    """Header for piece ``index`` of ``piece_count`` pieces of one file."""
    header = strip_index_lines(header)
    if index > 0 and _NEW_FILE_RE.search(header):
        header = _NEW_FILE_RE.sub("", header)
        header = _OLD_DEV_NULL_RE.sub(f"--- a/{file_path}", header)
    if index < piece_count - 1 and _DELETED_FILE_RE.search(header):
        header = _DELETED_FILE_RE.sub("", header)
        header = _NEW_DEV_NULL_RE.sub(f"+++ b/{file_path}", header)
    return header


def anchor_piece(hunk_text: str) -> str:
    """
    Move a later piece of a created file off old line 0.

    git apply pins a hunk whose old range starts at 0 to the top of the
    file. Once earlier pieces have created the file, the piece belongs
    after the lines they wrote, which end just before its new start.
    """
    hunk = Hunk.parse(hunk_text)
    if hunk.old_start != 0 or hunk.new_start <= 1:
        return hunk_text
    hunk.old_start = hunk.new_start - 1
    return hunk.render()


def count_pieces(
    file_diffs: Sequence[FileDiff], pieces_by_path: Mapping[str, Sequence[str]]
) -> int:
    """Number of commits the split produces: the longest piece list wins."""
    if not file_diffs:
        return 0
    return max(len(pieces_by_path.get(fd.file_path, [None])) for fd in file_diffs)


def assemble_patch(
    file_diffs: Sequence[FileDiff],
    pieces_by_path: Mapping[str, Sequence[str]],
    index: int,
) -> str:
    """
    Build the combined patch for piece ``index``.

    Files with pieces contribute their piece at ``index`` (or nothing once
    their pieces run out). Files without split points contribute their full
    hunk text to piece 0 only. Pieces without a single added or removed
    line are left out. Returns an empty string when nothing survives.
    """
    sections = []
    for file_diff in file_diffs:
        pieces = pieces_by_path.get(file_diff.file_path)

        if pieces is None:
            if index != 0:
                continue
            sections.append(strip_index_lines(file_diff.header) + file_diff.hunk_text())
            continue

        if index >= len(pieces) or not piece_has_changes(pieces[index]):
            continue

        header = piece_header(file_diff.header, file_diff.file_path, index, len(pieces))
        body = anchor_piece(pieces[index]) if index > 0 else pieces[index]
        sections.append(header + body)

    return "".join(sections)
