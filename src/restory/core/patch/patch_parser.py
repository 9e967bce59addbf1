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
Splitting of combined multi-file diffs into per-file sections and hunks.

The parser is lenient: a section without a recognizable
``a/<path> b/<path>`` pair or without any hunk is skipped instead of
raising. Callers that cannot afford to lose a section should use
``parse_patch_with_report`` and check ``dropped_sections``.
"""

import re

from loguru import logger

from ..data.file_diff import FileDiff, PatchParseResult

_SECTION_SPLIT_RE = re.compile(r"^(?=diff --git )", re.MULTILINE)
_A_B_PATHS_RE = re.compile(r"a/(\S+)\s+b/(\S+)")
_HUNK_RE = re.compile(r"^@@.*?(?=^@@|\Z)", re.MULTILINE | re.DOTALL)


def split_sections(patch: str) -> list[str]:
    """Split combined diff text into one chunk of text per file section."""
    sections = []
    for section in _SECTION_SPLIT_RE.split(patch):
        if not section.strip():
            continue
        # anything before the first "diff --git" (commit headers etc.) is not a section
        if not section.startswith("diff --git "):
            continue
        sections.append(section)
    return sections


def parse_section(section: str) -> FileDiff | None:
    path_match = _A_B_PATHS_RE.search(section)
    if not path_match:
        return None

    hunk_matches = list(_HUNK_RE.finditer(section))
    if not hunk_matches:
        return None

    return FileDiff(
        file_path=path_match.group(2),
        hunks=[m.group(0) for m in hunk_matches],
        header=section[: hunk_matches[0].start()],
    )


def parse_patch_with_report(patch: str) -> PatchParseResult:
    sections = split_sections(patch)
    result = PatchParseResult(section_count=len(sections))

    for section in sections:
        file_diff = parse_section(section)
        if file_diff is None:
            result.dropped_sections.append(section)
        else:
            result.file_diffs.append(file_diff)

    return result


def parse_patch(patch: str) -> list[FileDiff]:
    result = parse_patch_with_report(patch)
    if result.dropped_sections:
        logger.debug(
            "Patch parser skipped {dropped} of {total} sections",
            dropped=len(result.dropped_sections),
            total=result.section_count,
        )
    return result.file_diffs
