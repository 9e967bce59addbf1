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

from restory.core.patch.patch_parser import (
    parse_patch,
    parse_patch_with_report,
    parse_section,
    split_sections,
)

TWO_FILE_PATCH = (
    "diff --git a/one.txt b/one.txt\n"
    "index 1111111..2222222 100644\n"
    "--- a/one.txt\n"
    "+++ b/one.txt\n"
    "@@ -1,2 +1,2 @@\n"
    " keep\n"
    "-old\n"
    "+new\n"
    "diff --git a/src/two.py b/src/two.py\n"
    "index 3333333..4444444 100644\n"
    "--- a/src/two.py\n"
    "+++ b/src/two.py\n"
    "@@ -1 +1,2 @@\n"
    " a\n"
    "+b\n"
)

BINARY_SECTION = (
    "diff --git a/img.png b/img.png\n"
    "index 5555555..6666666 100644\n"
    "Binary files a/img.png and b/img.png differ\n"
)


def test_two_files_one_hunk_each():
    file_diffs = parse_patch(TWO_FILE_PATCH)

    assert [fd.file_path for fd in file_diffs] == ["one.txt", "src/two.py"]
    assert [len(fd.hunks) for fd in file_diffs] == [1, 1]
    assert file_diffs[0].hunks[0] == "@@ -1,2 +1,2 @@\n keep\n-old\n+new\n"
    assert file_diffs[1].hunks[0] == "@@ -1 +1,2 @@\n a\n+b\n"


def test_header_is_text_before_first_hunk():
    file_diffs = parse_patch(TWO_FILE_PATCH)

    assert file_diffs[0].header == (
        "diff --git a/one.txt b/one.txt\n"
        "index 1111111..2222222 100644\n"
        "--- a/one.txt\n"
        "+++ b/one.txt\n"
    )
    assert file_diffs[0].header + file_diffs[0].hunk_text() + (
        file_diffs[1].header + file_diffs[1].hunk_text()
    ) == TWO_FILE_PATCH


def test_multiple_hunks_in_order():
    section = (
        "diff --git a/f.txt b/f.txt\n"
        "--- a/f.txt\n"
        "+++ b/f.txt\n"
        "@@ -1,1 +1,1 @@\n"
        "-a\n"
        "+A\n"
        "@@ -10,1 +10,1 @@\n"
        "-j\n"
        "+J\n"
    )
    file_diff = parse_section(section)

    assert file_diff.hunks == [
        "@@ -1,1 +1,1 @@\n-a\n+A\n",
        "@@ -10,1 +10,1 @@\n-j\n+J\n",
    ]


def test_text_before_first_section_is_ignored():
    patch = "commit abc\nAuthor: someone\n\n" + TWO_FILE_PATCH
    sections = split_sections(patch)

    assert len(sections) == 2
    assert all(s.startswith("diff --git ") for s in sections)


def test_section_without_hunks_is_dropped_and_reported():
    result = parse_patch_with_report(TWO_FILE_PATCH + BINARY_SECTION)

    assert result.section_count == 3
    assert len(result.file_diffs) == 2
    assert result.dropped_sections == [BINARY_SECTION]
    assert result.is_complete is False


def test_section_without_paths_is_dropped():
    assert parse_section("diff --git\n@@ -1 +1 @@\n-a\n+b\n") is None


def test_complete_parse():
    result = parse_patch_with_report(TWO_FILE_PATCH)
    assert result.is_complete
    assert result.section_count == 2


def test_empty_patch():
    assert parse_patch("") == []
    assert parse_patch_with_report("").section_count == 0
