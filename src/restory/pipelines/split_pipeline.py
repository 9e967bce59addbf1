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

from collections import defaultdict
from collections.abc import Sequence

from loguru import logger

from restory.context import GlobalContext, SplitContext
from restory.core.data.file_diff import FileDiff
from restory.core.data.split_point import SplitPoint
from restory.core.exceptions import (
    DetachedHeadError,
    NotAncestorError,
    StateConflictError,
    UnsupportedSplitError,
    ValidationError,
    root_commit_unsupported,
)
from restory.core.patch.hunk_splitter import split_hunk
from restory.core.patch.patch_assembler import assemble_patch, count_pieces
from restory.core.patch.patch_parser import parse_patch_with_report
from restory.core.pipeline.recipe import Recipe
from restory.core.pipeline.resources import temporary_patch_file


def split_into_pieces(
    file_diffs: Sequence[FileDiff], split_points: Sequence[SplitPoint]
) -> dict[str, list[str]]:
    """
    Cut every file that has split points into its ordered pieces.

    Points are applied in ascending (line, column) order, each one to the
    last piece produced so far. Lines and columns always refer to the
    commit's version of the file: a mid-line cut turns one line into two,
    so later points are shifted to match.
    """
    points_by_path: dict[str, list[SplitPoint]] = defaultdict(list)
    for point in split_points:
        points_by_path[point.path].append(point)

    changed_paths = {fd.file_path for fd in file_diffs}
    unknown = sorted(set(points_by_path) - changed_paths)
    if unknown:
        raise ValidationError(
            f"Split point path is not changed by the commit: {', '.join(unknown)}"
        )

    pieces_by_path: dict[str, list[str]] = {}
    for file_diff in file_diffs:
        points = points_by_path.get(file_diff.file_path)
        if not points:
            continue
        if len(file_diff.hunks) != 1:
            raise UnsupportedSplitError(
                f"{file_diff.file_path} has {len(file_diff.hunks)} hunks; "
                "split points are only supported on files with a single hunk",
            )

        pieces = [file_diff.hunks[0]]
        shift = 0
        cut_line = cut_column = None
        for point in sorted(points, key=lambda p: (p.line, p.column)):
            column = point.column
            if point.line == cut_line:
                # the rest of this line now starts at the previous cut
                column -= cut_column - 1
            first, second = split_hunk(
                pieces[-1], line=point.line + shift, column=column
            )
            if point.column > 1:
                shift += 1
                cut_line, cut_column = point.line, point.column
            pieces[-1:] = [first, second]
            logger.debug("Split {point} -> {n} pieces", point=point, n=len(pieces))

        pieces_by_path[file_diff.file_path] = pieces

    return pieces_by_path


class SplitPipeline:
    """
    Replaces one commit with several, cut at the given split points.

    The branch is reset to the commit's parent, one commit is created per
    piece index, then the commits that followed the original are
    cherry-picked back on top. A failure after the reset leaves the branch
    where the failing primitive stopped.
    """

    def __init__(self, global_context: GlobalContext, split_context: SplitContext):
        self.global_context = global_context
        self.split_context = split_context

    def run(self) -> list[str]:
        git_commands = self.global_context.git_commands
        recipe = Recipe("split")

        if not self.split_context.split_points:
            raise ValidationError("At least one split point is required")

        with recipe.step("preflight"):
            if git_commands.get_current_branch() is None:
                raise DetachedHeadError("Detached HEAD is not supported for split")
            if not git_commands.is_working_tree_clean():
                raise StateConflictError(
                    "Working tree has uncommitted changes",
                    "Commit or stash them first; split resets the working tree",
                )

        with recipe.step("resolve"):
            commit = git_commands.resolve_ref(self.split_context.commit_ref)
            if not git_commands.is_ancestor(commit, "HEAD"):
                raise NotAncestorError(
                    f"Commit {commit[:7]} is not an ancestor of HEAD"
                )
            parent = git_commands.try_get_parent_hash(commit)
            if parent is None:
                raise root_commit_unsupported("split")
            subject = (
                git_commands.get_subject(commit)
                or self.global_context.fallback_subject
            )
            replay = git_commands.list_commits(commit, "HEAD")

        with recipe.step("parse"):
            parse_result = parse_patch_with_report(
                git_commands.show_commit_patch(commit)
            )
            if not parse_result.file_diffs:
                raise UnsupportedSplitError(f"Commit {commit[:7]} has no textual changes")
            if not parse_result.is_complete:
                raise UnsupportedSplitError(
                    f"Commit {commit[:7]} contains changes without text hunks "
                    "(binary, mode-only or empty files) that cannot be split",
                    "".join(parse_result.dropped_sections),
                )

        with recipe.step("split hunks"):
            pieces_by_path = split_into_pieces(
                parse_result.file_diffs, self.split_context.split_points
            )
            piece_count = count_pieces(parse_result.file_diffs, pieces_by_path)

        logger.debug(
            "Splitting {commit} into {n} pieces, replaying {r} commits",
            commit=commit[:7],
            n=piece_count,
            r=len(replay),
        )

        with recipe.step("reset"):
            git_commands.reset_hard(parent)

        new_commits: list[str] = []
        for index in range(piece_count):
            with recipe.step(f"piece {index + 1}/{piece_count}"):
                new_commit = self._commit_piece(
                    parse_result.file_diffs, pieces_by_path, index, piece_count, subject
                )
                if new_commit is not None:
                    new_commits.append(new_commit)

        with recipe.step("replay"):
            for commit_hash in replay:
                git_commands.cherry_pick(commit_hash)

        return new_commits

    def _commit_piece(
        self,
        file_diffs: Sequence[FileDiff],
        pieces_by_path: dict[str, list[str]],
        index: int,
        piece_count: int,
        subject: str,
    ) -> str | None:
        git_commands = self.global_context.git_commands

        patch = assemble_patch(file_diffs, pieces_by_path, index)
        if not patch:
            logger.debug("Piece {i} has no changes, skipping", i=index + 1)
            return None

        with temporary_patch_file(
            patch, keep=self.global_context.keep_patch_files
        ) as patch_path:
            git_commands.apply_patch(patch_path, mode="tolerant")

        git_commands.stage_all()
        if not git_commands.has_staged_changes():
            logger.debug("Piece {i} staged nothing, skipping", i=index + 1)
            return None

        return git_commands.commit(f"{subject} (split {index + 1}/{piece_count})")
