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
Custom exception hierarchy for the restory CLI application.

Every failure a history rewrite can hit is categorized here so the CLI can
report it cleanly and tests can assert on the kind of failure instead of
on incidental git output.
"""

import contextlib
import sys

from loguru import logger


class restoryError(Exception):
    """
    Base exception for all restory-related errors.

    All restory-specific exceptions should inherit from this class
    to enable consistent error handling throughout the application.
    """

    def __init__(self, message: str, details: str | None = None):
        """
        Initialize a restoryError.

        Args:
            message: Main error message for the user
            details: Additional technical details for logging (e.g. git stderr)
        """
        self.message = message
        self.details = details
        # filled in by the recipe step tracker when the error crosses a step
        self.step: str | None = None
        super().__init__(message)

    def __str__(self) -> str:
        if self.step:
            return f"[{self.step}] {self.message}"
        return self.message


class PatchParseError(restoryError):
    """
    Raised when a hunk or patch does not match the unified diff grammar.
    """

    pass


class SplitOutOfRangeError(restoryError):
    """
    Raised when a split point resolves to the start or end of a hunk body,
    or when a column falls outside the content of the target line.
    """

    pass


class UnsupportedSplitError(restoryError):
    """
    Raised for explicit structural limitations of the splitter, such as
    more than one hunk on a file that carries split points.
    """

    pass


class GitError(restoryError):
    """
    Errors related to git operations.

    Raised when git commands fail. The failing command is described in the
    message and anything git printed on stderr is kept in ``details``.
    """

    pass


class StateConflictError(restoryError):
    """
    Raised when the repository is in a state the requested rewrite cannot
    start from: failed ancestry checks, root commits, missing branches,
    dirty working trees.
    """

    pass


class DetachedHeadError(StateConflictError, GitError):
    """Raised when on a detached HEAD."""

    pass


class NotAncestorError(StateConflictError):
    """Raised when a commit is not reachable from the branch being rewritten."""

    pass


class ValidationError(restoryError):
    """
    Input validation errors.

    Raised when user input fails validation checks,
    such as invalid file paths, malformed refs or split points.
    """

    pass


class ConfigurationError(restoryError):
    """
    Configuration-related errors.

    Raised when configuration files are invalid or contain
    incompatible settings.
    """

    pass


class FileSystemError(restoryError):
    """
    File system operation errors.

    Raised when file or directory operations fail,
    such as permission issues or missing files.
    """

    pass


# Convenience functions for creating common errors
def git_not_found() -> GitError:
    """Create a GitError for when git is not available."""
    return GitError(
        "Git is not installed or not in PATH",
        "Please install git and ensure it's available in your PATH environment variable",
    )


def not_git_repository(path: str = ".") -> GitError:
    """Create a GitError for when not in a git repository."""
    return GitError(
        f"Not a git repository: {path}",
        "Run 'git init' to initialize a git repository or navigate to an existing repository",
    )


def invalid_ref(ref: str) -> ValidationError:
    """Create a ValidationError for refs that cannot be passed to git safely."""
    return ValidationError(
        f"Invalid commit reference: {ref!r}",
        "References must be non-empty, contain no whitespace and not start with '-'",
    )


def path_not_found(path: str) -> ValidationError:
    """Create a ValidationError for non-existent paths."""
    return ValidationError(
        f"Path not found: {path}",
        "Please check that the path exists and is accessible",
    )


def root_commit_unsupported(operation: str) -> StateConflictError:
    """Create a StateConflictError for operations that need a parent commit."""
    return StateConflictError(
        f"Cannot {operation} the root commit",
        "The operation resets to the commit's parent, and a root commit has none",
    )


@contextlib.contextmanager
def handle_restory_exception(exit_on_fail: bool = True):
    """
    Report errors raised inside the block the way the CLI wants them.

    restoryErrors are expected failures: only the message is shown, the
    details and failing step go to the debug log. Anything else is a bug
    and gets a full traceback in the log file.
    """
    import typer

    try:
        yield
    except typer.Exit:
        raise
    except KeyboardInterrupt:
        logger.warning("Operation cancelled by user")
        if exit_on_fail:
            raise typer.Exit(130)
        raise
    except restoryError as e:
        logger.error(str(e))
        if e.details:
            logger.debug("Details: {details}", details=e.details)
        if e.step:
            logger.debug("Failed during step {step}", step=e.step)
        if exit_on_fail:
            raise typer.Exit(1)
        raise
    except Exception as e:
        logger.opt(exception=sys.exc_info()).error(f"Unexpected error: {e}")
        if exit_on_fail:
            raise typer.Exit(1)
        raise
