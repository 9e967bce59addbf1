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

from pathlib import Path

import typer

from restory.core.coordinates.offset_converter import (
    offset_to_position,
    position_to_offset,
)
from restory.core.exceptions import (
    FileSystemError,
    ValidationError,
    handle_restory_exception,
    path_not_found,
)


def run_offset(
    file: str, line: int | None, column: int | None, offset: int | None
) -> str:
    if (offset is None) == (line is None):
        raise ValidationError("Pass either --line (with optional --column) or --offset")
    if offset is not None and column is not None:
        raise ValidationError("--column cannot be combined with --offset")

    path = Path(file)
    if not path.is_file():
        raise path_not_found(file)
    try:
        # raw bytes: offsets count "\r\n" as two characters
        content = path.read_bytes().decode("utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise FileSystemError(f"Failed to read {file}", str(e)) from e

    if offset is not None:
        found_line, found_column = offset_to_position(content, offset)
        return f"{found_line}:{found_column}"
    return str(position_to_offset(content, line, column or 1))


def main(
    file: str = typer.Argument(..., help="File to read"),
    line: int | None = typer.Option(None, "--line", "-l", help="1-based line"),
    column: int | None = typer.Option(None, "--column", "-c", help="1-based column"),
    offset: int | None = typer.Option(
        None, "--offset", "-o", help="0-based character offset"
    ),
) -> None:
    """Convert between LINE:COLUMN and a character offset in FILE.

    Examples:
        restory offset app.py --line 3 --column 5
        restory offset app.py --offset 120
    """
    with handle_restory_exception():
        typer.echo(run_offset(file, line, column, offset))
