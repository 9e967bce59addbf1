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

from dataclasses import dataclass

from ..exceptions import ValidationError


@dataclass(frozen=True)
class SplitPoint:
    """
    A position inside a commit's diff where the commit should be divided.

    ``line`` is a line number in the new version of ``path``. A ``column``
    above 1 splits in the middle of that line. ``length`` is accepted for
    forward compatibility and currently ignored.
    """

    path: str
    line: int
    column: int = 1
    length: int | None = None

    def __post_init__(self):
        if not self.path:
            raise ValidationError("Split point needs a file path")
        if self.line < 1:
            raise ValidationError(
                f"Split point line must be >= 1, got {self.line} for {self.path}"
            )
        if self.column < 1:
            raise ValidationError(
                f"Split point column must be >= 1, got {self.column} for {self.path}"
            )

    @classmethod
    def parse(cls, text: str) -> "SplitPoint":
        """
        Parse ``path:line[:column[:length]]``.

        Numeric fields are taken from the right, so paths that themselves
        contain ':' still work.
        """
        parts = text.split(":")
        numbers: list[int] = []
        while len(parts) > 1 and len(numbers) < 3 and parts[-1].isdigit():
            numbers.insert(0, int(parts.pop()))

        path = ":".join(parts)
        if not numbers or not path:
            raise ValidationError(
                f"Invalid split point: {text!r}",
                "Expected PATH:LINE[:COLUMN[:LENGTH]]",
            )

        line = numbers[0]
        column = numbers[1] if len(numbers) > 1 else 1
        length = numbers[2] if len(numbers) > 2 else None
        return cls(path=path, line=line, column=column, length=length)

    def __str__(self) -> str:
        return f"{self.path}:{self.line}:{self.column}"
