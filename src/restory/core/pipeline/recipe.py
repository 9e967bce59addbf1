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

import contextlib
import time

from loguru import logger

from ..exceptions import restoryError


class Recipe:
    """
    A history rewrite modelled as a sequence of named steps.

    Each ``step`` block logs when it starts and ends. A restoryError leaving
    a block is tagged with ``<recipe>:<step>`` so the failure report names
    where the rewrite stopped; the repository is left as the failing
    primitive left it.
    """

    def __init__(self, name: str):
        self.name = name
        self.completed_steps: list[str] = []
        self.current_step: str | None = None

    @contextlib.contextmanager
    def step(self, step_name: str):
        self.current_step = step_name
        label = f"{self.name}:{step_name}"
        logger.debug("Step started: {label}", label=label)
        start = time.perf_counter()
        try:
            yield
        except restoryError as e:
            if e.step is None:
                e.step = label
            logger.debug("Step failed: {label}", label=label)
            raise
        finally:
            self.current_step = None
        self.completed_steps.append(step_name)
        logger.debug(
            "Step finished: {label} ({ms:.1f} ms)",
            label=label,
            ms=(time.perf_counter() - start) * 1000,
        )
