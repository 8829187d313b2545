from __future__ import annotations

import math
from dataclasses import dataclass


@dataclass(frozen=True)
class ScoringRules:
    line_clear_scores: tuple[int, int, int, int, int] = (0, 100, 300, 500, 800)
    combo_step: float = 0.5
    hard_drop_per_cell: int = 2
    lines_per_level: int = 10
    base_drop_interval_ms: int = 1000
    drop_interval_step_ms: int = 100
    min_drop_interval_ms: int = 100

    def line_score(self, lines: int, level: int) -> int:
        if not 0 <= lines < len(self.line_clear_scores):
            raise ValueError(f"cannot score {lines} lines in a single lock")
        return self.line_clear_scores[lines] * level

    def combo_score(self, base: int, combo_before: int) -> int:
        """Scale ``base`` by the streak length before this clear.

        The first clear of a streak (``combo_before == 0``) is unscaled.
        """
        return math.floor(base * (1 + combo_before * self.combo_step))

    def hard_drop_score(self, distance: int) -> int:
        if distance < 0:
            raise ValueError(f"drop distance must be non-negative, got {distance}")
        return distance * self.hard_drop_per_cell

    def level_for_lines(self, total_lines: int) -> int:
        return total_lines // self.lines_per_level + 1

    def drop_interval_ms(self, level: int) -> int:
        return max(self.min_drop_interval_ms, self.base_drop_interval_ms - (level - 1) * self.drop_interval_step_ms)
