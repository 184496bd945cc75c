from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class ScoringRules:
    points_per_cell: int = 10
    # Bonus by number of lines cleared in one placement, capped at the last entry
    line_bonus: tuple[int, ...] = (0, 20, 30, 40, 50, 60, 70, 80, 90, 100)

    def __post_init__(self) -> None:
        if self.points_per_cell < 0:
            raise ValueError("points_per_cell must be >= 0")
        if not self.line_bonus or self.line_bonus[0] != 0:
            raise ValueError("line_bonus must start with 0")
        if any(b < a for a, b in zip(self.line_bonus, self.line_bonus[1:])):
            raise ValueError("line_bonus must be non-decreasing")

    def bonus_for_lines(self, lines: int) -> int:
        if lines <= 0:
            return 0
        return self.line_bonus[min(lines, len(self.line_bonus) - 1)]

    def score_for(self, cells_placed: int, lines_cleared: int) -> int:
        return max(0, cells_placed) * self.points_per_cell + self.bonus_for_lines(lines_cleared)


DEFAULT_RULES = ScoringRules()


def compute_score(cells_placed: int, lines_cleared: int) -> int:
    return DEFAULT_RULES.score_for(cells_placed, lines_cleared)
