from __future__ import annotations

import math
from dataclasses import dataclass


@dataclass(frozen=True)
class ScoreResult:
    points: int
    streak: int
    placement_points: int
    line_points: float


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


@dataclass
class ScoringRules:
    points_per_block: int = 10
    points_per_line: int = 100
    intersection_points: int = 250
    streak_bonus_percent: int = 10
    intersection_min_streak: int = 2

    def line_points(self, lines: int, intersections: int, streak: int) -> float:
        if lines <= 0:
            return 0.0
        if intersections > 0:
            base = self.intersection_points
        else:
            base = self.points_per_line * lines
        bonus_percent = (streak - 1) * self.streak_bonus_percent
        return base * (1 + bonus_percent / 100)

    def next_streak(self, lines: int, intersections: int, prior_streak: int) -> int:
        if lines <= 0:
            return 0
        streak = prior_streak + 1
        if intersections > 0:
            streak = max(streak, self.intersection_min_streak)
        return streak

    def score(self, block_count: int, lines: int, intersections: int, prior_streak: int) -> ScoreResult:
        placement = self.points_per_block * block_count
        streak = self.next_streak(lines, intersections, prior_streak)
        line_points = self.line_points(lines, intersections, streak)
        return ScoreResult(
            points=round_half_up(placement + line_points),
            streak=streak,
            placement_points=placement,
            line_points=line_points,
        )
