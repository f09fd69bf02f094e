"""Level configuration and score classification.

A :class:`LevelConfiguration` is an immutable snapshot of the configured score
bands, sorted ascending by ``score_value``. Every engine call receives one
explicitly; an empty list of levels resolves to the built-in default scale.
"""
from __future__ import annotations

import math
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal
from functools import cached_property
from typing import Dict, Iterable, NamedTuple, Optional, Sequence, Tuple

# Qualitative key result grades, worst first.
QUALITATIVE_GRADES: Tuple[str, ...] = ("E", "D", "C", "B", "A")
# HR letter grades, worst first.
HR_GRADES: Tuple[str, ...] = ("D", "C", "B", "A")


def round_half_up(value: float, places: int = 2) -> float:
    quantum = Decimal(1).scaleb(-places)
    return float(Decimal(str(value)).quantize(quantum, rounding=ROUND_HALF_UP))


def _spread(grades: Sequence[str], low_index: int, high_index: int) -> Dict[str, int]:
    """Distribute ``grades`` (worst first) evenly over ``low_index..high_index``."""
    if len(grades) == 1:
        return {grades[0]: high_index}
    step = (high_index - low_index) / (len(grades) - 1)
    return {grade: low_index + math.floor(rank * step + 0.5) for rank, grade in enumerate(grades)}


@dataclass(frozen=True)
class ScoreLevel:
    name: str
    score_value: float
    color: str
    display_order: int = 0

    @property
    def key(self) -> str:
        return self.name.strip().lower().replace(" ", "_")


DEFAULT_LEVELS: Tuple[ScoreLevel, ...] = (
    ScoreLevel("Below", 0.0, "#d9534f", 0),
    ScoreLevel("Meets", 0.25, "#f0ad4e", 1),
    ScoreLevel("Good", 0.50, "#5cb85c", 2),
    ScoreLevel("Very Good", 0.75, "#28a745", 3),
    ScoreLevel("Exceptional", 1.0, "#1e7b34", 4),
)


class Classification(NamedTuple):
    level: str
    color: str
    percentage: float


@dataclass(frozen=True)
class LevelConfiguration:
    levels: Tuple[ScoreLevel, ...]
    is_default: bool = False

    @classmethod
    def from_levels(cls, levels: Optional[Iterable[ScoreLevel]]) -> "LevelConfiguration":
        ordered = sorted(levels or (), key=lambda lvl: (lvl.score_value, lvl.display_order))
        if not ordered:
            return cls.default()
        return cls(levels=tuple(ordered))

    @classmethod
    def default(cls) -> "LevelConfiguration":
        return cls(levels=DEFAULT_LEVELS, is_default=True)

    def __len__(self) -> int:
        return len(self.levels)

    def __getitem__(self, index: int) -> ScoreLevel:
        return self.levels[index]

    @property
    def lowest(self) -> ScoreLevel:
        return self.levels[0]

    @property
    def highest(self) -> ScoreLevel:
        return self.levels[-1]

    @property
    def min_score(self) -> float:
        return self.levels[0].score_value

    @property
    def max_score(self) -> float:
        return self.levels[-1].score_value

    def clamp(self, score: float) -> float:
        return min(max(score, self.min_score), self.max_score)

    @cached_property
    def qualitative_table(self) -> Dict[str, int]:
        """Grade letter -> level index for qualitative key results (E lowest, A highest)."""
        return _spread(QUALITATIVE_GRADES, 0, len(self.levels) - 1)

    @cached_property
    def hr_table(self) -> Dict[str, int]:
        """HR letter -> level index; D sits on the second level, A on the top one."""
        top = len(self.levels) - 1
        return _spread(HR_GRADES, min(1, top), top)

    def level_for(self, score: float) -> ScoreLevel:
        for level in reversed(self.levels):
            if level.score_value <= score:
                return level
        return self.lowest

    def percentage(self, score: float) -> float:
        span = self.max_score - self.min_score
        if span == 0:
            return 0.0
        ratio = min(max((score - self.min_score) / span, 0.0), 1.0)
        return round_half_up(ratio * 1000, 0) / 10


def classify(score: float, levels: LevelConfiguration) -> Classification:
    """Map a numeric score to its level key, color and percentage of the scale."""
    level = levels.level_for(score)
    return Classification(level.key, level.color, levels.percentage(score))
