import logging
import math
from dataclasses import asdict, dataclass, field
from enum import Enum
from typing import Any, Callable, Dict, List, Optional, Sequence, Tuple, TypeVar

from okr.services.levels import LevelConfiguration, classify, round_half_up

logger = logging.getLogger(__name__)

# Smallest threshold span used as an interpolation denominator.
MIN_THRESHOLD_SPAN = 0.001

T = TypeVar("T")


class MetricType(str, Enum):
    HIGHER_BETTER = "HIGHER_BETTER"
    LOWER_BETTER = "LOWER_BETTER"
    QUALITATIVE = "QUALITATIVE"


@dataclass(frozen=True)
class Thresholds:
    below: Optional[float] = None
    meets: Optional[float] = None
    good: Optional[float] = None
    very_good: Optional[float] = None
    exceptional: Optional[float] = None

    def resolved(self, metric_type: MetricType) -> Tuple[float, float, float, float, float]:
        """Thresholds with direction-aware defaults filled in, from ``below`` to ``exceptional``."""
        lower = metric_type is MetricType.LOWER_BETTER
        return (
            self.below if self.below is not None else (100.0 if lower else 0.0),
            self.meets if self.meets is not None else (75.0 if lower else 25.0),
            self.good if self.good is not None else 50.0,
            self.very_good if self.very_good is not None else (25.0 if lower else 75.0),
            self.exceptional if self.exceptional is not None else (0.0 if lower else 100.0),
        )


@dataclass(frozen=True)
class KeyResultInput:
    metric_type: MetricType
    actual_value: Optional[str] = None
    thresholds: Thresholds = field(default_factory=Thresholds)
    weight: int = 0
    name: str = ""


@dataclass(frozen=True)
class ObjectiveInput:
    key_results: Sequence[KeyResultInput] = ()
    weight: Optional[int] = None
    name: str = ""


@dataclass(frozen=True)
class DepartmentInput:
    objectives: Sequence[ObjectiveInput] = ()
    weight: Optional[int] = None
    name: str = ""

    @property
    def is_scoreable(self) -> bool:
        return any(obj.key_results for obj in self.objectives)


@dataclass(frozen=True)
class WeightedScore:
    score: float
    weight: float = 0


@dataclass
class ScoreResult:
    score: float
    level: str
    color: str
    percentage: float

    def as_dict(self) -> Dict[str, Any]:
        return asdict(self)


def score_result(score: float, levels: LevelConfiguration) -> ScoreResult:
    """Clamp, round and classify ``score`` against ``levels``."""
    value = round_half_up(levels.clamp(score))
    level, color, percentage = classify(value, levels)
    return ScoreResult(score=value, level=level, color=color, percentage=percentage)


def empty_result(levels: LevelConfiguration) -> ScoreResult:
    lowest = levels.lowest
    return ScoreResult(score=lowest.score_value, level=lowest.key, color=lowest.color, percentage=0.0)


def _parse_actual(kr: KeyResultInput) -> float:
    raw = (kr.actual_value or "").strip()
    if not raw:
        logger.debug("Key result '%s' has no actual value, scoring it as 0", kr.name)
        return 0.0
    try:
        value = float(raw)
    except ValueError:
        logger.warning("Invalid actual value %r for key result '%s', defaulting to 0", raw, kr.name)
        return 0.0
    if not math.isfinite(value):
        logger.warning("Non-finite actual value %r for key result '%s', defaulting to 0", raw, kr.name)
        return 0.0
    return value


def _qualitative_score(kr: KeyResultInput, levels: LevelConfiguration) -> ScoreResult:
    grade = (kr.actual_value or "").strip().upper()
    table = levels.qualitative_table
    if grade not in table:
        if grade:
            logger.debug("Unknown grade %r for key result '%s', treating it as E", grade, kr.name)
        grade = "E"
    return score_result(levels[table[grade]].score_value, levels)


def _quantitative_score(kr: KeyResultInput, levels: LevelConfiguration) -> ScoreResult:
    actual = _parse_actual(kr)
    higher = kr.metric_type is not MetricType.LOWER_BETTER
    top = len(levels) - 1
    below, meets, good, very_good, exceptional = kr.thresholds.resolved(kr.metric_type)
    pairs = [
        (below, 0),
        (meets, min(1, top)),
        (good, min(2, top)),
        (very_good, min(3, top)),
        (exceptional, top),
    ]
    pairs.sort(key=lambda pair: pair[0], reverse=not higher)

    score = levels.min_score
    for i in range(len(pairs) - 1, -1, -1):
        threshold, index = pairs[i]
        reached = actual >= threshold if higher else actual <= threshold
        if not reached:
            continue
        if i == len(pairs) - 1:
            score = levels[index].score_value
        else:
            next_threshold, next_index = pairs[i + 1]
            span = max(abs(next_threshold - threshold), MIN_THRESHOLD_SPAN)
            ratio = abs(actual - threshold) / span
            start = levels[index].score_value
            end = levels[next_index].score_value
            score = start + ratio * (end - start)
        break

    logger.debug(
        "Key result '%s': actual=%s type=%s thresholds=%s -> %s",
        kr.name,
        actual,
        kr.metric_type.value,
        [pair[0] for pair in pairs],
        score,
    )
    return score_result(score, levels)


def score_key_result(kr: KeyResultInput, levels: LevelConfiguration) -> ScoreResult:
    """Score one key result against the configured threshold bands."""
    if kr.metric_type is MetricType.QUALITATIVE:
        return _qualitative_score(kr, levels)
    return _quantitative_score(kr, levels)


def aggregate(children: Sequence[WeightedScore], levels: LevelConfiguration) -> ScoreResult:
    """Weighted mean of child scores, or the plain mean when no child carries weight."""
    children = list(children)
    if not children:
        return empty_result(levels)
    total_weight = sum(child.weight or 0 for child in children)
    if total_weight > 0:
        value = sum(child.score * (child.weight or 0) for child in children) / total_weight
    else:
        value = sum(child.score for child in children) / len(children)
    return score_result(value, levels)


def _equal_share_children(
    items: Sequence[T], weight_of: Callable[[T], Optional[float]], score_of: Callable[[T], ScoreResult]
) -> List[WeightedScore]:
    default_weight = 100.0 / len(items)
    return [WeightedScore(score_of(item).score, weight_of(item) or default_weight) for item in items]


def score_objective(key_results: Sequence[KeyResultInput], levels: LevelConfiguration) -> ScoreResult:
    children = [WeightedScore(score_key_result(kr, levels).score, kr.weight) for kr in key_results]
    return aggregate(children, levels)


def score_department(objectives: Sequence[ObjectiveInput], levels: LevelConfiguration) -> ScoreResult:
    """Automatic department score; objectives without key results do not count."""
    scoreable = [obj for obj in objectives if obj.key_results]
    if not scoreable:
        return empty_result(levels)
    children = _equal_share_children(
        scoreable,
        lambda obj: obj.weight,
        lambda obj: score_objective(obj.key_results, levels),
    )
    return aggregate(children, levels)


def score_division(
    departments: Sequence[DepartmentInput],
    levels: LevelConfiguration,
    department_scores: Optional[Sequence[ScoreResult]] = None,
) -> ScoreResult:
    """Automatic division score over scoreable departments.

    ``department_scores`` lines up with ``departments`` and lets a caller that
    already scored them skip the second pass.
    """
    if department_scores is None:
        department_scores = [score_department(dept.objectives, levels) for dept in departments]
    scoreable = [(dept, score) for dept, score in zip(departments, department_scores) if dept.is_scoreable]
    if not scoreable:
        return empty_result(levels)
    children = _equal_share_children(
        scoreable,
        lambda pair: pair[0].weight,
        lambda pair: pair[1],
    )
    return aggregate(children, levels)
