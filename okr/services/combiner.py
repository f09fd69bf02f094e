"""Blend the automatic OKR score with manual evaluations.

Which sources are present selects a :class:`CombinationPolicy`; each policy has
one handler. Adding a policy means adding an enum member, a rule in
:func:`select_policy` and a handler entry.
"""
from __future__ import annotations

import logging
from dataclasses import asdict, dataclass
from enum import Enum
from typing import Any, Callable, Dict, Iterable, Mapping, Optional

from okr.services.levels import LevelConfiguration, classify, round_half_up
from okr.services.scoring import ScoreResult

logger = logging.getLogger(__name__)

MIN_STARS = 1
MAX_STARS = 5


class EvaluatorType(str, Enum):
    DIRECTOR = "DIRECTOR"
    HR = "HR"
    BUSINESS_BLOCK = "BUSINESS_BLOCK"


class CombinationPolicy(str, Enum):
    ALL_SOURCES = "ALL_SOURCES"
    WITHOUT_BUSINESS_BLOCK = "WITHOUT_BUSINESS_BLOCK"
    AUTOMATIC_ONLY = "AUTOMATIC_ONLY"


AUTOMATIC = "AUTOMATIC"

POLICY_WEIGHTS: Dict[CombinationPolicy, Dict[str, float]] = {
    CombinationPolicy.ALL_SOURCES: {
        AUTOMATIC: 0.40,
        EvaluatorType.DIRECTOR.value: 0.20,
        EvaluatorType.HR.value: 0.20,
        EvaluatorType.BUSINESS_BLOCK.value: 0.20,
    },
    CombinationPolicy.WITHOUT_BUSINESS_BLOCK: {
        AUTOMATIC: 0.60,
        EvaluatorType.DIRECTOR.value: 0.20,
        EvaluatorType.HR.value: 0.20,
    },
}


@dataclass(frozen=True)
class EvaluationInput:
    evaluator_type: EvaluatorType
    score: Optional[float] = None
    letter: Optional[str] = None
    stars: Optional[int] = None
    comment: Optional[str] = None


@dataclass
class SourceBreakdown:
    present: bool = False
    score: Optional[float] = None
    stars: Optional[int] = None
    letter: Optional[str] = None
    comment: Optional[str] = None


@dataclass
class CombinedResult:
    score: float
    level: str
    color: str
    percentage: float
    automatic: ScoreResult
    director: SourceBreakdown
    hr: SourceBreakdown
    business_block: SourceBreakdown
    policy: CombinationPolicy
    final_score: Optional[float] = None
    final_percentage: Optional[float] = None

    @property
    def has_director_evaluation(self) -> bool:
        return self.director.present

    @property
    def has_hr_evaluation(self) -> bool:
        return self.hr.present

    @property
    def has_business_block_evaluation(self) -> bool:
        return self.business_block.present

    def as_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data["policy"] = self.policy.value
        return data


def stars_to_score(stars: int, levels: LevelConfiguration) -> float:
    """Map a 1-5 star rating linearly onto the configured score range."""
    return levels.min_score + (stars - MIN_STARS) * (levels.max_score - levels.min_score) / (MAX_STARS - MIN_STARS)


def score_to_stars(score: Optional[float], levels: LevelConfiguration) -> Optional[int]:
    if score is None or score < levels.min_score or score > levels.max_score:
        return None
    span = levels.max_score - levels.min_score
    if span == 0:
        return MAX_STARS
    return int(round_half_up(MIN_STARS + (score - levels.min_score) / span * (MAX_STARS - MIN_STARS), 0))


def hr_letter_to_score(letter: Optional[str], levels: LevelConfiguration) -> Optional[float]:
    index = levels.hr_table.get((letter or "").strip().upper())
    if index is None:
        return None
    return levels[index].score_value


def _resolve(evaluation: Optional[EvaluationInput], levels: LevelConfiguration) -> SourceBreakdown:
    if evaluation is None:
        return SourceBreakdown()
    score = evaluation.score
    stars = evaluation.stars
    if score is None:
        if evaluation.evaluator_type is EvaluatorType.HR:
            score = hr_letter_to_score(evaluation.letter, levels)
        elif stars is not None:
            score = stars_to_score(stars, levels)
    if stars is None and evaluation.evaluator_type is not EvaluatorType.HR:
        stars = score_to_stars(score, levels)
    return SourceBreakdown(
        present=score is not None,
        score=score,
        stars=stars,
        letter=evaluation.letter,
        comment=evaluation.comment,
    )


def select_policy(sources: Mapping[EvaluatorType, SourceBreakdown]) -> CombinationPolicy:
    director = sources[EvaluatorType.DIRECTOR].present
    hr = sources[EvaluatorType.HR].present
    business_block = sources[EvaluatorType.BUSINESS_BLOCK].present
    if director and hr and business_block:
        return CombinationPolicy.ALL_SOURCES
    if director and hr:
        return CombinationPolicy.WITHOUT_BUSINESS_BLOCK
    return CombinationPolicy.AUTOMATIC_ONLY


def _weighted_blend(weights: Mapping[str, float]) -> Callable[[float, Mapping[EvaluatorType, SourceBreakdown]], float]:
    def blend(automatic: float, sources: Mapping[EvaluatorType, SourceBreakdown]) -> float:
        total = automatic * weights[AUTOMATIC]
        for evaluator_type, source in sources.items():
            weight = weights.get(evaluator_type.value)
            if weight:
                total += source.score * weight
        return round_half_up(total)

    return blend


def _no_blend(automatic: float, sources: Mapping[EvaluatorType, SourceBreakdown]) -> Optional[float]:
    return None


POLICY_HANDLERS: Dict[CombinationPolicy, Callable[..., Optional[float]]] = {
    CombinationPolicy.ALL_SOURCES: _weighted_blend(POLICY_WEIGHTS[CombinationPolicy.ALL_SOURCES]),
    CombinationPolicy.WITHOUT_BUSINESS_BLOCK: _weighted_blend(POLICY_WEIGHTS[CombinationPolicy.WITHOUT_BUSINESS_BLOCK]),
    CombinationPolicy.AUTOMATIC_ONLY: _no_blend,
}


def combine_evaluations(
    automatic: ScoreResult,
    evaluations: Iterable[EvaluationInput],
    levels: LevelConfiguration,
) -> CombinedResult:
    """Blend ``automatic`` with the submitted evaluations (at most one per evaluator type)."""
    by_type: Dict[EvaluatorType, EvaluationInput] = {}
    for evaluation in evaluations:
        by_type.setdefault(EvaluatorType(evaluation.evaluator_type), evaluation)
    sources = {evaluator_type: _resolve(by_type.get(evaluator_type), levels) for evaluator_type in EvaluatorType}

    policy = select_policy(sources)
    final_score = POLICY_HANDLERS[policy](automatic.score, sources)
    logger.debug(
        "Combined automatic=%s with %s under %s -> %s",
        automatic.score,
        sorted(t.value for t, s in sources.items() if s.present),
        policy.value,
        final_score,
    )

    if final_score is None:
        score, level, color, percentage = automatic.score, automatic.level, automatic.color, automatic.percentage
        final_percentage = None
    else:
        level, color, percentage = classify(final_score, levels)
        score, final_percentage = final_score, percentage

    return CombinedResult(
        score=score,
        level=level,
        color=color,
        percentage=percentage,
        automatic=automatic,
        director=sources[EvaluatorType.DIRECTOR],
        hr=sources[EvaluatorType.HR],
        business_block=sources[EvaluatorType.BUSINESS_BLOCK],
        policy=policy,
        final_score=final_score,
        final_percentage=final_percentage,
    )
