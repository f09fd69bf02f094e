from okr.models.organization import Division, Department, Objective, KeyResult
from okr.models.evaluations import Evaluation
from okr.models.levels import ScoreLevelRecord

__all__ = [
    "Division",
    "Department",
    "Objective",
    "KeyResult",
    "Evaluation",
    "ScoreLevelRecord",
]
