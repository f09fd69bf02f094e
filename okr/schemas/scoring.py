from typing import List, Optional

from pydantic import BaseModel, Field

from okr.services.combiner import CombinationPolicy
from okr.services.scoring import MetricType


class ScoreLevelSchema(BaseModel):
    name: str = Field(..., min_length=1, max_length=64)
    score_value: float
    color: str = Field(..., pattern=r"^#[0-9a-fA-F]{6}$")
    display_order: int = 0


class ScoreLevelResponse(ScoreLevelSchema):
    id: int
    is_default: bool = False


class ScoreLevelsUpdateRequest(BaseModel):
    levels: List[ScoreLevelSchema] = Field(..., min_length=1)


class ThresholdsSchema(BaseModel):
    below: Optional[float] = None
    meets: Optional[float] = None
    good: Optional[float] = None
    very_good: Optional[float] = None
    exceptional: Optional[float] = None


class KeyResultPreviewRequest(BaseModel):
    metric_type: MetricType = MetricType.HIGHER_BETTER
    actual_value: Optional[str] = None
    thresholds: ThresholdsSchema = Field(default_factory=ThresholdsSchema)
    weight: int = 0


class ScoreResultResponse(BaseModel):
    score: float
    level: str
    color: str
    percentage: float


class SourceBreakdownResponse(BaseModel):
    present: bool
    score: Optional[float] = None
    stars: Optional[int] = None
    letter: Optional[str] = None
    comment: Optional[str] = None


class CombinedScoreResponse(ScoreResultResponse):
    automatic: ScoreResultResponse
    director: SourceBreakdownResponse
    hr: SourceBreakdownResponse
    business_block: SourceBreakdownResponse
    policy: CombinationPolicy
    final_score: Optional[float] = None
    final_percentage: Optional[float] = None
    has_director_evaluation: bool
    has_hr_evaluation: bool
    has_business_block_evaluation: bool


class DepartmentScoreResponse(BaseModel):
    department_id: int
    name: str
    division_id: Optional[int] = None
    score: CombinedScoreResponse


class DivisionScoreResponse(BaseModel):
    division_id: int
    name: str
    score: CombinedScoreResponse
    departments: List[DepartmentScoreResponse] = Field(default_factory=list)
