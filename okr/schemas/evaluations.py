from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field

from okr.services.combiner import EvaluatorType


class EvaluationCreate(BaseModel):
    evaluator_id: int
    evaluator_name: Optional[str] = None
    evaluator_type: EvaluatorType
    target_type: str = Field("DEPARTMENT", description="DEPARTMENT | DIVISION")
    target_id: int
    star_rating: Optional[int] = Field(None, description="1-5 stars for Director and Business Block")
    letter_rating: Optional[str] = Field(None, description="A-D for HR")
    comment: Optional[str] = None
    draft: bool = Field(False, description="Save without submitting; drafts can be deleted")


class EvaluationUpdate(BaseModel):
    evaluator_id: int
    star_rating: Optional[int] = None
    letter_rating: Optional[str] = None
    comment: Optional[str] = None


class EvaluationResponse(BaseModel):
    id: int
    evaluator_id: int
    evaluator_name: Optional[str] = None
    evaluator_type: EvaluatorType
    target_type: str
    target_id: int
    star_rating: Optional[int] = None
    letter_rating: Optional[str] = None
    comment: Optional[str] = None
    status: str
    created_at: datetime
    updated_at: datetime
    submitted_at: Optional[datetime] = None

    model_config = {"from_attributes": True}
