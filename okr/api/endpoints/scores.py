from typing import List, Optional

from fastapi import APIRouter, HTTPException, Query

from okr.schemas.scoring import (
    DepartmentScoreResponse,
    DivisionScoreResponse,
    KeyResultPreviewRequest,
    ScoreResultResponse,
)
from okr.services import okr_scores
from okr.services.combiner import CombinedResult
from okr.services.scoring import KeyResultInput, Thresholds

router = APIRouter()


def serialize_combined(result: CombinedResult) -> dict:
    data = result.as_dict()
    data.update(
        {
            "has_director_evaluation": result.has_director_evaluation,
            "has_hr_evaluation": result.has_hr_evaluation,
            "has_business_block_evaluation": result.has_business_block_evaluation,
        }
    )
    return data


def serialize_department(item: okr_scores.DepartmentScore) -> dict:
    return {
        "department_id": item.department_id,
        "name": item.name,
        "division_id": item.division_id,
        "score": serialize_combined(item.result),
    }


def serialize_division(item: okr_scores.DivisionScore) -> dict:
    return {
        "division_id": item.division_id,
        "name": item.name,
        "score": serialize_combined(item.result),
        "departments": [serialize_department(dept) for dept in item.departments],
    }


@router.post("/scoring/key-result", response_model=ScoreResultResponse)
def preview_key_result(payload: KeyResultPreviewRequest):
    kr = KeyResultInput(
        metric_type=payload.metric_type,
        actual_value=payload.actual_value,
        thresholds=Thresholds(**payload.thresholds.model_dump()),
        weight=payload.weight,
        name="preview",
    )
    return okr_scores.preview_key_result(kr).as_dict()


@router.get("/key-results/{kr_id}/score", response_model=ScoreResultResponse)
def key_result_score(kr_id: int):
    try:
        return okr_scores.key_result_score(kr_id).as_dict()
    except LookupError as exc:
        raise HTTPException(status_code=404, detail=str(exc))


@router.get("/objectives/{objective_id}/score", response_model=ScoreResultResponse)
def objective_score(objective_id: int):
    try:
        return okr_scores.objective_score(objective_id).as_dict()
    except LookupError as exc:
        raise HTTPException(status_code=404, detail=str(exc))


@router.get("/departments/scores", response_model=List[DepartmentScoreResponse])
def list_department_scores(division_id: Optional[int] = Query(None)):
    return [serialize_department(item) for item in okr_scores.list_department_scores(division_id)]


@router.get("/departments/{department_id}/score", response_model=DepartmentScoreResponse)
def department_score(department_id: int):
    try:
        return serialize_department(okr_scores.department_score(department_id))
    except LookupError as exc:
        raise HTTPException(status_code=404, detail=str(exc))


@router.get("/divisions/scores", response_model=List[DivisionScoreResponse])
def list_division_scores():
    return [serialize_division(item) for item in okr_scores.list_division_scores()]


@router.get("/divisions/{division_id}/score", response_model=DivisionScoreResponse)
def division_score(division_id: int):
    try:
        return serialize_division(okr_scores.division_score(division_id))
    except LookupError as exc:
        raise HTTPException(status_code=404, detail=str(exc))
