from typing import List

from fastapi import APIRouter, HTTPException, Query

from okr.schemas.evaluations import EvaluationCreate, EvaluationResponse, EvaluationUpdate
from okr.services import evaluations as evaluation_service

router = APIRouter()


@router.post("/evaluations", response_model=EvaluationResponse, status_code=201)
def create_evaluation(payload: EvaluationCreate):
    try:
        return evaluation_service.create_evaluation(**payload.model_dump())
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc))


@router.get("/evaluations", response_model=List[EvaluationResponse])
def list_evaluations(target_type: str = Query("DEPARTMENT"), target_id: int = Query(...)):
    return evaluation_service.list_for_target(target_type, target_id)


@router.put("/evaluations/{evaluation_id}", response_model=EvaluationResponse)
def update_evaluation(evaluation_id: int, payload: EvaluationUpdate):
    try:
        return evaluation_service.update_evaluation(evaluation_id, **payload.model_dump())
    except LookupError as exc:
        raise HTTPException(status_code=404, detail=str(exc))
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc))


@router.post("/evaluations/{evaluation_id}/submit", response_model=EvaluationResponse)
def submit_evaluation(evaluation_id: int, evaluator_id: int = Query(...)):
    try:
        return evaluation_service.submit_evaluation(evaluation_id, evaluator_id)
    except LookupError as exc:
        raise HTTPException(status_code=404, detail=str(exc))
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc))


@router.delete("/evaluations/{evaluation_id}", status_code=204)
def delete_evaluation(evaluation_id: int, evaluator_id: int = Query(...)):
    try:
        evaluation_service.delete_evaluation(evaluation_id, evaluator_id)
    except LookupError as exc:
        raise HTTPException(status_code=404, detail=str(exc))
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc))
