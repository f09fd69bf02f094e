from typing import List

from fastapi import APIRouter, HTTPException

from okr.schemas.scoring import ScoreLevelResponse, ScoreLevelsUpdateRequest
from okr.services import score_levels

router = APIRouter()


def serialize_level(record) -> dict:
    return {
        "id": record.id,
        "name": record.name,
        "score_value": record.score_value,
        "color": record.color,
        "display_order": record.display_order,
        "is_default": bool(record.is_default),
    }


@router.get("/score-levels", response_model=List[ScoreLevelResponse])
def list_levels():
    return [serialize_level(level) for level in score_levels.list_levels()]


@router.put("/score-levels", response_model=List[ScoreLevelResponse])
def update_levels(payload: ScoreLevelsUpdateRequest):
    try:
        records = score_levels.replace_levels([level.model_dump() for level in payload.levels])
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc))
    return [serialize_level(level) for level in records]


@router.post("/score-levels/reset", response_model=List[ScoreLevelResponse])
def reset_levels():
    return [serialize_level(level) for level in score_levels.reset_to_defaults()]
