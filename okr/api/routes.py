from fastapi import APIRouter

from okr.api.endpoints import evaluations, health, score_levels, scores

api_router = APIRouter()
api_router.include_router(health.router, tags=["system"])
api_router.include_router(score_levels.router, tags=["score-levels"])
api_router.include_router(scores.router, tags=["scores"])
api_router.include_router(evaluations.router, tags=["evaluations"])
