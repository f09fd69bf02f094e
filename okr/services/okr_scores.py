import logging
from dataclasses import dataclass, field
from typing import List, Optional

from okr.models import Department, Division
from okr.services import evaluations as evaluation_service
from okr.services import organization
from okr.services.combiner import CombinedResult, combine_evaluations
from okr.services.computation_cache import LevelCache, computation_scope
from okr.services.scoring import (
    KeyResultInput,
    ScoreResult,
    score_department,
    score_division,
    score_key_result,
    score_objective,
)

logger = logging.getLogger(__name__)


@dataclass
class DepartmentScore:
    department_id: int
    name: str
    division_id: Optional[int]
    result: CombinedResult


@dataclass
class DivisionScore:
    division_id: int
    name: str
    result: CombinedResult
    departments: List[DepartmentScore] = field(default_factory=list)


def _combined_for(target_type: str, target_id: int, automatic: ScoreResult, cache: LevelCache) -> CombinedResult:
    found = evaluation_service.final_evaluations_for_target(target_type, target_id)
    inputs = [evaluation_service.to_evaluation_input(evaluation) for evaluation in found.values()]
    return combine_evaluations(automatic, inputs, cache.levels)


def _department_score(department: Department, cache: LevelCache) -> DepartmentScore:
    dept_input = organization.to_department_input(department)
    automatic = score_department(dept_input.objectives, cache.levels)
    result = _combined_for("DEPARTMENT", department.id, automatic, cache)
    return DepartmentScore(
        department_id=department.id,
        name=department.name,
        division_id=department.division_id,
        result=result,
    )


def _division_score(division: Division, cache: LevelCache) -> DivisionScore:
    dept_inputs = [organization.to_department_input(dept) for dept in division.departments]
    departments = [_department_score(dept, cache) for dept in division.departments]
    automatic = score_division(dept_inputs, cache.levels, [dept.result.automatic for dept in departments])
    result = _combined_for("DIVISION", division.id, automatic, cache)
    return DivisionScore(
        division_id=division.id,
        name=division.name,
        result=result,
        departments=departments,
    )


def preview_key_result(kr: KeyResultInput) -> ScoreResult:
    with computation_scope() as cache:
        return score_key_result(kr, cache.levels)


def key_result_score(kr_id: int) -> ScoreResult:
    kr = organization.get_key_result(kr_id)
    if not kr:
        raise LookupError("Key result not found")
    with computation_scope() as cache:
        return score_key_result(organization.to_key_result_input(kr), cache.levels)


def objective_score(objective_id: int) -> ScoreResult:
    objective = organization.get_objective(objective_id)
    if not objective:
        raise LookupError("Objective not found")
    with computation_scope() as cache:
        obj_input = organization.to_objective_input(objective)
        return score_objective(obj_input.key_results, cache.levels)


def department_score(department_id: int) -> DepartmentScore:
    department = organization.get_department(department_id)
    if not department:
        raise LookupError(f"Department not found: {department_id}")
    with computation_scope() as cache:
        return _department_score(department, cache)


def list_department_scores(division_id: Optional[int] = None) -> List[DepartmentScore]:
    departments = organization.list_departments(division_id)
    with computation_scope() as cache:
        scores = [_department_score(dept, cache) for dept in departments]
    logger.info("Scored %d department(s)", len(scores))
    return scores


def division_score(division_id: int) -> DivisionScore:
    division = organization.get_division(division_id)
    if not division:
        raise LookupError(f"Division not found: {division_id}")
    with computation_scope() as cache:
        return _division_score(division, cache)


def list_division_scores() -> List[DivisionScore]:
    divisions = organization.list_divisions()
    with computation_scope() as cache:
        scores = [_division_score(division, cache) for division in divisions]
    logger.info("Scored %d division(s)", len(scores))
    return scores
