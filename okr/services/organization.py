from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.orm import selectinload

from okr.core.database import session_scope
from okr.models import Department, Division, KeyResult, Objective
from okr.services.scoring import DepartmentInput, KeyResultInput, MetricType, ObjectiveInput, Thresholds


def _department_options():
    return selectinload(Department.objectives).selectinload(Objective.key_results)


def to_key_result_input(kr: KeyResult) -> KeyResultInput:
    return KeyResultInput(
        metric_type=MetricType(kr.metric_type or MetricType.HIGHER_BETTER.value),
        actual_value=kr.actual_value,
        thresholds=Thresholds(
            below=kr.threshold_below,
            meets=kr.threshold_meets,
            good=kr.threshold_good,
            very_good=kr.threshold_very_good,
            exceptional=kr.threshold_exceptional,
        ),
        weight=kr.weight or 0,
        name=kr.name,
    )


def to_objective_input(objective: Objective) -> ObjectiveInput:
    return ObjectiveInput(
        key_results=tuple(to_key_result_input(kr) for kr in objective.key_results),
        weight=objective.weight,
        name=objective.name,
    )


def to_department_input(department: Department) -> DepartmentInput:
    return DepartmentInput(
        objectives=tuple(to_objective_input(obj) for obj in department.objectives),
        weight=department.weight,
        name=department.name,
    )


def get_key_result(kr_id: int) -> Optional[KeyResult]:
    with session_scope() as session:
        return session.get(KeyResult, kr_id)


def get_objective(objective_id: int) -> Optional[Objective]:
    with session_scope() as session:
        stmt = select(Objective).options(selectinload(Objective.key_results)).where(Objective.id == objective_id)
        return session.execute(stmt).scalar_one_or_none()


def get_department(department_id: int) -> Optional[Department]:
    with session_scope() as session:
        stmt = select(Department).options(_department_options()).where(Department.id == department_id)
        return session.execute(stmt).scalar_one_or_none()


def list_departments(division_id: Optional[int] = None) -> List[Department]:
    with session_scope() as session:
        stmt = select(Department).options(_department_options()).order_by(Department.id)
        if division_id is not None:
            stmt = stmt.where(Department.division_id == division_id)
        return session.execute(stmt).scalars().all()


def get_division(division_id: int) -> Optional[Division]:
    with session_scope() as session:
        stmt = (
            select(Division)
            .options(selectinload(Division.departments).selectinload(Department.objectives).selectinload(Objective.key_results))
            .where(Division.id == division_id)
        )
        return session.execute(stmt).scalar_one_or_none()


def list_divisions() -> List[Division]:
    with session_scope() as session:
        stmt = (
            select(Division)
            .options(selectinload(Division.departments).selectinload(Department.objectives).selectinload(Objective.key_results))
            .order_by(Division.id)
        )
        return session.execute(stmt).scalars().all()
