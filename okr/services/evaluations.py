import logging
from datetime import datetime
from typing import Dict, List, Optional

from sqlalchemy import select

from okr.core.database import session_scope
from okr.models import Evaluation
from okr.services.combiner import MAX_STARS, MIN_STARS, EvaluationInput, EvaluatorType

logger = logging.getLogger(__name__)

TARGET_TYPES = {"DEPARTMENT", "DIVISION"}
HR_LETTERS = {"A", "B", "C", "D"}
FINAL_STATUSES = ("SUBMITTED", "APPROVED")


def validate_rating(evaluator_type: EvaluatorType, star_rating: Optional[int], letter_rating: Optional[str]) -> None:
    if evaluator_type is EvaluatorType.HR:
        if letter_rating not in HR_LETTERS:
            raise ValueError("HR rating must be A, B, C, or D")
        return
    if star_rating is None or not MIN_STARS <= star_rating <= MAX_STARS:
        raise ValueError(f"{evaluator_type.value} rating must be between {MIN_STARS} and {MAX_STARS} stars")


def _validate_target(evaluator_type: EvaluatorType, target_type: str) -> None:
    if target_type not in TARGET_TYPES:
        raise ValueError(f"target_type must be one of {sorted(TARGET_TYPES)}")
    if evaluator_type is EvaluatorType.BUSINESS_BLOCK and target_type != "DEPARTMENT":
        raise ValueError("Business Block can only evaluate departments")


def create_evaluation(
    evaluator_id: int,
    evaluator_type: EvaluatorType,
    target_type: str,
    target_id: int,
    star_rating: Optional[int] = None,
    letter_rating: Optional[str] = None,
    comment: Optional[str] = None,
    evaluator_name: Optional[str] = None,
    draft: bool = False,
) -> Evaluation:
    """Create an evaluation; it counts towards scores at once unless saved as a draft."""
    evaluator_type = EvaluatorType(evaluator_type)
    letter_rating = letter_rating.strip().upper() if letter_rating else None
    _validate_target(evaluator_type, target_type)
    validate_rating(evaluator_type, star_rating, letter_rating)
    logger.info(
        "Creating evaluation: evaluator=%s type=%s target=%s/%s",
        evaluator_id,
        evaluator_type.value,
        target_type,
        target_id,
    )
    with session_scope() as session:
        existing = session.execute(
            select(Evaluation.id).where(
                Evaluation.evaluator_id == evaluator_id,
                Evaluation.evaluator_type == evaluator_type.value,
                Evaluation.target_type == target_type,
                Evaluation.target_id == target_id,
            )
        ).scalar_one_or_none()
        if existing is not None:
            logger.warning("Duplicate evaluation attempt: evaluator=%s target=%s", evaluator_id, target_id)
            raise ValueError(f"You have already evaluated this {target_type.lower()}")
        now = datetime.utcnow()
        evaluation = Evaluation(
            evaluator_id=evaluator_id,
            evaluator_name=evaluator_name,
            evaluator_type=evaluator_type.value,
            target_type=target_type,
            target_id=target_id,
            star_rating=None if evaluator_type is EvaluatorType.HR else star_rating,
            letter_rating=letter_rating if evaluator_type is EvaluatorType.HR else None,
            comment=comment,
            status="DRAFT" if draft else "SUBMITTED",
            submitted_at=None if draft else now,
        )
        session.add(evaluation)
        session.flush()
        session.refresh(evaluation)
        return evaluation


def submit_evaluation(evaluation_id: int, evaluator_id: int) -> Evaluation:
    with session_scope() as session:
        evaluation = session.get(Evaluation, evaluation_id)
        if not evaluation:
            raise LookupError("Evaluation not found")
        if evaluation.evaluator_id != evaluator_id:
            raise ValueError("You can only submit your own evaluations")
        if evaluation.status != "DRAFT":
            raise ValueError("Only draft evaluations can be submitted")
        evaluation.status = "SUBMITTED"
        evaluation.submitted_at = datetime.utcnow()
        session.flush()
        session.refresh(evaluation)
        logger.info("Evaluation %s submitted", evaluation_id)
        return evaluation


def update_evaluation(
    evaluation_id: int,
    evaluator_id: int,
    star_rating: Optional[int] = None,
    letter_rating: Optional[str] = None,
    comment: Optional[str] = None,
) -> Evaluation:
    letter_rating = letter_rating.strip().upper() if letter_rating else None
    with session_scope() as session:
        evaluation = session.get(Evaluation, evaluation_id)
        if not evaluation:
            raise LookupError("Evaluation not found")
        if evaluation.evaluator_id != evaluator_id:
            raise ValueError("You can only update your own evaluations")
        evaluator_type = EvaluatorType(evaluation.evaluator_type)
        validate_rating(evaluator_type, star_rating, letter_rating)
        if evaluator_type is EvaluatorType.HR:
            evaluation.letter_rating = letter_rating
        else:
            evaluation.star_rating = star_rating
        evaluation.comment = comment
        session.add(evaluation)
        session.flush()
        session.refresh(evaluation)
        logger.info("Evaluation %s updated", evaluation_id)
        return evaluation


def delete_evaluation(evaluation_id: int, evaluator_id: int) -> None:
    with session_scope() as session:
        evaluation = session.get(Evaluation, evaluation_id)
        if not evaluation:
            raise LookupError("Evaluation not found")
        if evaluation.evaluator_id != evaluator_id:
            raise ValueError("You can only delete your own evaluations")
        if evaluation.status != "DRAFT":
            raise ValueError("Only draft evaluations can be deleted")
        session.delete(evaluation)


def list_for_target(target_type: str, target_id: int) -> List[Evaluation]:
    with session_scope() as session:
        stmt = (
            select(Evaluation)
            .where(Evaluation.target_type == target_type, Evaluation.target_id == target_id)
            .order_by(Evaluation.created_at)
        )
        return session.execute(stmt).scalars().all()


def final_evaluations_for_target(target_type: str, target_id: int) -> Dict[EvaluatorType, Evaluation]:
    """Submitted or approved evaluations for a target, the latest one per evaluator type."""
    with session_scope() as session:
        stmt = (
            select(Evaluation)
            .where(
                Evaluation.target_type == target_type,
                Evaluation.target_id == target_id,
                Evaluation.status.in_(FINAL_STATUSES),
            )
            .order_by(Evaluation.updated_at.desc(), Evaluation.id.desc())
        )
        evaluations = session.execute(stmt).scalars().all()
    by_type: Dict[EvaluatorType, Evaluation] = {}
    for evaluation in evaluations:
        by_type.setdefault(EvaluatorType(evaluation.evaluator_type), evaluation)
    logger.debug("Found %d final evaluation(s) for %s/%s", len(by_type), target_type, target_id)
    return by_type


def to_evaluation_input(evaluation: Evaluation) -> EvaluationInput:
    return EvaluationInput(
        evaluator_type=EvaluatorType(evaluation.evaluator_type),
        letter=evaluation.letter_rating,
        stars=evaluation.star_rating,
        comment=evaluation.comment,
    )


def migrate_drafts_to_submitted() -> int:
    """Promote leftover DRAFT evaluations; returns how many were changed."""
    with session_scope() as session:
        drafts = session.execute(select(Evaluation).where(Evaluation.status == "DRAFT")).scalars().all()
        now = datetime.utcnow()
        for evaluation in drafts:
            evaluation.status = "SUBMITTED"
            evaluation.submitted_at = evaluation.submitted_at or now
    if drafts:
        logger.info("Migrated %d DRAFT evaluation(s) to SUBMITTED", len(drafts))
    return len(drafts)
