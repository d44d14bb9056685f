"""
Appraisal record access and the direct field edits (goals, competencies,
comments) that the assigned manager or an admin may make outside the review
workflow. Status and overall rating are never written here.
"""
import logging
from typing import List, Optional

from sqlalchemy.orm import Session

from appraisal_manager.core.exceptions import NotFoundError
from appraisal_manager.models.appraisal import Appraisal
from appraisal_manager.models.appraisal_submission import AppraisalSubmission
from appraisal_manager.models.feedback_360 import Feedback360
from appraisal_manager.schemas.appraisal import AppraisalCompetency, AppraisalGoal

logger = logging.getLogger(__name__)


def get_appraisal(db: Session, appraisal_id: str) -> Appraisal:
    appraisal = db.get(Appraisal, appraisal_id)
    if not appraisal:
        raise NotFoundError("Appraisal", appraisal_id)
    return appraisal


def list_appraisals(
    db: Session,
    cycle_id: Optional[str] = None,
    employee_id: Optional[str] = None,
) -> List[Appraisal]:
    query = db.query(Appraisal)
    if cycle_id:
        query = query.filter(Appraisal.cycle_id == cycle_id)
    if employee_id:
        query = query.filter(Appraisal.employee_id == employee_id)
    return query.order_by(Appraisal.created_at.desc()).all()


def list_submissions(db: Session, appraisal_id: str) -> List[AppraisalSubmission]:
    get_appraisal(db, appraisal_id)
    return (
        db.query(AppraisalSubmission)
        .filter(AppraisalSubmission.appraisal_id == appraisal_id)
        .order_by(AppraisalSubmission.submitted_at)
        .all()
    )


def _commit(db: Session, appraisal: Appraisal) -> Appraisal:
    try:
        db.commit()
    except Exception:
        db.rollback()
        raise
    db.refresh(appraisal)
    return appraisal


def update_goals(db: Session, appraisal_id: str, goals: List[AppraisalGoal]) -> Appraisal:
    appraisal = get_appraisal(db, appraisal_id)
    appraisal.goals = [goal.model_dump(mode="json") for goal in goals]
    return _commit(db, appraisal)


def update_competencies(
    db: Session, appraisal_id: str, competencies: List[AppraisalCompetency]
) -> Appraisal:
    appraisal = get_appraisal(db, appraisal_id)
    appraisal.competencies = [c.model_dump(mode="json") for c in competencies]
    return _commit(db, appraisal)


def update_comments(db: Session, appraisal_id: str, comments: Optional[str]) -> Appraisal:
    appraisal = get_appraisal(db, appraisal_id)
    appraisal.comments = comments
    return _commit(db, appraisal)


def delete_appraisal(db: Session, appraisal_id: str) -> None:
    appraisal = get_appraisal(db, appraisal_id)
    try:
        # SQLite does not enforce ON DELETE CASCADE without the foreign_keys pragma
        db.query(Feedback360).filter(Feedback360.appraisal_id == appraisal_id).delete()
        db.delete(appraisal)
        db.commit()
    except Exception:
        db.rollback()
        raise
    logger.info(f"Appraisal {appraisal_id} deleted")
