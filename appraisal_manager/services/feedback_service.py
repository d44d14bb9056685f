"""
360 Feedback Service

Peer, subordinate and customer feedback attached to an appraisal. Runs
alongside the review workflow and never changes appraisal status or rating.
"""
import logging
from typing import List

from sqlalchemy.orm import Session

from appraisal_manager.core.exceptions import DomainValidationError, InvalidTransitionError, NotFoundError
from appraisal_manager.core.schemas import utcnow
from appraisal_manager.models.feedback_360 import Feedback360, FeedbackStatus
from appraisal_manager.schemas.feedback import FeedbackRequest, FeedbackSubmit
from appraisal_manager.services.appraisal_service import get_appraisal
from appraisal_manager.services.directory import display_name, get_user
from appraisal_manager.services.notification import NotificationService

logger = logging.getLogger(__name__)


def get_feedback(db: Session, feedback_id: str) -> Feedback360:
    feedback = db.get(Feedback360, feedback_id)
    if not feedback:
        raise NotFoundError("Feedback360", feedback_id)
    return feedback


def list_feedback(db: Session, appraisal_id: str) -> List[Feedback360]:
    return (
        db.query(Feedback360)
        .filter(Feedback360.appraisal_id == appraisal_id)
        .order_by(Feedback360.created_at)
        .all()
    )


def request_feedback(db: Session, payload: FeedbackRequest) -> Feedback360:
    appraisal = get_appraisal(db, payload.appraisal_id)
    if payload.reviewer_id == appraisal.employee_id:
        raise DomainValidationError("An employee cannot give 360 feedback on their own appraisal")

    feedback = Feedback360(
        appraisal_id=appraisal.id,
        reviewee_id=appraisal.employee_id,
        reviewer_id=payload.reviewer_id,
        relationship=payload.relationship.value,
        status=FeedbackStatus.PENDING.value,
        responses=[],
    )
    db.add(feedback)
    try:
        db.commit()
    except Exception:
        db.rollback()
        raise
    db.refresh(feedback)
    logger.info(f"Requested 360 feedback {feedback.id} from {payload.reviewer_id}")

    try:
        reviewee = get_user(db, appraisal.employee_id)
    except Exception as e:
        logger.warning(f"Could not load reviewee for notifications: {e}", exc_info=True)
        reviewee = None
    NotificationService.notify_user(
        db,
        payload.reviewer_id,
        "360 Feedback Requested",
        f"You have been asked to give {feedback.relationship} feedback for "
        f"{display_name(reviewee, 'a colleague')}.",
    )
    return feedback


def submit_feedback(db: Session, feedback_id: str, payload: FeedbackSubmit) -> Feedback360:
    feedback = get_feedback(db, feedback_id)
    if feedback.status == FeedbackStatus.COMPLETED.value:
        raise InvalidTransitionError(
            "This feedback has already been submitted",
            details={"status": feedback.status},
        )

    feedback.responses = [r.model_dump(mode="json") for r in payload.responses]
    feedback.status = FeedbackStatus.COMPLETED.value
    feedback.submitted_at = utcnow()
    try:
        db.commit()
    except Exception:
        db.rollback()
        raise
    db.refresh(feedback)
    logger.info(f"360 feedback {feedback.id} submitted")

    NotificationService.notify_user(
        db,
        feedback.reviewee_id,
        "360 Feedback Received",
        "New 360 feedback has been submitted for your appraisal.",
    )
    return feedback


def delete_feedback(db: Session, feedback_id: str) -> None:
    feedback = get_feedback(db, feedback_id)
    db.delete(feedback)
    try:
        db.commit()
    except Exception:
        db.rollback()
        raise
