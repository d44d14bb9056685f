"""
Review Workflow Service

Drives an appraisal through its review stages. The template's review type
decides which submissions are accepted in which status:

    review_type | self                    | manager                      | hr
    ------------+-------------------------+------------------------------+--------------------------
    self        | draft -> completed      | -                            | -
    manager     | -                       | draft -> completed           | -
    both        | draft -> manager-review | manager-review -> hr-review  | hr-review -> completed

Each submission writes the review payload, an AppraisalSubmission row, the new
status and (for manager/hr reviews) the recomputed overall rating in a single
commit. Notifications are sent after the commit and never fail the submission.

This module and the recalculation helpers below are the only writers of
``Appraisal.overall_rating``.
"""
import logging
from typing import Dict, FrozenSet, Optional, Tuple

from sqlalchemy.orm import Session

from appraisal_manager.core.config import settings
from appraisal_manager.core.exceptions import (
    AccessDeniedError,
    DomainValidationError,
    InvalidTransitionError,
    NotFoundError,
)
from appraisal_manager.core.schemas import utcnow
from appraisal_manager.models.appraisal import (
    Appraisal,
    AppraisalStatus,
    ReviewStage,
    TERMINAL_STATUSES,
)
from appraisal_manager.models.appraisal_submission import AppraisalSubmission
from appraisal_manager.models.appraisal_template import AppraisalTemplate, ReviewType
from appraisal_manager.schemas.appraisal import ReviewEligibility
from appraisal_manager.schemas.batch import BatchResult
from appraisal_manager.schemas.review import AppraisalResponse, ReviewSubmission, TextAnswer
from appraisal_manager.services.directory import display_name, get_user
from appraisal_manager.services.notification import NotificationService
from appraisal_manager.services.rating import aggregate, present_reviews

logger = logging.getLogger(__name__)

S = AppraisalStatus

# (review_type, stage) -> (accepted source statuses, target status)
TRANSITIONS: Dict[Tuple[ReviewType, ReviewStage], Tuple[FrozenSet[AppraisalStatus], AppraisalStatus]] = {
    (ReviewType.SELF, ReviewStage.SELF): (frozenset({S.DRAFT}), S.COMPLETED),
    (ReviewType.MANAGER, ReviewStage.MANAGER): (frozenset({S.DRAFT}), S.COMPLETED),
    (ReviewType.BOTH, ReviewStage.SELF): (frozenset({S.DRAFT}), S.MANAGER_REVIEW),
    # self-review is only reachable through legacy data; treated like manager-review
    (ReviewType.BOTH, ReviewStage.MANAGER): (frozenset({S.SELF_REVIEW, S.MANAGER_REVIEW}), S.HR_REVIEW),
    (ReviewType.BOTH, ReviewStage.HR): (frozenset({S.HR_REVIEW}), S.COMPLETED),
}


def next_status(review_type, current_status, stage) -> AppraisalStatus:
    """Return the status a submission moves to, or raise InvalidTransitionError."""
    review_type = ReviewType(review_type)
    current_status = AppraisalStatus(current_status)
    stage = ReviewStage(stage)

    rule = TRANSITIONS.get((review_type, stage))
    if rule is None:
        raise InvalidTransitionError(
            f"Templates with review type '{review_type.value}' do not accept {stage.value} reviews",
            details={"review_type": review_type.value, "stage": stage.value},
        )
    sources, target = rule
    if current_status not in sources:
        raise InvalidTransitionError(
            f"Cannot submit a {stage.value} review while the appraisal is '{current_status.value}'",
            details={
                "review_type": review_type.value,
                "stage": stage.value,
                "status": current_status.value,
            },
        )
    return target


def computes_rating(review_type, stage) -> bool:
    stage = ReviewStage(stage)
    if stage in (ReviewStage.MANAGER, ReviewStage.HR):
        return True
    return ReviewType(review_type) == ReviewType.SELF and settings.workflow.rate_self_only_reviews


# ---------------------------------------------------------------------------
# Eligibility predicates (consumed by the transport layer)
# ---------------------------------------------------------------------------

def can_start_self_review(appraisal: Appraisal, template: AppraisalTemplate, requester_id: str) -> bool:
    return (
        requester_id == appraisal.employee_id
        and appraisal.status == S.DRAFT
        and template.review_type in (ReviewType.SELF, ReviewType.BOTH)
    )


def can_start_manager_review(appraisal: Appraisal, template: AppraisalTemplate, requester_id: str) -> bool:
    if requester_id != appraisal.manager_id:
        return False
    if template.review_type == ReviewType.BOTH:
        return appraisal.status in (S.SELF_REVIEW, S.MANAGER_REVIEW)
    if template.review_type == ReviewType.MANAGER:
        return appraisal.status == S.DRAFT
    return False


def can_start_hr_review(appraisal: Appraisal, template: AppraisalTemplate, requester_id: str) -> bool:
    # Disabled in the product surface unless explicitly switched on
    if not settings.workflow.enable_hr_review:
        return False
    return template.review_type == ReviewType.BOTH and appraisal.status == S.HR_REVIEW


_ELIGIBILITY = {
    ReviewStage.SELF: can_start_self_review,
    ReviewStage.MANAGER: can_start_manager_review,
    ReviewStage.HR: can_start_hr_review,
}


def _load(db: Session, appraisal_id: str, lock: bool = False) -> Appraisal:
    query = db.query(Appraisal).filter(Appraisal.id == appraisal_id)
    if lock:
        query = query.with_for_update()
    appraisal = query.first()
    if not appraisal:
        raise NotFoundError("Appraisal", appraisal_id)
    return appraisal


def _template_for(db: Session, appraisal: Appraisal) -> AppraisalTemplate:
    template = db.get(AppraisalTemplate, appraisal.template_id) if appraisal.template_id else None
    if not template:
        raise NotFoundError("AppraisalTemplate", appraisal.template_id)
    return template


def review_eligibility(db: Session, appraisal_id: str, requester_id: str) -> ReviewEligibility:
    appraisal = _load(db, appraisal_id)
    template = _template_for(db, appraisal)
    return ReviewEligibility(
        appraisal_id=appraisal.id,
        requester_id=requester_id,
        can_start_self_review=can_start_self_review(appraisal, template, requester_id),
        can_start_manager_review=can_start_manager_review(appraisal, template, requester_id),
        can_start_hr_review=can_start_hr_review(appraisal, template, requester_id),
    )


def ensure_can_submit(db: Session, appraisal_id: str, stage, requester_id: str) -> None:
    """Raise AccessDeniedError unless the requester may start this review."""
    stage = ReviewStage(stage)
    appraisal = _load(db, appraisal_id)
    template = _template_for(db, appraisal)
    if not _ELIGIBILITY[stage](appraisal, template, requester_id):
        raise AccessDeniedError(f"You cannot submit a {stage.value} review for this appraisal")


def _missing_required_answers(template: AppraisalTemplate, review: AppraisalResponse):
    answered = set()
    for question_response in review.responses:
        answer = question_response.answer
        if isinstance(answer, TextAnswer) and not answer.value.strip():
            continue
        answered.add(question_response.question_id)

    missing = []
    for section in template.sections or []:
        for question in section.get("questions", []):
            if question.get("required", True) and question.get("id") not in answered:
                missing.append(question.get("id"))
    return missing


# ---------------------------------------------------------------------------
# Submission
# ---------------------------------------------------------------------------

def submit_review(
    db: Session,
    appraisal_id: str,
    stage,
    submission: ReviewSubmission,
    submitted_by: Optional[str] = None,
) -> Appraisal:
    """
    Record a review and advance the appraisal.

    Raises:
        NotFoundError: appraisal or its template does not exist.
        InvalidTransitionError: the stage is not accepted in the current status.
        DomainValidationError: required template questions are unanswered.
    Store failures propagate after rollback; nothing is partially applied.
    """
    stage = ReviewStage(stage)
    try:
        appraisal = _load(db, appraisal_id, lock=True)
        template = _template_for(db, appraisal)
        target = next_status(template.review_type, appraisal.status, stage)

        now = utcnow()
        review = AppraisalResponse(
            responses=submission.responses,
            overall_comments=submission.overall_comments,
            submitted_by=submitted_by,
            submitted_at=now,
        )
        missing = _missing_required_answers(template, review)
        if missing:
            raise DomainValidationError(
                "Please answer all required questions",
                details={"missing_question_ids": missing},
            )

        payload = review.model_dump(mode="json")
        setattr(appraisal, f"{stage.value}_review", payload)
        appraisal.status = target.value
        if target == S.COMPLETED:
            appraisal.completed_at = now
        if computes_rating(template.review_type, stage):
            appraisal.overall_rating = aggregate(present_reviews(appraisal))

        db.add(AppraisalSubmission(
            appraisal_id=appraisal.id,
            stage=stage.value,
            payload=payload,
            submitted_by=submitted_by,
            submitted_at=now,
        ))
        db.commit()
    except Exception:
        db.rollback()
        raise

    db.refresh(appraisal)
    logger.info(
        f"Appraisal {appraisal.id}: {stage.value} review submitted, status -> {appraisal.status}"
    )
    _notify_submission(db, appraisal, template, stage)
    return appraisal


def _notify_submission(db: Session, appraisal: Appraisal, template: AppraisalTemplate, stage: ReviewStage):
    try:
        employee = get_user(db, appraisal.employee_id)
    except Exception as e:
        logger.warning(f"Could not load employee for notifications: {e}", exc_info=True)
        employee = None
    has_distinct_manager = bool(appraisal.manager_id) and appraisal.manager_id != appraisal.employee_id

    if stage == ReviewStage.SELF:
        if has_distinct_manager:
            NotificationService.notify_user(
                db,
                appraisal.manager_id,
                "Self-Review Completed",
                f"{display_name(employee, 'Employee')} has completed their self-review. "
                "Please complete your manager review.",
            )
    elif stage == ReviewStage.MANAGER:
        follow_up = (
            "HR review is now pending."
            if template.review_type == ReviewType.BOTH
            else "Your appraisal is now complete."
        )
        NotificationService.notify_user(
            db,
            appraisal.employee_id,
            "Manager Review Completed",
            f"Your manager has completed their review of your appraisal. {follow_up}",
        )
    else:
        NotificationService.notify_user(
            db,
            appraisal.employee_id,
            "Appraisal Complete",
            "Your annual appraisal has been completed. You can view the final results.",
        )
        if has_distinct_manager:
            NotificationService.notify_user(
                db,
                appraisal.manager_id,
                "Appraisal Complete",
                f"The appraisal for {display_name(employee, 'your employee')} has been completed by HR.",
            )


def cancel_appraisal(db: Session, appraisal_id: str) -> Appraisal:
    try:
        appraisal = _load(db, appraisal_id, lock=True)
        if AppraisalStatus(appraisal.status) in TERMINAL_STATUSES:
            raise InvalidTransitionError(
                f"Appraisal is already {appraisal.status}",
                details={"status": appraisal.status},
            )
        appraisal.status = S.CANCELLED.value
        db.commit()
    except Exception:
        db.rollback()
        raise
    db.refresh(appraisal)
    logger.info(f"Appraisal {appraisal.id} cancelled")
    return appraisal


# ---------------------------------------------------------------------------
# Recalculation
# ---------------------------------------------------------------------------

def recalculate_overall_rating(db: Session, appraisal_id: str) -> float:
    """Recompute and persist the rating from whichever reviews are present."""
    try:
        appraisal = _load(db, appraisal_id, lock=True)
        rating = aggregate(present_reviews(appraisal))
        appraisal.overall_rating = rating
        db.commit()
    except Exception:
        db.rollback()
        raise
    return rating


def recalculate_all_ratings(db: Session) -> BatchResult:
    """Recalculate every appraisal that has at least one submitted review."""
    result = BatchResult()
    appraisal_ids = [
        a.id for a in db.query(Appraisal).order_by(Appraisal.created_at).all()
        if a.has_any_review
    ]
    for appraisal_id in appraisal_ids:
        try:
            rating = recalculate_overall_rating(db, appraisal_id)
            result.succeeded += 1
            logger.info(f"Recalculated rating for appraisal {appraisal_id}: {rating:.2f}")
        except Exception as e:
            result.failed += 1
            logger.error(f"Error recalculating rating for appraisal {appraisal_id}: {e}", exc_info=True)
    return result
