from typing import List, Optional

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from appraisal_manager.database import get_db
from appraisal_manager.dependencies import get_requester_id
from appraisal_manager.models.appraisal import ReviewStage
from appraisal_manager.schemas.appraisal import (
    AppraisalRead,
    CommentsUpdate,
    CompetenciesUpdate,
    GoalsUpdate,
    ReviewEligibility,
)
from appraisal_manager.schemas.review import AppraisalSubmissionRead, ReviewSubmission
from appraisal_manager.services import appraisal_service, appraisal_workflow

router = APIRouter(prefix="/appraisals")


@router.get("/", response_model=List[AppraisalRead])
def list_appraisals(
    cycle_id: Optional[str] = None,
    employee_id: Optional[str] = None,
    db: Session = Depends(get_db),
):
    return appraisal_service.list_appraisals(db, cycle_id=cycle_id, employee_id=employee_id)


@router.get("/{appraisal_id}", response_model=AppraisalRead)
def get_appraisal(appraisal_id: str, db: Session = Depends(get_db)):
    return appraisal_service.get_appraisal(db, appraisal_id)


@router.delete("/{appraisal_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_appraisal(appraisal_id: str, db: Session = Depends(get_db)):
    appraisal_service.delete_appraisal(db, appraisal_id)


@router.get("/{appraisal_id}/eligibility", response_model=ReviewEligibility)
def review_eligibility(
    appraisal_id: str,
    requester_id: str = Depends(get_requester_id),
    db: Session = Depends(get_db),
):
    """Which reviews the caller may start right now."""
    return appraisal_workflow.review_eligibility(db, appraisal_id, requester_id)


@router.get("/{appraisal_id}/submissions", response_model=List[AppraisalSubmissionRead])
def list_submissions(appraisal_id: str, db: Session = Depends(get_db)):
    return appraisal_service.list_submissions(db, appraisal_id)


@router.post("/{appraisal_id}/reviews/{stage}", response_model=AppraisalRead)
def submit_review(
    appraisal_id: str,
    stage: ReviewStage,
    submission: ReviewSubmission,
    requester_id: str = Depends(get_requester_id),
    db: Session = Depends(get_db),
):
    appraisal_workflow.ensure_can_submit(db, appraisal_id, stage, requester_id)
    return appraisal_workflow.submit_review(
        db, appraisal_id, stage, submission, submitted_by=requester_id
    )


@router.put("/{appraisal_id}/goals", response_model=AppraisalRead)
def update_goals(appraisal_id: str, payload: GoalsUpdate, db: Session = Depends(get_db)):
    return appraisal_service.update_goals(db, appraisal_id, payload.goals)


@router.put("/{appraisal_id}/competencies", response_model=AppraisalRead)
def update_competencies(appraisal_id: str, payload: CompetenciesUpdate, db: Session = Depends(get_db)):
    return appraisal_service.update_competencies(db, appraisal_id, payload.competencies)


@router.put("/{appraisal_id}/comments", response_model=AppraisalRead)
def update_comments(appraisal_id: str, payload: CommentsUpdate, db: Session = Depends(get_db)):
    return appraisal_service.update_comments(db, appraisal_id, payload.comments)


@router.post("/{appraisal_id}/cancel", response_model=AppraisalRead)
def cancel_appraisal(appraisal_id: str, db: Session = Depends(get_db)):
    return appraisal_workflow.cancel_appraisal(db, appraisal_id)


@router.post("/{appraisal_id}/recalculate")
def recalculate_rating(appraisal_id: str, db: Session = Depends(get_db)):
    rating = appraisal_workflow.recalculate_overall_rating(db, appraisal_id)
    return {"appraisal_id": appraisal_id, "overall_rating": rating}
