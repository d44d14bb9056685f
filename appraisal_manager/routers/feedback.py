from typing import List

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from appraisal_manager.database import get_db
from appraisal_manager.schemas.feedback import FeedbackRead, FeedbackRequest, FeedbackSubmit
from appraisal_manager.services import feedback_service

router = APIRouter(prefix="/feedback")


@router.post("/", response_model=FeedbackRead, status_code=status.HTTP_201_CREATED)
def request_feedback(payload: FeedbackRequest, db: Session = Depends(get_db)):
    return feedback_service.request_feedback(db, payload)


@router.get("/appraisal/{appraisal_id}", response_model=List[FeedbackRead])
def list_feedback(appraisal_id: str, db: Session = Depends(get_db)):
    return feedback_service.list_feedback(db, appraisal_id)


@router.post("/{feedback_id}/submit", response_model=FeedbackRead)
def submit_feedback(feedback_id: str, payload: FeedbackSubmit, db: Session = Depends(get_db)):
    return feedback_service.submit_feedback(db, feedback_id, payload)


@router.delete("/{feedback_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_feedback(feedback_id: str, db: Session = Depends(get_db)):
    feedback_service.delete_feedback(db, feedback_id)
