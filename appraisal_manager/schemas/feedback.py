from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict

from appraisal_manager.models.feedback_360 import FeedbackRelationship, FeedbackStatus
from appraisal_manager.schemas.review import QuestionResponse


class FeedbackRequest(BaseModel):
    appraisal_id: str
    reviewer_id: str
    relationship: FeedbackRelationship = FeedbackRelationship.PEER


class FeedbackSubmit(BaseModel):
    responses: List[QuestionResponse]


class FeedbackRead(BaseModel):
    id: str
    appraisal_id: str
    reviewee_id: str
    reviewer_id: str
    relationship: FeedbackRelationship
    status: FeedbackStatus
    responses: List[QuestionResponse] = []
    submitted_at: Optional[datetime] = None
    created_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)
