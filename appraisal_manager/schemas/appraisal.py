from datetime import datetime
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from appraisal_manager.models.appraisal import AppraisalStatus
from appraisal_manager.schemas.review import AppraisalResponse


class GoalStatus(str, Enum):
    ACHIEVED = "achieved"
    PARTIALLY_ACHIEVED = "partially-achieved"
    NOT_ACHIEVED = "not-achieved"


class CompetencyLevel(str, Enum):
    BEGINNER = "beginner"
    INTERMEDIATE = "intermediate"
    ADVANCED = "advanced"
    EXPERT = "expert"


class AppraisalGoal(BaseModel):
    id: str
    title: str
    description: Optional[str] = None
    target: Optional[str] = None
    actual: Optional[str] = None
    rating: int = Field(ge=1, le=5)
    status: GoalStatus
    comments: Optional[str] = None


class AppraisalCompetency(BaseModel):
    id: str
    name: str
    description: Optional[str] = None
    level: CompetencyLevel
    rating: int = Field(ge=1, le=5)
    evidence: Optional[str] = None
    development_needs: Optional[str] = None


class AppraisalRead(BaseModel):
    id: str
    cycle_id: str
    employee_id: str
    manager_id: Optional[str] = None
    template_id: str
    status: AppraisalStatus
    goals: List[AppraisalGoal] = []
    competencies: List[AppraisalCompetency] = []
    self_review: Optional[AppraisalResponse] = None
    manager_review: Optional[AppraisalResponse] = None
    hr_review: Optional[AppraisalResponse] = None
    overall_rating: Optional[float] = None
    comments: Optional[str] = None
    completed_at: Optional[datetime] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class GoalsUpdate(BaseModel):
    goals: List[AppraisalGoal]


class CompetenciesUpdate(BaseModel):
    competencies: List[AppraisalCompetency]


class CommentsUpdate(BaseModel):
    comments: Optional[str] = None


class ReviewEligibility(BaseModel):
    appraisal_id: str
    requester_id: str
    can_start_self_review: bool
    can_start_manager_review: bool
    can_start_hr_review: bool
