from datetime import datetime
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from appraisal_manager.models.appraisal_template import ReviewType


class QuestionType(str, Enum):
    RATING = "rating"
    TEXT = "text"
    MULTIPLE_CHOICE = "multiple-choice"
    YES_NO = "yes-no"
    SCALE = "scale"


class Question(BaseModel):
    id: str
    text: str
    type: QuestionType = QuestionType.RATING
    required: bool = True
    options: Optional[List[str]] = None
    scale_min: Optional[int] = None
    scale_max: Optional[int] = None


class TemplateSection(BaseModel):
    id: str
    title: str
    description: Optional[str] = None
    weight: int = Field(ge=0, le=100)
    questions: List[Question] = []


class TemplateCreate(BaseModel):
    name: str
    description: Optional[str] = None
    review_type: ReviewType = ReviewType.BOTH
    is_default: bool = False
    sections: List[TemplateSection]


class TemplateUpdate(BaseModel):
    name: Optional[str] = None
    description: Optional[str] = None
    review_type: Optional[ReviewType] = None
    is_default: Optional[bool] = None
    sections: Optional[List[TemplateSection]] = None


class TemplateRead(BaseModel):
    id: str
    name: str
    description: Optional[str] = None
    review_type: ReviewType
    is_default: bool
    sections: List[TemplateSection]
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)
