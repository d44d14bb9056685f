from datetime import datetime
from typing import Annotated, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

from appraisal_manager.core.schemas import utcnow


class NumericAnswer(BaseModel):
    kind: Literal["numeric"] = "numeric"
    value: int = Field(ge=1, le=5)


class TextAnswer(BaseModel):
    kind: Literal["text"] = "text"
    value: str


Answer = Annotated[Union[NumericAnswer, TextAnswer], Field(discriminator="kind")]


class QuestionResponse(BaseModel):
    question_id: str
    answer: Answer
    comments: Optional[str] = None

    @field_validator("answer", mode="before")
    @classmethod
    def tag_raw_answer(cls, value):
        """Accept bare values from clients and tag them.

        Numbers become numeric answers; strings and yes/no booleans become text.
        """
        if isinstance(value, bool):
            return {"kind": "text", "value": "yes" if value else "no"}
        if isinstance(value, (int, float)):
            return {"kind": "numeric", "value": value}
        if isinstance(value, str):
            return {"kind": "text", "value": value}
        return value

    @property
    def numeric_value(self) -> Optional[int]:
        if isinstance(self.answer, NumericAnswer):
            return self.answer.value
        return None


class AppraisalResponse(BaseModel):
    """One submitted review (self, manager or hr)."""
    responses: List[QuestionResponse] = []
    overall_comments: Optional[str] = None
    submitted_by: Optional[str] = None
    submitted_at: datetime = Field(default_factory=utcnow)


class ReviewSubmission(BaseModel):
    responses: List[QuestionResponse]
    overall_comments: Optional[str] = None


class AppraisalSubmissionRead(BaseModel):
    id: str
    appraisal_id: str
    stage: str
    payload: AppraisalResponse
    submitted_by: Optional[str] = None
    submitted_at: datetime

    model_config = ConfigDict(from_attributes=True)
