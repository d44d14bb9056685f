import enum
import uuid
from sqlalchemy import Column, String, Float, Text, DateTime, JSON, ForeignKey, UniqueConstraint
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from appraisal_manager.database import Base


class AppraisalStatus(str, enum.Enum):
    DRAFT = "draft"
    SELF_REVIEW = "self-review"
    MANAGER_REVIEW = "manager-review"
    HR_REVIEW = "hr-review"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


# Enum members hash by name, so look up with AppraisalStatus(value), not the raw string
TERMINAL_STATUSES = frozenset({AppraisalStatus.COMPLETED, AppraisalStatus.CANCELLED})
IN_PROGRESS_STATUSES = frozenset({
    AppraisalStatus.SELF_REVIEW,
    AppraisalStatus.MANAGER_REVIEW,
    AppraisalStatus.HR_REVIEW,
})


class ReviewStage(str, enum.Enum):
    SELF = "self"
    MANAGER = "manager"
    HR = "hr"


class Appraisal(Base):
    __tablename__ = "appraisals"
    __table_args__ = (
        UniqueConstraint("cycle_id", "employee_id", name="uq_appraisal_cycle_employee"),
    )

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    cycle_id = Column(String(36), ForeignKey("appraisal_cycles.id"), nullable=False, index=True)
    employee_id = Column(String(36), nullable=False, index=True)
    manager_id = Column(String(36), nullable=True, index=True)
    template_id = Column(String(36), ForeignKey("appraisal_templates.id"), nullable=False)
    status = Column(String, default=AppraisalStatus.DRAFT.value, nullable=False, index=True)

    goals = Column(JSON, default=list, nullable=False)
    competencies = Column(JSON, default=list, nullable=False)

    # Review payloads, one per stage; None until submitted
    self_review = Column(JSON, nullable=True)
    manager_review = Column(JSON, nullable=True)
    hr_review = Column(JSON, nullable=True)

    overall_rating = Column(Float, nullable=True)
    comments = Column(Text, nullable=True)
    completed_at = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    cycle = relationship("AppraisalCycle")
    template = relationship("AppraisalTemplate")
    submissions = relationship(
        "AppraisalSubmission",
        back_populates="appraisal",
        cascade="all, delete-orphan",
        order_by="AppraisalSubmission.submitted_at",
    )

    def __repr__(self):
        return f"<Appraisal {self.id} employee={self.employee_id} ({self.status})>"

    def review_for(self, stage: ReviewStage):
        return getattr(self, f"{ReviewStage(stage).value}_review")

    @property
    def has_any_review(self) -> bool:
        return bool(self.self_review or self.manager_review or self.hr_review)
