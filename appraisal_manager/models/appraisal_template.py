import enum
import uuid
from sqlalchemy import Column, String, Text, Boolean, DateTime, JSON
from sqlalchemy.sql import func
from appraisal_manager.database import Base


class ReviewType(str, enum.Enum):
    SELF = "self"
    MANAGER = "manager"
    BOTH = "both"


class AppraisalTemplate(Base):
    __tablename__ = "appraisal_templates"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    name = Column(String, nullable=False)
    description = Column(Text, nullable=True)
    review_type = Column(String, default=ReviewType.BOTH.value, nullable=False)
    is_default = Column(Boolean, default=False, nullable=False)
    # Ordered list of sections, each {id, title, description, weight, questions: [...]}
    sections = Column(JSON, default=list, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    def __repr__(self):
        return f"<AppraisalTemplate {self.name} [{self.review_type}]>"
