import enum
import uuid
from sqlalchemy import Column, String, DateTime, JSON, ForeignKey
from sqlalchemy.sql import func
from appraisal_manager.database import Base


class FeedbackRelationship(str, enum.Enum):
    PEER = "peer"
    SUBORDINATE = "subordinate"
    CUSTOMER = "customer"
    OTHER = "other"


class FeedbackStatus(str, enum.Enum):
    PENDING = "pending"
    COMPLETED = "completed"


class Feedback360(Base):
    __tablename__ = "feedback_360"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    appraisal_id = Column(String(36), ForeignKey("appraisals.id", ondelete="CASCADE"), nullable=False, index=True)
    reviewee_id = Column(String(36), nullable=False, index=True)
    reviewer_id = Column(String(36), nullable=False, index=True)
    relationship = Column(String(20), default=FeedbackRelationship.PEER.value, nullable=False)
    status = Column(String(20), default=FeedbackStatus.PENDING.value, nullable=False)
    responses = Column(JSON, default=list, nullable=False)
    submitted_at = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
