import uuid
from sqlalchemy import Column, String, DateTime, JSON, ForeignKey
from sqlalchemy.orm import relationship
from appraisal_manager.database import Base


class AppraisalSubmission(Base):
    """Append-only record of every submitted review, written in the same
    transaction as the appraisal status change."""
    __tablename__ = "appraisal_submissions"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    appraisal_id = Column(String(36), ForeignKey("appraisals.id", ondelete="CASCADE"), nullable=False, index=True)
    stage = Column(String(20), nullable=False)  # self, manager, hr
    payload = Column(JSON, nullable=False)
    submitted_by = Column(String(36), nullable=True)
    submitted_at = Column(DateTime(timezone=True), nullable=False)

    appraisal = relationship("Appraisal", back_populates="submissions")
