import enum
import uuid
from sqlalchemy import Column, Integer, String, Date, Text, DateTime
from sqlalchemy.sql import func
from appraisal_manager.database import Base


class CycleStatus(str, enum.Enum):
    DRAFT = "draft"
    ACTIVE = "active"
    COMPLETED = "completed"
    ARCHIVED = "archived"


# Manual progression; archived has no successor
CYCLE_PROGRESSION = {
    CycleStatus.DRAFT: CycleStatus.ACTIVE,
    CycleStatus.ACTIVE: CycleStatus.COMPLETED,
    CycleStatus.COMPLETED: CycleStatus.ARCHIVED,
}


class AppraisalCycle(Base):
    __tablename__ = "appraisal_cycles"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    name = Column(String, nullable=False)
    year = Column(Integer, nullable=False, index=True)
    start_date = Column(Date, nullable=True)
    end_date = Column(Date, nullable=True)
    status = Column(String, default=CycleStatus.DRAFT.value, nullable=False)
    description = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    def __repr__(self):
        return f"<AppraisalCycle {self.name} ({self.status})>"
