import uuid
from sqlalchemy import Column, String, Float, Text, DateTime, JSON
from sqlalchemy.sql import func
from appraisal_manager.database import Base


class Objective(Base):
    """External objective (OKR) records; read-only input to the goal importer."""
    __tablename__ = "objectives"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    title = Column(String, nullable=False)
    description = Column(Text, nullable=True)
    level = Column(String(30), nullable=True)  # company, department, team, individual
    progress = Column(Float, default=0, nullable=False)  # percentage 0-100
    status = Column(String(30), nullable=True)
    contributors = Column(JSON, default=list, nullable=False)  # list of user ids
    created_at = Column(DateTime(timezone=True), server_default=func.now())
