"""
Directory records consumed by the manager resolver.
Users carry an optional direct manager; team membership rows are the fallback source.
"""
import uuid
from sqlalchemy import Column, String, DateTime, Boolean
from sqlalchemy.sql import func
from appraisal_manager.database import Base


class User(Base):
    __tablename__ = "users"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    email = Column(String, unique=True, index=True, nullable=False)
    full_name = Column(String, nullable=True)  # Added for display purposes
    department = Column(String, nullable=True)
    manager_id = Column(String(36), nullable=True, index=True)

    is_active = Column(Boolean, default=True, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    def __repr__(self):
        return f"<User {self.email}>"

    @property
    def display_name(self) -> str:
        return self.full_name or self.email


class TeamMember(Base):
    __tablename__ = "team_members"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    user_id = Column(String(36), nullable=False, index=True)
    manager = Column(String(36), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
