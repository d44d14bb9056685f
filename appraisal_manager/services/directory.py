"""
Identity lookups consumed by the manager resolver and the notification texts.
"""
from typing import List, Optional

from sqlalchemy.orm import Session

from appraisal_manager.models.objective import Objective
from appraisal_manager.models.user import TeamMember, User


def get_user(db: Session, user_id: str) -> Optional[User]:
    if not user_id:
        return None
    return db.get(User, user_id)


def get_team_record(db: Session, user_id: str) -> Optional[TeamMember]:
    return (
        db.query(TeamMember)
        .filter(TeamMember.user_id == user_id)
        .order_by(TeamMember.created_at)
        .first()
    )


def display_name(user: Optional[User], fallback: str) -> str:
    if user is None:
        return fallback
    return user.display_name or fallback


def list_objectives(db: Session) -> List[Objective]:
    return db.query(Objective).order_by(Objective.created_at).all()
