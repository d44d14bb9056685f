"""
Manager resolution shared by cycle provisioning and the missing-manager repair.

Resolution order, first match wins:
1. the employee record's own ``manager_id``
2. the team membership record's ``manager``
3. the employee themself (self-managed)
"""
from typing import Optional

from sqlalchemy.orm import Session

from appraisal_manager.models.user import TeamMember, User
from appraisal_manager.services.directory import get_team_record, get_user


def _present(value: Optional[str]) -> bool:
    return isinstance(value, str) and value.strip() != ""


def resolve_manager_id(
    employee_id: str,
    employee: Optional[User] = None,
    team_record: Optional[TeamMember] = None,
) -> str:
    """Pure resolution over already-fetched records. Never raises for missing data."""
    if employee is None:
        return employee_id
    if _present(employee.manager_id):
        return employee.manager_id
    if team_record is not None and _present(team_record.manager):
        return team_record.manager
    return employee_id


class ManagerResolver:
    """Resolves managers against the directory tables.

    Lookup failures (store errors) propagate so batch callers can count them.
    """

    def __init__(self, db: Session):
        self.db = db

    def resolve(self, employee_id: str) -> str:
        employee = get_user(self.db, employee_id)
        team_record = None
        if employee is not None and not _present(employee.manager_id):
            team_record = get_team_record(self.db, employee_id)
        return resolve_manager_id(employee_id, employee, team_record)


def needs_manager_repair(manager_id: Optional[str], employee_id: str) -> bool:
    """Known bad-assignment signatures: empty, the literal "unknown", or self."""
    return (
        not _present(manager_id)
        or manager_id == "unknown"
        or manager_id == employee_id
    )
