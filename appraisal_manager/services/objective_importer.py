import logging
from typing import List

from sqlalchemy.orm import Session

from appraisal_manager.models.objective import Objective
from appraisal_manager.schemas.appraisal import AppraisalGoal, GoalStatus
from appraisal_manager.services.directory import list_objectives

logger = logging.getLogger(__name__)

# (minimum progress, rating), highest band first
RATING_BANDS = ((90, 5), (75, 4), (60, 3), (40, 2))


def rating_for_progress(progress: float) -> int:
    for threshold, rating in RATING_BANDS:
        if progress >= threshold:
            return rating
    return 1


def status_for_progress(progress: float) -> GoalStatus:
    if progress >= 90:
        return GoalStatus.ACHIEVED
    if progress >= 60:
        return GoalStatus.PARTIALLY_ACHIEVED
    return GoalStatus.NOT_ACHIEVED


def _format_progress(progress: float) -> str:
    return f"{progress:g}"


def objective_to_goal(objective: Objective) -> AppraisalGoal:
    progress = objective.progress or 0
    shown = _format_progress(progress)
    return AppraisalGoal(
        id=objective.id,
        title=objective.title,
        description=objective.description,
        target=f"{shown}% completion",
        actual=f"{shown}%",
        rating=rating_for_progress(progress),
        status=status_for_progress(progress),
        comments=f"Status: {objective.status}, Progress: {shown}%",
    )


def import_goals(db: Session, employee_id: str) -> List[AppraisalGoal]:
    """
    Seed appraisal goals from the objectives an employee contributes to,
    plus every individual-level objective.
    """
    goals = []
    for objective in list_objectives(db):
        contributors = objective.contributors or []
        if employee_id in contributors or objective.level == "individual":
            goals.append(objective_to_goal(objective))
    logger.info(f"Imported {len(goals)} goals from objectives for employee {employee_id}")
    return goals
