import logging
from typing import List

from sqlalchemy.orm import Session

from appraisal_manager.core.exceptions import InvalidTransitionError, NotFoundError
from appraisal_manager.models.appraisal import Appraisal
from appraisal_manager.models.appraisal_cycle import AppraisalCycle, CycleStatus, CYCLE_PROGRESSION
from appraisal_manager.schemas.cycle import CycleCreate, CycleUpdate

logger = logging.getLogger(__name__)


def get_cycle(db: Session, cycle_id: str) -> AppraisalCycle:
    cycle = db.get(AppraisalCycle, cycle_id)
    if not cycle:
        raise NotFoundError("AppraisalCycle", cycle_id)
    return cycle


def list_cycles(db: Session) -> List[AppraisalCycle]:
    return (
        db.query(AppraisalCycle)
        .order_by(AppraisalCycle.year.desc(), AppraisalCycle.created_at.desc())
        .all()
    )


def create_cycle(db: Session, payload: CycleCreate) -> AppraisalCycle:
    cycle = AppraisalCycle(
        name=payload.name,
        year=payload.year,
        start_date=payload.start_date,
        end_date=payload.end_date,
        status=payload.status.value,
        description=payload.description,
    )
    db.add(cycle)
    try:
        db.commit()
    except Exception:
        db.rollback()
        raise
    db.refresh(cycle)
    logger.info(f"Created appraisal cycle {cycle.id} ({cycle.name})")
    return cycle


def update_cycle(db: Session, cycle_id: str, payload: CycleUpdate) -> AppraisalCycle:
    """Edit descriptive fields. Status only moves through advance_cycle."""
    cycle = get_cycle(db, cycle_id)
    for field, value in payload.model_dump(exclude_unset=True).items():
        setattr(cycle, field, value)
    try:
        db.commit()
    except Exception:
        db.rollback()
        raise
    db.refresh(cycle)
    return cycle


def advance_cycle(db: Session, cycle_id: str) -> AppraisalCycle:
    """Move a cycle one step along draft -> active -> completed -> archived."""
    cycle = get_cycle(db, cycle_id)
    current = CycleStatus(cycle.status)
    successor = CYCLE_PROGRESSION.get(current)
    if successor is None:
        raise InvalidTransitionError(
            f"Cycle is {current.value} and cannot advance further",
            details={"status": current.value},
        )
    cycle.status = successor.value
    try:
        db.commit()
    except Exception:
        db.rollback()
        raise
    db.refresh(cycle)
    logger.info(f"Cycle {cycle.id} moved {current.value} -> {successor.value}")
    return cycle


def delete_cycle(db: Session, cycle_id: str) -> None:
    cycle = get_cycle(db, cycle_id)
    in_use = db.query(Appraisal).filter(Appraisal.cycle_id == cycle.id).count()
    if in_use:
        raise InvalidTransitionError(
            "Cannot delete a cycle that still has appraisals",
            details={"appraisals": in_use},
        )
    db.delete(cycle)
    try:
        db.commit()
    except Exception:
        db.rollback()
        raise
