from typing import List

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from appraisal_manager.database import get_db
from appraisal_manager.schemas.analytics import AppraisalAnalytics, CycleSummary
from appraisal_manager.schemas.batch import ProvisionResult
from appraisal_manager.schemas.cycle import CycleCreate, CycleRead, CycleUpdate, ProvisionRequest
from appraisal_manager.services import analytics_service, cycle_provisioner, cycle_service

router = APIRouter(prefix="/cycles")


@router.get("/", response_model=List[CycleRead])
def list_cycles(db: Session = Depends(get_db)):
    return cycle_service.list_cycles(db)


@router.post("/", response_model=CycleRead, status_code=status.HTTP_201_CREATED)
def create_cycle(payload: CycleCreate, db: Session = Depends(get_db)):
    return cycle_service.create_cycle(db, payload)


@router.get("/{cycle_id}", response_model=CycleRead)
def get_cycle(cycle_id: str, db: Session = Depends(get_db)):
    return cycle_service.get_cycle(db, cycle_id)


@router.patch("/{cycle_id}", response_model=CycleRead)
def update_cycle(cycle_id: str, payload: CycleUpdate, db: Session = Depends(get_db)):
    return cycle_service.update_cycle(db, cycle_id, payload)


@router.delete("/{cycle_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_cycle(cycle_id: str, db: Session = Depends(get_db)):
    cycle_service.delete_cycle(db, cycle_id)


@router.post("/{cycle_id}/advance", response_model=CycleRead)
def advance_cycle(cycle_id: str, db: Session = Depends(get_db)):
    return cycle_service.advance_cycle(db, cycle_id)


@router.post("/{cycle_id}/provision", response_model=ProvisionResult)
def provision_cycle(cycle_id: str, payload: ProvisionRequest, db: Session = Depends(get_db)):
    """Create draft appraisals for the given employees."""
    return cycle_provisioner.provision_cycle(
        db,
        cycle_id,
        payload.employee_ids,
        payload.template_id,
        import_objectives=payload.import_objectives,
    )


@router.get("/{cycle_id}/analytics", response_model=AppraisalAnalytics)
def cycle_analytics(cycle_id: str, db: Session = Depends(get_db)):
    return analytics_service.analyze_cycle(db, cycle_id)


@router.get("/{cycle_id}/summary", response_model=CycleSummary)
def cycle_summary(cycle_id: str, db: Session = Depends(get_db)):
    return analytics_service.cycle_summary(db, cycle_id)
