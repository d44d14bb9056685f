from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from appraisal_manager.core.schemas import ApiResponse
from appraisal_manager.database import get_db
from appraisal_manager.services.appraisal_workflow import recalculate_all_ratings
from appraisal_manager.services.repair import fix_missing_managers

router = APIRouter(prefix="/maintenance")


@router.post("/fix-managers")
def fix_managers(db: Session = Depends(get_db)):
    """Re-resolve managers on appraisals with a missing or self-assigned manager."""
    result = fix_missing_managers(db)
    return ApiResponse.ok(result.model_dump()).to_dict()


@router.post("/recalculate-ratings")
def recalculate_ratings(db: Session = Depends(get_db)):
    result = recalculate_all_ratings(db)
    return ApiResponse.ok(result.model_dump()).to_dict()
