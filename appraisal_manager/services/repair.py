import logging

from sqlalchemy.orm import Session

from appraisal_manager.models.appraisal import Appraisal
from appraisal_manager.schemas.batch import RepairResult
from appraisal_manager.services.manager_resolver import ManagerResolver, needs_manager_repair

logger = logging.getLogger(__name__)


def fix_missing_managers(db: Session) -> RepairResult:
    """
    Re-resolve the manager of every appraisal with a blank, "unknown" or
    self-referencing manager_id. Rows are only rewritten when resolution
    yields a different id. Each fix is committed on its own.
    """
    result = RepairResult()
    resolver = ManagerResolver(db)
    candidates = [
        (a.id, a.employee_id, a.manager_id)
        for a in db.query(Appraisal).order_by(Appraisal.created_at).all()
    ]

    for appraisal_id, employee_id, manager_id in candidates:
        if not needs_manager_repair(manager_id, employee_id):
            continue
        try:
            resolved = resolver.resolve(employee_id)
            if resolved == manager_id:
                continue
            appraisal = db.get(Appraisal, appraisal_id)
            appraisal.manager_id = resolved
            db.commit()
            result.fixed += 1
            logger.info(f"Fixed appraisal {appraisal_id}: manager {manager_id!r} -> {resolved}")
        except Exception as e:
            db.rollback()
            result.errors += 1
            logger.error(f"Error fixing appraisal {appraisal_id}: {e}", exc_info=True)

    logger.info(f"Manager repair finished: {result.fixed} fixed, {result.errors} errors")
    return result
