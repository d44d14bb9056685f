"""
Cycle Provisioner

Creates one draft appraisal per employee for a cycle. Employees are handled
one at a time and each appraisal is committed on its own, so a failure for
one employee never undoes the others.
"""
import logging
from typing import List

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from appraisal_manager.models.appraisal import Appraisal, AppraisalStatus
from appraisal_manager.models.appraisal_cycle import AppraisalCycle
from appraisal_manager.schemas.appraisal import AppraisalRead
from appraisal_manager.schemas.batch import ProvisionResult
from appraisal_manager.services.cycle_service import get_cycle
from appraisal_manager.services.directory import display_name, get_user
from appraisal_manager.services.manager_resolver import ManagerResolver
from appraisal_manager.services.notification import NotificationService
from appraisal_manager.services.objective_importer import import_goals
from appraisal_manager.services.template_service import get_template

logger = logging.getLogger(__name__)


def _already_provisioned(db: Session, cycle_id: str, employee_id: str) -> bool:
    return (
        db.query(Appraisal.id)
        .filter(Appraisal.cycle_id == cycle_id, Appraisal.employee_id == employee_id)
        .first()
        is not None
    )


def _initial_goals(db: Session, employee_id: str) -> list:
    try:
        return [goal.model_dump(mode="json") for goal in import_goals(db, employee_id)]
    except Exception as e:
        logger.warning(
            f"Objective import failed for employee {employee_id}, starting with no goals: {e}",
            exc_info=True,
        )
        return []


def _notify_created(db: Session, cycle: AppraisalCycle, appraisal: Appraisal) -> None:
    employee = get_user(db, appraisal.employee_id)
    if employee is None:
        return
    cycle_name = cycle.name or "the current cycle"
    NotificationService.notify_user(
        db,
        appraisal.employee_id,
        "New Appraisal Created",
        f"A new appraisal has been created for you for {cycle_name}. "
        "Please complete your self-review when ready.",
    )
    if appraisal.manager_id and appraisal.manager_id != appraisal.employee_id:
        NotificationService.notify_user(
            db,
            appraisal.manager_id,
            "New Appraisal to Review",
            f"A new appraisal has been created for {display_name(employee, appraisal.employee_id)} "
            f"for {cycle_name}. Please review when the employee completes their self-review.",
        )


def provision_cycle(
    db: Session,
    cycle_id: str,
    employee_ids: List[str],
    template_id: str,
    import_objectives: bool = False,
) -> ProvisionResult:
    """
    Raises NotFoundError before any write when the cycle or template is missing.
    Per-employee failures are rolled back and reported in ``failed``; employees
    that already have an appraisal in the cycle are reported in ``skipped``.
    """
    cycle = get_cycle(db, cycle_id)
    get_template(db, template_id)
    resolver = ManagerResolver(db)
    result = ProvisionResult()

    for employee_id in employee_ids:
        try:
            if _already_provisioned(db, cycle_id, employee_id):
                logger.info(f"Employee {employee_id} already has an appraisal in cycle {cycle_id}, skipping")
                result.skipped.append(employee_id)
                continue

            appraisal = Appraisal(
                cycle_id=cycle_id,
                employee_id=employee_id,
                manager_id=resolver.resolve(employee_id),
                template_id=template_id,
                status=AppraisalStatus.DRAFT.value,
                goals=_initial_goals(db, employee_id) if import_objectives else [],
                competencies=[],
            )
            db.add(appraisal)
            db.commit()
            db.refresh(appraisal)
        except IntegrityError:
            # Lost a race against a concurrent provisioning of the same pair
            db.rollback()
            logger.info(f"Employee {employee_id} was provisioned concurrently in cycle {cycle_id}, skipping")
            result.skipped.append(employee_id)
            continue
        except Exception as e:
            db.rollback()
            logger.error(f"Failed to create appraisal for employee {employee_id}: {e}", exc_info=True)
            result.failed.append(employee_id)
            continue

        result.created.append(AppraisalRead.model_validate(appraisal))
        try:
            _notify_created(db, cycle, appraisal)
        except Exception as e:
            logger.warning(f"Could not send provisioning notifications for {employee_id}: {e}", exc_info=True)

    logger.info(
        f"Provisioned cycle {cycle_id}: {len(result.created)} created, "
        f"{len(result.skipped)} skipped, {len(result.failed)} failed"
    )
    return result
