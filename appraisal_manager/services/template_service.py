import logging
from typing import List

from sqlalchemy.orm import Session

from appraisal_manager.core.exceptions import DomainValidationError, InvalidTransitionError, NotFoundError
from appraisal_manager.models.appraisal import Appraisal
from appraisal_manager.models.appraisal_template import AppraisalTemplate
from appraisal_manager.schemas.template import TemplateCreate, TemplateSection, TemplateUpdate

logger = logging.getLogger(__name__)

TOTAL_SECTION_WEIGHT = 100


def validate_sections(sections: List[TemplateSection]) -> None:
    """Section weights must add up to 100%. Checked before anything is persisted."""
    if not sections:
        raise DomainValidationError("A template needs at least one section")
    total = sum(section.weight for section in sections)
    if total != TOTAL_SECTION_WEIGHT:
        raise DomainValidationError(
            "Section weights must add up to 100%",
            details={"total_weight": total},
        )


def get_template(db: Session, template_id: str) -> AppraisalTemplate:
    template = db.get(AppraisalTemplate, template_id)
    if not template:
        raise NotFoundError("AppraisalTemplate", template_id)
    return template


def list_templates(db: Session) -> List[AppraisalTemplate]:
    return db.query(AppraisalTemplate).order_by(AppraisalTemplate.created_at.desc()).all()


def create_template(db: Session, payload: TemplateCreate) -> AppraisalTemplate:
    validate_sections(payload.sections)
    template = AppraisalTemplate(
        name=payload.name,
        description=payload.description,
        review_type=payload.review_type.value,
        is_default=payload.is_default,
        sections=[section.model_dump(mode="json") for section in payload.sections],
    )
    db.add(template)
    try:
        db.commit()
    except Exception:
        db.rollback()
        raise
    db.refresh(template)
    logger.info(f"Created appraisal template {template.id} ({template.name})")
    return template


def update_template(db: Session, template_id: str, payload: TemplateUpdate) -> AppraisalTemplate:
    template = get_template(db, template_id)
    changes = payload.model_dump(exclude_unset=True)
    if "sections" in changes:
        validate_sections(payload.sections or [])
        template.sections = [section.model_dump(mode="json") for section in payload.sections]
        changes.pop("sections")
    if changes.get("review_type") is not None:
        changes["review_type"] = payload.review_type.value
    for field, value in changes.items():
        setattr(template, field, value)
    try:
        db.commit()
    except Exception:
        db.rollback()
        raise
    db.refresh(template)
    return template


def delete_template(db: Session, template_id: str) -> None:
    template = get_template(db, template_id)
    in_use = db.query(Appraisal).filter(Appraisal.template_id == template.id).count()
    if in_use:
        raise InvalidTransitionError(
            "Cannot delete a template that appraisals were created from",
            details={"appraisals": in_use},
        )
    db.delete(template)
    try:
        db.commit()
    except Exception:
        db.rollback()
        raise
