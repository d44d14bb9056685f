from typing import List

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from appraisal_manager.database import get_db
from appraisal_manager.schemas.template import TemplateCreate, TemplateRead, TemplateUpdate
from appraisal_manager.services import template_service

router = APIRouter(prefix="/templates")


@router.get("/", response_model=List[TemplateRead])
def list_templates(db: Session = Depends(get_db)):
    return template_service.list_templates(db)


@router.post("/", response_model=TemplateRead, status_code=status.HTTP_201_CREATED)
def create_template(payload: TemplateCreate, db: Session = Depends(get_db)):
    return template_service.create_template(db, payload)


@router.get("/{template_id}", response_model=TemplateRead)
def get_template(template_id: str, db: Session = Depends(get_db)):
    return template_service.get_template(db, template_id)


@router.patch("/{template_id}", response_model=TemplateRead)
def update_template(template_id: str, payload: TemplateUpdate, db: Session = Depends(get_db)):
    return template_service.update_template(db, template_id, payload)


@router.delete("/{template_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_template(template_id: str, db: Session = Depends(get_db)):
    template_service.delete_template(db, template_id)
