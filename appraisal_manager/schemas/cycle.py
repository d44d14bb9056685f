from datetime import date, datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator

from appraisal_manager.models.appraisal_cycle import CycleStatus


class CycleCreate(BaseModel):
    name: str
    year: int
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    status: CycleStatus = CycleStatus.DRAFT
    description: Optional[str] = None

    @model_validator(mode="after")
    def check_dates(self):
        if self.start_date and self.end_date and self.end_date < self.start_date:
            raise ValueError("end_date must not be before start_date")
        return self


class CycleUpdate(BaseModel):
    name: Optional[str] = None
    year: Optional[int] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    description: Optional[str] = None


class CycleRead(BaseModel):
    id: str
    name: str
    year: int
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    status: CycleStatus
    description: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class ProvisionRequest(BaseModel):
    employee_ids: List[str] = Field(min_length=1)
    template_id: str
    import_objectives: bool = False
