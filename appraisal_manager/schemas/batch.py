from typing import List

from pydantic import BaseModel

from appraisal_manager.schemas.appraisal import AppraisalRead


class BatchResult(BaseModel):
    """Aggregate outcome of a maintenance batch. Items fail independently."""
    succeeded: int = 0
    failed: int = 0


class RepairResult(BaseModel):
    fixed: int = 0
    errors: int = 0


class ProvisionResult(BaseModel):
    created: List[AppraisalRead] = []
    skipped: List[str] = []  # employee ids already appraised in the cycle
    failed: List[str] = []  # employee ids whose appraisal could not be written

    @property
    def succeeded(self) -> int:
        return len(self.created)
