from typing import Dict, List

from pydantic import BaseModel


class DepartmentStats(BaseModel):
    count: int = 0
    average_rating: float = 0.0


class CompetencyGap(BaseModel):
    competency: str
    average_rating: float
    improvement_needed: bool


class AppraisalAnalytics(BaseModel):
    """Derived per-cycle rollup. Recomputed on demand, never persisted."""
    cycle_id: str
    total_appraisals: int = 0
    completed_appraisals: int = 0
    average_rating: float = 0.0
    rating_distribution: Dict[str, int] = {}
    status_breakdown: Dict[str, int] = {}
    department_breakdown: Dict[str, DepartmentStats] = {}
    competency_gaps: List[CompetencyGap] = []


class CycleSummary(BaseModel):
    cycle_id: str
    cycle_name: str
    total: int = 0
    completed: int = 0
    in_progress: int = 0
    pending: int = 0
    cancelled: int = 0
    completion_rate: float = 0.0  # percentage of appraisals completed
    average_rating: float = 0.0
    rated_count: int = 0
