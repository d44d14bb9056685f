"""
Analytics Aggregator

Per-cycle rollups computed on demand from the appraisal rows. Nothing here is
persisted.
"""
import logging
import math
from collections import OrderedDict
from typing import Dict, List, Optional

from sqlalchemy.orm import Session

from appraisal_manager.core.config import settings
from appraisal_manager.models.appraisal import Appraisal, AppraisalStatus, IN_PROGRESS_STATUSES
from appraisal_manager.models.user import User
from appraisal_manager.schemas.analytics import (
    AppraisalAnalytics,
    CompetencyGap,
    CycleSummary,
    DepartmentStats,
)
from appraisal_manager.services.cycle_service import get_cycle

logger = logging.getLogger(__name__)

UNKNOWN_DEPARTMENT = "Unknown"


def _valid_rating(value) -> Optional[float]:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    if math.isnan(value) or math.isinf(value):
        return None
    return float(value)


def rating_distribution(ratings: List[float]) -> Dict[str, int]:
    distribution = {str(bucket): 0 for bucket in range(1, 6)}
    for rating in ratings:
        bucket = min(max(math.floor(rating), 1), 5)
        distribution[str(bucket)] += 1
    return distribution


def status_breakdown(appraisals: List[Appraisal]) -> Dict[str, int]:
    breakdown = {status.value: 0 for status in AppraisalStatus}
    for appraisal in appraisals:
        if appraisal.status in breakdown:
            breakdown[appraisal.status] += 1
    return breakdown


def department_breakdown(rows) -> Dict[str, DepartmentStats]:
    """rows: (appraisal, department) pairs for completed appraisals."""
    totals: Dict[str, List[float]] = {}
    for appraisal, department in rows:
        key = department or UNKNOWN_DEPARTMENT
        count, rating_sum = totals.get(key, [0, 0.0])
        rating = _valid_rating(appraisal.overall_rating)
        totals[key] = [count + 1, rating_sum + (rating or 0.0)]
    return {
        department: DepartmentStats(count=count, average_rating=rating_sum / count if count else 0.0)
        for department, (count, rating_sum) in totals.items()
    }


def competency_gaps(appraisals: List[Appraisal], averaging: Optional[str] = None) -> List[CompetencyGap]:
    """
    Group competency ratings by name across the given appraisals.

    ``pairwise`` folds each new rating into a running (old + new) / 2, which
    weights later entries more heavily. ``mean`` is the arithmetic mean.
    """
    averaging = averaging or settings.analytics.competency_gap_averaging
    threshold = settings.analytics.improvement_threshold
    collected: "OrderedDict[str, List[float]]" = OrderedDict()
    for appraisal in appraisals:
        for competency in appraisal.competencies or []:
            if not isinstance(competency, dict):
                continue
            name = competency.get("name")
            rating = _valid_rating(competency.get("rating"))
            if not name or rating is None:
                continue
            collected.setdefault(name, []).append(rating)

    gaps = []
    for name, ratings in collected.items():
        if averaging == "mean":
            average = sum(ratings) / len(ratings)
        else:
            average = ratings[0]
            for rating in ratings[1:]:
                average = (average + rating) / 2
        gaps.append(CompetencyGap(
            competency=name,
            average_rating=average,
            improvement_needed=average < threshold,
        ))
    return gaps


def analyze_cycle(db: Session, cycle_id: str) -> AppraisalAnalytics:
    get_cycle(db, cycle_id)

    appraisals = (
        db.query(Appraisal)
        .filter(Appraisal.cycle_id == cycle_id)
        .order_by(Appraisal.created_at)
        .all()
    )
    completed = [a for a in appraisals if a.status == AppraisalStatus.COMPLETED.value]
    ratings = [r for r in (_valid_rating(a.overall_rating) for a in completed) if r is not None]

    department_rows = (
        db.query(Appraisal, User.department)
        .outerjoin(User, User.id == Appraisal.employee_id)
        .filter(
            Appraisal.cycle_id == cycle_id,
            Appraisal.status == AppraisalStatus.COMPLETED.value,
        )
        .all()
    )

    return AppraisalAnalytics(
        cycle_id=cycle_id,
        total_appraisals=len(appraisals),
        completed_appraisals=len(completed),
        average_rating=sum(ratings) / len(ratings) if ratings else 0.0,
        rating_distribution=rating_distribution(ratings),
        status_breakdown=status_breakdown(appraisals),
        department_breakdown=department_breakdown(department_rows),
        competency_gaps=competency_gaps(completed),
    )


def cycle_summary(db: Session, cycle_id: str) -> CycleSummary:
    """Dashboard counters for a cycle."""
    cycle = get_cycle(db, cycle_id)
    appraisals = db.query(Appraisal).filter(Appraisal.cycle_id == cycle_id).all()

    summary = CycleSummary(cycle_id=cycle.id, cycle_name=cycle.name, total=len(appraisals))
    rated = []
    for appraisal in appraisals:
        status = AppraisalStatus(appraisal.status)
        if status == AppraisalStatus.COMPLETED:
            summary.completed += 1
            rating = _valid_rating(appraisal.overall_rating)
            if rating:
                rated.append(rating)
        elif status in IN_PROGRESS_STATUSES:
            summary.in_progress += 1
        elif status == AppraisalStatus.DRAFT:
            summary.pending += 1
        elif status == AppraisalStatus.CANCELLED:
            summary.cancelled += 1

    if summary.total:
        summary.completion_rate = round(summary.completed / summary.total * 100, 1)
    if rated:
        summary.average_rating = sum(rated) / len(rated)
    summary.rated_count = len(rated)
    return summary
