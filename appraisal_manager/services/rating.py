"""
Overall rating aggregation.

The overall rating is the arithmetic mean of every numeric answer across the
supplied reviews. Text answers are ignored; no numeric answers yields 0.
"""
from typing import Iterable, List, Optional, Sequence

from appraisal_manager.models.appraisal import Appraisal, ReviewStage
from appraisal_manager.schemas.review import AppraisalResponse


def aggregate(responses: Iterable[Optional[AppraisalResponse]]) -> float:
    total = 0
    count = 0
    for response in responses:
        if response is None:
            continue
        for question_response in response.responses:
            value = question_response.numeric_value
            if value is not None:
                total += value
                count += 1
    return total / count if count > 0 else 0.0


def load_review(payload) -> Optional[AppraisalResponse]:
    if not payload:
        return None
    return AppraisalResponse.model_validate(payload)


def present_reviews(
    appraisal: Appraisal,
    stages: Sequence[ReviewStage] = (ReviewStage.SELF, ReviewStage.MANAGER, ReviewStage.HR),
) -> List[AppraisalResponse]:
    """Parsed reviews currently stored on the appraisal, in stage order."""
    reviews = []
    for stage in stages:
        review = load_review(appraisal.review_for(stage))
        if review is not None:
            reviews.append(review)
    return reviews
