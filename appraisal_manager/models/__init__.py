# Models package
# Importing modules here ensures they are registered with SQLAlchemy Base
from . import (
    user, notification, objective,
    appraisal_cycle, appraisal_template, appraisal, appraisal_submission,
    feedback_360,
)

# Explicit class exports for cleaner imports
from .user import User, TeamMember
from .notification import Notification
from .objective import Objective
from .appraisal_cycle import AppraisalCycle, CycleStatus
from .appraisal_template import AppraisalTemplate, ReviewType
from .appraisal import Appraisal, AppraisalStatus, ReviewStage
from .appraisal_submission import AppraisalSubmission
from .feedback_360 import Feedback360, FeedbackRelationship, FeedbackStatus

__all__ = [
    "User",
    "TeamMember",
    "Notification",
    "Objective",
    "AppraisalCycle",
    "CycleStatus",
    "AppraisalTemplate",
    "ReviewType",
    "Appraisal",
    "AppraisalStatus",
    "ReviewStage",
    "AppraisalSubmission",
    "Feedback360",
    "FeedbackRelationship",
    "FeedbackStatus",
]
