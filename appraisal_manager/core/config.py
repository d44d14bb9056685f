import os
import logging
from pydantic import BaseModel, Field
from typing import Literal
from dotenv import load_dotenv

load_dotenv()


def _env_flag(name: str, default: str = "false") -> bool:
    return os.getenv(name, default).lower() == "true"


class WorkflowSettings(BaseModel):
    # HR review is modelled but switched off in the product surface
    enable_hr_review: bool = Field(default_factory=lambda: _env_flag("ENABLE_HR_REVIEW"))
    # Self-only templates never receive an aggregated rating unless this is on
    rate_self_only_reviews: bool = Field(default_factory=lambda: _env_flag("RATE_SELF_ONLY_REVIEWS"))
    appraisal_link: str = Field(default_factory=lambda: os.getenv("APPRAISAL_LINK", "/appraisals"))


class AnalyticsSettings(BaseModel):
    # "pairwise" keeps the historical (old + new) / 2 folding, "mean" is a true average
    competency_gap_averaging: Literal["pairwise", "mean"] = Field(
        default_factory=lambda: os.getenv("COMPETENCY_GAP_AVERAGING", "pairwise")
    )
    improvement_threshold: float = 3.0


class Config(BaseModel):
    app_name: str = "Appraisal Manager"
    environment: str = os.getenv("APP_ENV", "development")
    api_prefix: str = "/api"

    # Database
    database_url: str = os.getenv("DATABASE_URL", "sqlite:///./appraisals.db")

    # Engine behaviour
    workflow: WorkflowSettings = WorkflowSettings()
    analytics: AnalyticsSettings = AnalyticsSettings()

    version: str = "1.0.0"
    build_id: str = os.getenv("BUILD_ID", "local")
    commit_hash: str = os.getenv("COMMIT_HASH", "HEAD")
    request_id_header: str = "X-Request-ID"
    requester_header: str = "X-User-Id"


settings = Config()

_logger = logging.getLogger(__name__)
if settings.environment != "development" and settings.database_url.startswith("sqlite:///./"):
    _logger.warning("Using the local SQLite file database outside development.")
