from fastapi import APIRouter
from appraisal_manager.routers import appraisals, cycles, feedback, maintenance, templates

# Centralized API router hub
# Routers are aggregated here and main.py only imports this single hub.
api_router = APIRouter()

api_router.include_router(cycles.router, tags=["Appraisal Cycles"])
api_router.include_router(templates.router, tags=["Appraisal Templates"])
api_router.include_router(appraisals.router, tags=["Appraisals"])
api_router.include_router(feedback.router, tags=["360 Feedback"])
api_router.include_router(maintenance.router, tags=["Maintenance"])
