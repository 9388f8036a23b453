from fastapi import APIRouter, Depends
from praisewall.models.analytics import AnalyticsResponse, DashboardResponse
from praisewall.services import analytics as analytics_service
from praisewall.utils.auth import get_current_user
from praisewall.utils.helpers import serialize_docs

router = APIRouter(tags=["Analytics"])

@router.get("/analytics", response_model=AnalyticsResponse)
async def get_analytics(current_user: dict = Depends(get_current_user)):
    """Submission counts, average rating and per-form totals"""
    return await analytics_service.account_analytics(current_user["sub"])

@router.get("/dashboard", response_model=DashboardResponse)
async def get_dashboard(current_user: dict = Depends(get_current_user)):
    """Headline stats and the five most recent testimonials"""
    data = await analytics_service.dashboard(current_user["sub"])
    data["recent"] = serialize_docs(data["recent"])
    return data
