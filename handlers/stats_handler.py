"""
handlers/stats_handler.py
-------------------------
Dashboard statistics: spend per category and bills due this week.
"""

from fastapi import APIRouter, Depends

from handlers.dependencies import get_subscription_service
from services.subscription_service import SubscriptionService

router = APIRouter(prefix="/api", tags=["Stats"])


@router.get("/stats")
def get_stats(service: SubscriptionService = Depends(get_subscription_service)) -> dict:
    return service.get_stats()
