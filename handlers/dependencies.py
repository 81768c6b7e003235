"""
handlers/dependencies.py
------------------------
FastAPI dependencies that hand each request its collaborators.
The Database lives on ``app.state``; repositories and services are
cheap and built per request on top of it.
"""

from fastapi import Depends, Request

from db.connection import Database
from repositories.subscription_repo import SubscriptionRepository
from services.subscription_service import SubscriptionService


def get_database(request: Request) -> Database:
    return request.app.state.database


def get_subscription_service(database: Database = Depends(get_database)) -> SubscriptionService:
    return SubscriptionService(SubscriptionRepository(database))
