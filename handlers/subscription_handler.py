"""
handlers/subscription_handler.py
--------------------------------
CRUD routes for subscriptions. Each route parses the request,
delegates to SubscriptionService, and serializes the result.
No business logic lives here.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Response, status
from pydantic import BaseModel, ConfigDict, Field

from handlers.dependencies import get_subscription_service
from models.subscription import Subscription
from services.subscription_service import SubscriptionService
from utils.logger import get_logger

logger = get_logger(__name__)
router = APIRouter(prefix="/api/subscriptions", tags=["Subscriptions"])


class SubscriptionBody(BaseModel):
    """
    JSON body for create and update. Missing fields default to empty
    values so the service reports them as missing; any `id` is ignored.
    `cost` must be a JSON number: booleans and numeric strings are rejected.
    """
    model_config = ConfigDict(populate_by_name=True)

    name: str = ""
    category: str = ""
    cost: float = Field(0, strict=True)
    billing_cycle: str = Field("", alias="billingCycle")
    next_billing: str = Field("", alias="nextBilling")
    description: Optional[str] = ""

    def to_subscription(self) -> Subscription:
        return Subscription(
            name=self.name,
            category=self.category,
            cost=self.cost,
            billing_cycle=self.billing_cycle,
            next_billing=self.next_billing,
            description=self.description or "",
        )


@router.get("")
def list_subscriptions(service: SubscriptionService = Depends(get_subscription_service)) -> list[dict]:
    return [s.to_dict() for s in service.list_subscriptions()]


@router.post("", status_code=status.HTTP_201_CREATED)
def create_subscription(
    body: SubscriptionBody,
    service: SubscriptionService = Depends(get_subscription_service),
) -> dict:
    logger.debug(f"Received body: {body.model_dump(by_alias=True)}")
    saved = service.create_subscription(body.to_subscription())
    return saved.to_dict()


@router.get("/{subscription_id}")
def get_subscription(
    subscription_id: str,
    service: SubscriptionService = Depends(get_subscription_service),
) -> dict:
    return service.get_subscription(service.parse_id(subscription_id)).to_dict()


@router.put("/{subscription_id}")
def update_subscription(
    subscription_id: str,
    body: SubscriptionBody,
    service: SubscriptionService = Depends(get_subscription_service),
) -> dict:
    sid = service.parse_id(subscription_id)
    return service.update_subscription(sid, body.to_subscription()).to_dict()


@router.delete("/{subscription_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_subscription(
    subscription_id: str,
    service: SubscriptionService = Depends(get_subscription_service),
) -> Response:
    service.delete_subscription(service.parse_id(subscription_id))
    return Response(status_code=status.HTTP_204_NO_CONTENT)
