"""
Push API endpoints.

Publishes the VAPID public key, manages browser subscriptions and sends
notifications to users.
"""

import logging
from functools import lru_cache
from typing import Optional

from fastapi import APIRouter, Depends, Header, HTTPException, Query, status
from fastapi.responses import JSONResponse

from cobrafacil.core.config import get_config
from cobrafacil.core.exceptions import InvalidSubscriptionError, VapidNotConfiguredError
from cobrafacil.push.models import (
    SendPushRequest,
    SendResult,
    SubscribeRequest,
    SubscriptionStatus,
    UnsubscribeRequest,
)
from cobrafacil.push.sender import PushSender
from cobrafacil.push.store import SubscriptionStore
from cobrafacil.push.subscriptions import SubscriptionService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/push", tags=["push"])


@lru_cache()
def get_subscription_store() -> SubscriptionStore:
    """Shared subscription store."""
    return SubscriptionStore(get_config().push.subscriptions_db)


def get_subscription_service(
    store: SubscriptionStore = Depends(get_subscription_store),
) -> SubscriptionService:
    return SubscriptionService(store)


def get_push_sender(
    store: SubscriptionStore = Depends(get_subscription_store),
) -> PushSender:
    return PushSender(store)


@router.get("/vapid-public-key")
async def get_vapid_public_key():
    """
    Get the VAPID public key browsers subscribe with.

    Returns 503 when no key is configured.
    """
    public_key = get_config().push.public_key
    if not public_key:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="VAPID public key not configured",
        )
    return {"publicKey": public_key}


@router.post("/subscriptions", status_code=status.HTTP_201_CREATED)
def subscribe(
    request: SubscribeRequest,
    user_agent: Optional[str] = Header(None),
    service: SubscriptionService = Depends(get_subscription_service),
):
    """
    Register the browser subscription of a user.

    Re-subscribing the same endpoint refreshes its keys and reactivates it.
    """
    try:
        stored = service.subscribe(request.user_id, request.subscription, user_agent)
    except InvalidSubscriptionError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=e.detail)

    return {"success": True, "id": stored.id, "device_name": stored.device_name}


@router.delete("/subscriptions")
def unsubscribe(
    request: UnsubscribeRequest,
    service: SubscriptionService = Depends(get_subscription_service),
):
    """Remove a user's subscription for an endpoint."""
    removed = service.unsubscribe(request.user_id, request.endpoint)
    return {"success": True, "removed": removed}


@router.get("/subscriptions/status", response_model=SubscriptionStatus)
def subscription_status(
    user_id: str = Query(..., description="User id"),
    endpoint: str = Query(..., description="Push endpoint of this browser"),
    service: SubscriptionService = Depends(get_subscription_service),
) -> SubscriptionStatus:
    """Whether this browser's subscription is registered and active."""
    return service.status(user_id, endpoint)


@router.post("/send", response_model=SendResult)
def send_push_notification(
    request: SendPushRequest,
    sender: PushSender = Depends(get_push_sender),
):
    """
    Send a notification to one user, several users, or every active subscription.
    """
    try:
        return sender.send(request)
    except VapidNotConfiguredError as e:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=e.detail)
    except Exception as e:
        logger.error(f"Error in send-push-notification: {e}", exc_info=True)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"success": False, "error": str(e)},
        )
