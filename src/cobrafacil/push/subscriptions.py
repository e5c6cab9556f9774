"""
Subscription service - registers and removes browser push subscriptions.
"""

import logging
from typing import Optional

from cobrafacil.core.exceptions import InvalidSubscriptionError
from .models import PushSubscription, SubscriptionJSON, SubscriptionStatus
from .store import SubscriptionStore

logger = logging.getLogger(__name__)


def device_name_from_user_agent(user_agent: Optional[str]) -> str:
    """Coarse device label shown in the user's device list."""
    user_agent = user_agent or ""
    if "Mobile" in user_agent:
        return "Celular"
    if "Tablet" in user_agent:
        return "Tablet"
    return "Computador"


class SubscriptionService:
    """
    Manages push subscriptions for users.

    Usage:
        service = SubscriptionService(SubscriptionStore("/tmp/push.db"))
        service.subscribe("user-1", subscription_json, user_agent)
    """

    def __init__(self, store: SubscriptionStore):
        self.store = store

    def subscribe(
        self,
        user_id: str,
        subscription: SubscriptionJSON,
        user_agent: Optional[str] = None,
    ) -> PushSubscription:
        """
        Register (or reactivate) a browser subscription for a user.

        Raises:
            InvalidSubscriptionError: If endpoint or keys are missing
        """
        if not subscription.endpoint:
            raise InvalidSubscriptionError(field="endpoint")
        keys = subscription.keys
        if keys is None or not keys.p256dh or not keys.auth:
            raise InvalidSubscriptionError(field="keys")

        stored = self.store.upsert(
            PushSubscription(
                user_id=user_id,
                endpoint=subscription.endpoint,
                p256dh=keys.p256dh,
                auth=keys.auth,
                device_name=device_name_from_user_agent(user_agent),
                is_active=True,
            )
        )
        logger.info(f"User {user_id} subscribed to push on {stored.device_name}")
        return stored

    def unsubscribe(self, user_id: str, endpoint: str) -> bool:
        """Remove a subscription. Returns True if one existed."""
        removed = self.store.delete(user_id, endpoint)
        if removed:
            logger.info(f"User {user_id} unsubscribed from push")
        else:
            logger.debug(f"No subscription to remove for user {user_id}")
        return removed

    def status(self, user_id: str, endpoint: str) -> SubscriptionStatus:
        return SubscriptionStatus(
            user_id=user_id,
            endpoint=endpoint,
            is_subscribed=self.store.is_active(user_id, endpoint),
        )
