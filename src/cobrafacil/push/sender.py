"""
Push sender - delivers notification payloads to browser subscriptions.
"""

import json
import logging
from typing import Any, Dict, List, Optional

from pywebpush import WebPushException, webpush

from cobrafacil.core.config import NotificationDefaultsConfig, PushConfig, get_config
from cobrafacil.core.exceptions import VapidNotConfiguredError
from .models import DeliveryResult, PushSubscription, SendPushRequest, SendResult
from .store import SubscriptionStore

logger = logging.getLogger(__name__)


def build_payload(
    request: SendPushRequest,
    defaults: Optional[NotificationDefaultsConfig] = None,
) -> Dict[str, Any]:
    """
    Build the JSON payload the service worker receives.

    Icon and badge fall back to the application icon; absent optional fields
    are left out.
    """
    defaults = defaults or get_config().notifications
    payload = {
        "title": request.title,
        "body": request.body,
        "icon": request.icon or defaults.icon,
        "badge": request.badge or defaults.badge,
        "tag": request.tag,
        "data": request.data,
        "url": request.url,
    }
    return {k: v for k, v in payload.items() if v is not None}


class PushSender:
    """
    Sends Web Push messages with VAPID authentication.

    Subscriptions that the push service reports as gone (404/410) are
    deactivated after each send.
    """

    def __init__(
        self,
        store: SubscriptionStore,
        push_config: Optional[PushConfig] = None,
        defaults: Optional[NotificationDefaultsConfig] = None,
    ):
        config = get_config() if push_config is None or defaults is None else None
        self.store = store
        self.push_config = push_config or config.push
        self.defaults = defaults or config.notifications

    def is_enabled(self) -> bool:
        """Check if VAPID keys are configured."""
        return self.push_config.is_configured

    def deliver(self, subscription: PushSubscription, payload: Dict[str, Any]) -> DeliveryResult:
        """
        Deliver one payload to one subscription.

        Args:
            subscription: Target subscription
            payload: JSON-serialisable payload

        Returns:
            DeliveryResult; ``expired`` is set for 404/410 responses
        """
        if not self.is_enabled():
            logger.error("VAPID keys not configured")
            return DeliveryResult(success=False, error="VAPID keys not configured")

        try:
            webpush(
                subscription_info=subscription.subscription_info(),
                data=json.dumps(payload),
                vapid_private_key=self.push_config.private_key,
                vapid_claims={"sub": self.push_config.subject},
                ttl=self.push_config.ttl,
            )
            logger.debug(f"Push delivered to subscription {subscription.id}")
            return DeliveryResult(success=True)

        except WebPushException as e:
            response = getattr(e, "response", None)
            status_code = getattr(response, "status_code", None)
            if status_code in (404, 410):
                logger.info(f"Subscription {subscription.id} expired (HTTP {status_code})")
                return DeliveryResult(success=False, error="subscription_expired", status_code=status_code)

            error = f"HTTP {status_code}: {e}" if status_code else str(e)
            logger.error(f"Push failed for subscription {subscription.id}: {error}")
            return DeliveryResult(success=False, error=error, status_code=status_code)

        except Exception as e:
            logger.error(f"Error sending push to subscription {subscription.id}: {e}")
            return DeliveryResult(success=False, error=str(e))

    def send(self, request: SendPushRequest) -> SendResult:
        """
        Send a notification to the request's target users.

        Raises:
            VapidNotConfiguredError: If the VAPID key pair is missing

        Returns:
            SendResult with sent / failed / expired_removed counts
        """
        if not self.is_enabled():
            raise VapidNotConfiguredError()

        subscriptions = self.store.find_active(user_id=request.user_id, user_ids=request.user_ids)
        if not subscriptions:
            logger.info("No active subscriptions found")
            return SendResult(success=True, sent=0, message="No active subscriptions")

        logger.info(f"Found {len(subscriptions)} subscriptions to notify")

        payload = build_payload(request, self.defaults)
        sent = 0
        failed = 0
        expired: List[int] = []

        for subscription in subscriptions:
            result = self.deliver(subscription, payload)
            if result.success:
                sent += 1
                self.store.touch(subscription.id)
            else:
                failed += 1
                if result.expired:
                    expired.append(subscription.id)

        if expired:
            self.store.deactivate(expired)
            logger.info(f"Marked {len(expired)} subscriptions as inactive")

        logger.info(f"Sent: {sent}, Failed: {failed}")
        return SendResult(success=True, sent=sent, failed=failed, expired_removed=len(expired))
