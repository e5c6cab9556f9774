"""
Push module.

Stores browser push subscriptions and delivers payloads to them with VAPID.
"""

from cobrafacil.push.models import (
    PushSubscription,
    SendPushRequest,
    SendResult,
    SubscriptionJSON,
)
from cobrafacil.push.store import SubscriptionStore
from cobrafacil.push.subscriptions import SubscriptionService, device_name_from_user_agent
from cobrafacil.push.sender import PushSender, build_payload
from cobrafacil.push.vapid import url_base64_to_bytes

__all__ = [
    "PushSubscription",
    "SendPushRequest",
    "SendResult",
    "SubscriptionJSON",
    "SubscriptionStore",
    "SubscriptionService",
    "device_name_from_user_agent",
    "PushSender",
    "build_payload",
    "url_base64_to_bytes",
]
