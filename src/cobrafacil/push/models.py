"""
Push subscription and delivery data models.
"""

from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field, field_validator


class PushSubscription(BaseModel):
    """
    A browser push subscription registered by a user.

    One row per (user_id, endpoint).
    """

    id: Optional[int] = None
    user_id: str
    endpoint: str
    p256dh: str
    auth: str
    device_name: Optional[str] = None
    is_active: bool = True
    created_at: datetime = Field(default_factory=datetime.utcnow)
    last_used_at: Optional[datetime] = None

    def subscription_info(self) -> Dict[str, Any]:
        """Shape expected by pywebpush."""
        return {
            "endpoint": self.endpoint,
            "keys": {"p256dh": self.p256dh, "auth": self.auth},
        }


class SubscriptionKeys(BaseModel):
    p256dh: Optional[str] = None
    auth: Optional[str] = None


class SubscriptionJSON(BaseModel):
    """``PushSubscription.toJSON()`` as sent by the browser."""

    endpoint: Optional[str] = None
    expirationTime: Optional[float] = None
    keys: Optional[SubscriptionKeys] = None


class SubscribeRequest(BaseModel):
    user_id: str
    subscription: SubscriptionJSON


class UnsubscribeRequest(BaseModel):
    user_id: str
    endpoint: str


class SubscriptionStatus(BaseModel):
    user_id: str
    endpoint: str
    is_subscribed: bool


class SendPushRequest(BaseModel):
    """
    Request to push a notification to one user, several users, or everyone.

    With neither ``user_id`` nor ``user_ids`` the notification is broadcast to
    all active subscriptions.
    """

    user_id: Optional[str] = None
    user_ids: Optional[List[str]] = None
    title: str
    body: str
    icon: Optional[str] = None
    badge: Optional[str] = None
    tag: Optional[str] = None
    data: Optional[Dict[str, Any]] = None
    url: Optional[str] = None

    @field_validator("title", "body")
    @classmethod
    def validate_required_text(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("title and body are required")
        return v

    class Config:
        json_schema_extra = {
            "example": {
                "user_id": "5b0f3c1e-8e0a-4c55-9d0f-2a4b7f1c9e21",
                "title": "Pagamento recebido",
                "body": "R$150 pago",
                "data": {"url": "/loans/42"},
            }
        }


class DeliveryResult(BaseModel):
    """Outcome of one delivery attempt."""

    success: bool
    error: Optional[str] = None
    status_code: Optional[int] = None

    @property
    def expired(self) -> bool:
        return self.status_code in (404, 410)


class SendResult(BaseModel):
    """Totals of a send request."""

    success: bool = True
    sent: int = 0
    failed: int = 0
    expired_removed: int = 0
    message: Optional[str] = None
