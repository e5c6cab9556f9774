"""
CobraFácil Push - Custom Exceptions
"""

from typing import Any, Dict, Optional


class CobraFacilError(Exception):
    """Base exception for CobraFácil Push."""

    def __init__(
        self,
        detail: str,
        error_code: Optional[str] = None,
        extra: Optional[Dict[str, Any]] = None
    ):
        super().__init__(detail)
        self.detail = detail
        self.error_code = error_code
        self.extra = extra or {}


class InvalidSubscriptionError(CobraFacilError):
    """Browser subscription is missing its endpoint or keys."""

    def __init__(self, detail: str = "Invalid subscription data", field: str = None):
        super().__init__(
            detail=detail,
            error_code="INVALID_SUBSCRIPTION",
            extra={"field": field} if field else {}
        )


class VapidNotConfiguredError(CobraFacilError):
    """VAPID key pair is not available."""

    def __init__(self, detail: str = "VAPID keys not configured"):
        super().__init__(detail=detail, error_code="VAPID_NOT_CONFIGURED")
