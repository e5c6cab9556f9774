"""
Service worker module.

Normalizes push payloads, shows notifications through the host and routes
clicks to the application's windows.
"""

from cobrafacil.worker.models import (
    NotificationDisplayModel,
    NotificationState,
    RouteAction,
    RouteActionType,
    ShowOptions,
    ShownNotification,
    WindowClient,
)
from cobrafacil.worker.normalizer import PushMessageData, normalize
from cobrafacil.worker.presenter import NotificationPresenter, build_show_options, present
from cobrafacil.worker.router import NotificationInteractionRouter, WindowBroker, route
from cobrafacil.worker.handler import ServiceWorkerHandler
from cobrafacil.worker.host import LocalNotificationCenter, LocalWindowBroker, ServiceWorkerHost

__all__ = [
    "NotificationDisplayModel",
    "NotificationState",
    "RouteAction",
    "RouteActionType",
    "ShowOptions",
    "ShownNotification",
    "WindowClient",
    "PushMessageData",
    "normalize",
    "NotificationPresenter",
    "build_show_options",
    "present",
    "NotificationInteractionRouter",
    "WindowBroker",
    "route",
    "ServiceWorkerHandler",
    "LocalNotificationCenter",
    "LocalWindowBroker",
    "ServiceWorkerHost",
]
