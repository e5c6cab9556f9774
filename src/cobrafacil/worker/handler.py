"""
Service worker handler - wires push and notification events to the
normalizer, presenter and interaction router.
"""

import logging
from typing import Optional

from cobrafacil.core.config import AppConfig, get_config
from .events import (
    ExtendableEvent,
    NotificationClickEvent,
    NotificationCloseEvent,
    PushEvent,
)
from .models import RouteAction
from .normalizer import normalize
from .presenter import NotificationPresenter, present
from .router import NotificationInteractionRouter, WindowBroker

logger = logging.getLogger(__name__)


class ServiceWorkerHandler:
    """
    Handles the three notification-related service worker events.

    Each handler schedules its asynchronous work on the event through
    ``wait_until`` and returns the scheduled task.
    """

    def __init__(
        self,
        presenter: NotificationPresenter,
        broker: WindowBroker,
        config: Optional[AppConfig] = None,
    ):
        self.config = config or get_config()
        self.presenter = presenter
        self.router = NotificationInteractionRouter(broker, worker=self.config.worker)

    def on_push(self, event: PushEvent):
        logger.info(f"Push received: {event.data!r}")

        model = normalize(event.data, defaults=self.config.notifications)
        return event.wait_until(
            present(
                model,
                self.presenter,
                worker=self.config.worker,
                defaults=self.config.notifications,
            )
        )

    def on_notification_click(self, event: NotificationClickEvent):
        logger.info(
            f"Notification click received: {event.notification.notification_id} "
            f"(action={event.action or 'default'})"
        )
        return event.wait_until(
            self.router.handle_click(event.notification, event.interaction)
        )

    def on_notification_close(self, event: NotificationCloseEvent) -> RouteAction:
        return self.router.handle_dismiss(event.notification)

    def dispatch(self, event: ExtendableEvent):
        """
        Route an event to its handler.

        Raises:
            ValueError: For event types this handler does not listen to
        """
        if isinstance(event, PushEvent):
            return self.on_push(event)
        elif isinstance(event, NotificationClickEvent):
            return self.on_notification_click(event)
        elif isinstance(event, NotificationCloseEvent):
            return self.on_notification_close(event)
        raise ValueError(f"Unhandled event type: {event.type}")
