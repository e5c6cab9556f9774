"""
In-process host platform.

Implements the notification and window capabilities in memory and drives
events through a ServiceWorkerHandler the way a browser does: dispatch, then
wait for the event's extensions to settle. Used by the CLI simulator and the
test suite.
"""

import itertools
import logging
from typing import Dict, List, Optional, Union
from urllib.parse import urljoin

from cobrafacil.core.config import AppConfig, get_config
from .events import (
    ExtendableEvent,
    NotificationClickEvent,
    NotificationCloseEvent,
    PushEvent,
)
from .handler import ServiceWorkerHandler
from .models import ShowOptions, ShownNotification, WindowClient
from .normalizer import PushMessageData
from .presenter import NotificationPresenter
from .router import WindowBroker

logger = logging.getLogger(__name__)


class LocalNotificationCenter(NotificationPresenter):
    """
    Keeps the notifications currently on screen.

    A notification with the same tag as a visible one replaces it. Closed
    notifications are forgotten on the next show and cannot be looked up.
    """

    def __init__(self):
        self._ids = itertools.count(1)
        self.notifications: Dict[str, ShownNotification] = {}

    async def show(self, title: str, options: ShowOptions) -> None:
        for existing in self.visible():
            if existing.tag == options.tag:
                existing.close()
                logger.debug(f"Replaced notification {existing.notification_id} (tag={options.tag})")
        self.notifications = {k: n for k, n in self.notifications.items() if not n.closed}

        notification = ShownNotification(
            notification_id=f"n{next(self._ids)}",
            title=title,
            options=options,
        )
        self.notifications[notification.notification_id] = notification

    def visible(self) -> List[ShownNotification]:
        return [n for n in self.notifications.values() if not n.closed]

    def get(self, notification_id: str) -> Optional[ShownNotification]:
        notification = self.notifications.get(notification_id)
        if notification is None or notification.closed:
            return None
        return notification

    def latest(self) -> Optional[ShownNotification]:
        visible = self.visible()
        return visible[-1] if visible else None


class LocalWindowBroker(WindowBroker):
    """
    Window list held in memory.

    Relative URLs are resolved against the window's address on navigation
    and against ``origin`` when opening a new window.
    """

    def __init__(
        self,
        windows: Optional[List[WindowClient]] = None,
        supports_open_window: bool = True,
        origin: Optional[str] = None,
    ):
        self.windows: List[WindowClient] = list(windows or [])
        self.supports_open_window = supports_open_window
        self.origin = origin

    async def list_windows(self, include_uncontrolled: bool = True) -> List[WindowClient]:
        if include_uncontrolled:
            return list(self.windows)
        return [w for w in self.windows if w.controlled]

    async def navigate(self, window: WindowClient, url: str) -> None:
        window.url = urljoin(window.url, url)

    async def focus(self, window: WindowClient) -> None:
        for other in self.windows:
            other.focused = other is window

    async def open_window(self, url: str) -> Optional[WindowClient]:
        if not self.supports_open_window:
            return None
        window = WindowClient(
            client_id=f"w{len(self.windows) + 1}",
            url=urljoin(self.origin, url) if self.origin else url,
        )
        self.windows.append(window)
        await self.focus(window)
        return window


class ServiceWorkerHost:
    """
    Drives events through a handler and waits for them to settle.

    Usage:
        host = ServiceWorkerHost()
        await host.push(b'{"title": "Pagamento recebido"}')
        await host.click(host.notifications.latest().notification_id, "open")
    """

    def __init__(
        self,
        notifications: Optional[LocalNotificationCenter] = None,
        windows: Optional[LocalWindowBroker] = None,
        config: Optional[AppConfig] = None,
    ):
        self.config = config or get_config()
        self.notifications = notifications or LocalNotificationCenter()
        self.windows = windows or LocalWindowBroker(origin=self.config.worker.origin)
        self.handler = ServiceWorkerHandler(self.notifications, self.windows, config=self.config)

    async def deliver(self, event: ExtendableEvent) -> bool:
        """
        Dispatch an event and wait for it to finish.

        Returns:
            True if the event settled cleanly, False if its work failed
        """
        try:
            self.handler.dispatch(event)
            await event.settled()
            return True
        except Exception as e:
            logger.error(f"{event.type} event failed: {e}", exc_info=True)
            return False

    async def push(self, raw: Union[bytes, str, None] = None) -> bool:
        data = PushMessageData(raw) if raw is not None else None
        return await self.deliver(PushEvent(data))

    async def click(self, notification_id: str, action: str = "") -> bool:
        """
        Click a notification still on screen.

        Raises:
            KeyError: If the notification is unknown, closed or replaced
        """
        return await self.deliver(NotificationClickEvent(self._lookup(notification_id), action))

    async def dismiss(self, notification_id: str) -> bool:
        notification = self._lookup(notification_id)
        notification.close()
        return await self.deliver(NotificationCloseEvent(notification))

    def _lookup(self, notification_id: str) -> ShownNotification:
        notification = self.notifications.get(notification_id)
        if notification is None:
            raise KeyError(f"Unknown notification: {notification_id}")
        return notification
