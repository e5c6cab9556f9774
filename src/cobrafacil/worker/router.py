"""
Notification interaction router.

Decides what a click or dismissal on a shown notification should do, and
carries that decision out against the host's open windows.
"""

import logging
from abc import ABC, abstractmethod
from typing import List, Optional
from urllib.parse import urlsplit

from cobrafacil import DEFAULT_URL
from cobrafacil.core.config import WorkerConfig, get_config
from .models import (
    CLOSE_ACTION,
    Interaction,
    InteractionKind,
    RouteAction,
    RouteActionType,
    ShownNotification,
    WindowClient,
)

logger = logging.getLogger(__name__)

_DEFAULT_PORTS = {"http": 80, "https": 443}


class WindowBroker(ABC):
    """Host capability over the application's open windows."""

    supports_open_window: bool = True

    @abstractmethod
    async def list_windows(self, include_uncontrolled: bool = True) -> List[WindowClient]:
        """Enumerate open application windows."""
        pass

    @abstractmethod
    async def navigate(self, window: WindowClient, url: str) -> None:
        """Point an existing window at ``url``."""
        pass

    @abstractmethod
    async def focus(self, window: WindowClient) -> None:
        """Bring a window to the foreground."""
        pass

    @abstractmethod
    async def open_window(self, url: str) -> Optional[WindowClient]:
        """Open a new window at ``url``."""
        pass


def _origin_tuple(url: str):
    parts = urlsplit(url)
    scheme = parts.scheme.lower()
    try:
        port = parts.port
    except ValueError:
        return None
    if not scheme or not parts.hostname:
        return None
    return scheme, parts.hostname.lower(), port or _DEFAULT_PORTS.get(scheme)


def is_same_origin(window_url: str, origin: str, loose: bool = False) -> bool:
    """
    Check whether a window belongs to the application's origin.

    Args:
        window_url: Address of the open window
        origin: Application origin, e.g. ``https://cobrafacil.online``
        loose: Accept any URL containing the origin string

    Returns:
        True if the window is an application window
    """
    if loose:
        return origin in window_url

    window_origin = _origin_tuple(window_url)
    return window_origin is not None and window_origin == _origin_tuple(origin)


def resolve_url(notification: ShownNotification) -> str:
    """Navigation target carried by the notification, or the default."""
    data = notification.data or {}
    url = data.get("url")
    if isinstance(url, str) and url:
        return url
    return DEFAULT_URL


def route(interaction: Interaction, notification: ShownNotification) -> RouteAction:
    """
    Decide what an interaction should do. Pure; does not touch the host.

    - click on ``close``: CLOSE
    - any other click (``open``, body, unknown action): NAVIGATE to the
      notification URL
    - dismissal, or anything on an already terminal notification: NOOP
    """
    if notification.is_terminal:
        return RouteAction.noop()

    if interaction.kind == InteractionKind.DISMISS:
        return RouteAction.noop()

    if interaction.action == CLOSE_ACTION:
        return RouteAction.close()

    return RouteAction.navigate(resolve_url(notification))


def find_app_window(
    windows: List[WindowClient],
    origin: str,
    loose: bool = False,
) -> Optional[WindowClient]:
    """First focusable window at the application's origin."""
    for window in windows:
        if window.focusable and is_same_origin(window.url, origin, loose=loose):
            return window
    return None


class NotificationInteractionRouter:
    """
    Applies routing decisions to the host's windows.

    Usage:
        router = NotificationInteractionRouter(broker)
        action = await router.handle_click(notification, Interaction.click("open"))
    """

    def __init__(self, broker: WindowBroker, worker: Optional[WorkerConfig] = None):
        self.broker = broker
        self.worker = worker or get_config().worker

    async def handle_click(
        self,
        notification: ShownNotification,
        interaction: Interaction,
    ) -> RouteAction:
        """
        Handle a click on a notification.

        The notification is closed before anything else. Host failures while
        listing or opening windows propagate to the caller.

        Returns:
            The executed action (NAVIGATE with the window, OPEN_WINDOW, CLOSE or NOOP)
        """
        decision = route(interaction, notification)
        notification.transition(InteractionKind.CLICK)
        notification.close()

        if decision.action_type != RouteActionType.NAVIGATE:
            logger.debug(f"Notification {notification.notification_id}: {decision.action_type.value}")
            return decision

        return await self._navigate(decision.url)

    def handle_dismiss(self, notification: ShownNotification) -> RouteAction:
        """Record a dismissal. No navigation, no focus."""
        decision = route(Interaction.dismiss(), notification)
        notification.transition(InteractionKind.DISMISS)
        logger.info(f"Notification closed: {notification.notification_id} (tag={notification.tag})")
        return decision

    async def _navigate(self, url: str) -> RouteAction:
        windows = await self.broker.list_windows(include_uncontrolled=True)
        window = find_app_window(windows, self.worker.origin, loose=self.worker.loose_origin_match)

        if window is not None:
            await self.broker.navigate(window, url)
            await self.broker.focus(window)
            logger.info(f"Focused window {window.client_id} at {url}")
            return RouteAction.navigate(url, window)

        if not self.broker.supports_open_window:
            logger.warning(f"No application window open and host cannot open one for {url}")
            return RouteAction.noop()

        await self.broker.open_window(url)
        logger.info(f"Opened new window at {url}")
        return RouteAction.open_window(url)
