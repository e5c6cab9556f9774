"""
Service worker events with deferred completion.

An event collects the work started while handling it through ``wait_until``;
the host awaits ``settled()`` before considering the event finished.
"""

import asyncio
from typing import Awaitable, List, Optional

from .models import Interaction, ShownNotification
from .normalizer import PushMessageData


class ExtendableEvent:
    """Base class for events whose lifetime can be extended."""

    type: str = "extendable"

    def __init__(self):
        self._pending: List[asyncio.Future] = []

    def wait_until(self, awaitable: Awaitable) -> asyncio.Future:
        """
        Keep the event alive until ``awaitable`` settles.

        Must be called from inside a running event loop.

        Returns:
            The scheduled future
        """
        future = asyncio.ensure_future(awaitable)
        self._pending.append(future)
        return future

    @property
    def extended(self) -> bool:
        return bool(self._pending)

    async def settled(self) -> None:
        """
        Wait for every extension to finish.

        Raises the first failure, after all extensions have settled.
        """
        if not self._pending:
            return
        results = await asyncio.gather(*self._pending, return_exceptions=True)
        for result in results:
            if isinstance(result, BaseException):
                raise result


class PushEvent(ExtendableEvent):
    """A push message arrived."""

    type = "push"

    def __init__(self, data: Optional[PushMessageData] = None):
        super().__init__()
        self.data = data


class NotificationEvent(ExtendableEvent):
    """Base for events about a shown notification."""

    def __init__(self, notification: ShownNotification, interaction: Interaction):
        super().__init__()
        self.notification = notification
        self.interaction = interaction

    @property
    def action(self) -> str:
        return self.interaction.action


class NotificationClickEvent(NotificationEvent):
    """The user clicked the notification body or one of its actions."""

    type = "notificationclick"

    def __init__(self, notification: ShownNotification, action: str = ""):
        super().__init__(notification, Interaction.click(action))


class NotificationCloseEvent(NotificationEvent):
    """The user dismissed the notification without clicking it."""

    type = "notificationclose"

    def __init__(self, notification: ShownNotification):
        super().__init__(notification, Interaction.dismiss())
