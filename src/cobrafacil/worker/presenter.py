"""
Notification presenter - asks the host platform to display a notification.
"""

import logging
from abc import ABC, abstractmethod
from typing import Awaitable, Optional

from cobrafacil.core.config import NotificationDefaultsConfig, WorkerConfig, get_config
from .models import (
    CLOSE_ACTION,
    OPEN_ACTION,
    NotificationAction,
    NotificationDisplayModel,
    ShowOptions,
)

logger = logging.getLogger(__name__)


class NotificationPresenter(ABC):
    """Host capability for showing notifications."""

    @abstractmethod
    async def show(self, title: str, options: ShowOptions) -> None:
        """
        Display a notification.

        Args:
            title: Notification title
            options: Body, icons, tag, data, vibration, actions
        """
        pass


def build_show_options(
    model: NotificationDisplayModel,
    worker: Optional[WorkerConfig] = None,
    defaults: Optional[NotificationDefaultsConfig] = None,
) -> ShowOptions:
    """
    Build the show request for a display model.

    The notification stays on screen until dismissed and offers exactly two
    actions, ``open`` and ``close``.
    """
    config = get_config() if worker is None or defaults is None else None
    worker = worker or config.worker
    defaults = defaults or config.notifications

    return ShowOptions(
        body=model.body,
        icon=model.icon,
        badge=model.badge,
        tag=model.tag,
        data=dict(model.data),
        vibrate=list(worker.vibrate_pattern),
        require_interaction=worker.require_interaction,
        actions=[
            NotificationAction(action=OPEN_ACTION, title=defaults.open_action_title),
            NotificationAction(action=CLOSE_ACTION, title=defaults.close_action_title),
        ],
    )


def present(
    model: NotificationDisplayModel,
    presenter: NotificationPresenter,
    worker: Optional[WorkerConfig] = None,
    defaults: Optional[NotificationDefaultsConfig] = None,
) -> Awaitable[None]:
    """
    Request the host display ``model``.

    Returns the host's awaitable unawaited so the caller can tie the push
    event's lifetime to it. Failures are not handled here.
    """
    options = build_show_options(model, worker=worker, defaults=defaults)
    logger.debug(f"Showing notification '{model.title}' (tag={model.tag})")
    return presenter.show(model.title, options)
