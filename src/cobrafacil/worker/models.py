"""
Service worker data models: display model, show options, interactions and routing actions.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional


class NotificationState(str, Enum):
    """Lifecycle of one shown notification. CLICKED and DISMISSED are terminal."""
    SHOWN = "shown"
    CLICKED = "clicked"
    DISMISSED = "dismissed"


class InteractionKind(str, Enum):
    """What the user did to a shown notification."""
    CLICK = "click"
    DISMISS = "dismiss"


class RouteActionType(str, Enum):
    """Outcome of routing an interaction."""
    NAVIGATE = "navigate"
    OPEN_WINDOW = "open_window"
    CLOSE = "close"
    NOOP = "noop"


OPEN_ACTION = "open"
CLOSE_ACTION = "close"


@dataclass
class NotificationDisplayModel:
    """
    Fully resolved fields needed to render one platform notification.

    Attributes:
        title: Notification title
        body: Notification body text
        icon: Icon asset path
        badge: Badge asset path
        tag: Coalescing tag
        data: Arbitrary data; always carries a string ``url``
    """
    title: str
    body: str
    icon: str
    badge: str
    tag: str
    data: Dict[str, Any] = field(default_factory=dict)

    @property
    def url(self) -> str:
        return self.data["url"]

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "title": self.title,
            "body": self.body,
            "icon": self.icon,
            "badge": self.badge,
            "tag": self.tag,
            "data": dict(self.data),
        }


@dataclass
class NotificationAction:
    """A button shown on the notification."""
    action: str
    title: str

    def to_dict(self) -> Dict[str, str]:
        return {"action": self.action, "title": self.title}


@dataclass
class ShowOptions:
    """Options passed to the host alongside the title when showing a notification."""
    body: str
    icon: str
    badge: str
    tag: str
    data: Dict[str, Any]
    vibrate: List[int] = field(default_factory=lambda: [200, 100, 200])
    require_interaction: bool = True
    actions: List[NotificationAction] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to the camelCase shape of the Notifications API."""
        return {
            "body": self.body,
            "icon": self.icon,
            "badge": self.badge,
            "tag": self.tag,
            "data": dict(self.data),
            "vibrate": list(self.vibrate),
            "requireInteraction": self.require_interaction,
            "actions": [a.to_dict() for a in self.actions],
        }


@dataclass
class ShownNotification:
    """
    A notification the host is currently displaying.

    ``closed`` tracks whether the notification was removed from the screen;
    ``state`` tracks the interaction lifecycle.
    """
    notification_id: str
    title: str
    options: ShowOptions
    state: NotificationState = NotificationState.SHOWN
    closed: bool = False

    @property
    def data(self) -> Dict[str, Any]:
        return self.options.data

    @property
    def tag(self) -> str:
        return self.options.tag

    @property
    def is_terminal(self) -> bool:
        return self.state != NotificationState.SHOWN

    def transition(self, kind: InteractionKind) -> bool:
        """
        Move out of SHOWN according to the interaction.

        Returns:
            True if the transition happened, False if already terminal
        """
        if self.is_terminal:
            return False
        if kind == InteractionKind.CLICK:
            self.state = NotificationState.CLICKED
        else:
            self.state = NotificationState.DISMISSED
        return True

    def close(self) -> None:
        self.closed = True


@dataclass
class Interaction:
    """A user interaction with a shown notification."""
    kind: InteractionKind
    action: str = ""

    @classmethod
    def click(cls, action: str = "") -> "Interaction":
        return cls(kind=InteractionKind.CLICK, action=action or "")

    @classmethod
    def dismiss(cls) -> "Interaction":
        return cls(kind=InteractionKind.DISMISS)


@dataclass
class WindowClient:
    """An open application window as exposed by the host."""
    client_id: str
    url: str
    focusable: bool = True
    focused: bool = False
    controlled: bool = True


@dataclass
class RouteAction:
    """
    Routing decision.

    ``url`` is set for NAVIGATE and OPEN_WINDOW; ``window`` only for a
    NAVIGATE resolved against an existing window.
    """
    action_type: RouteActionType
    url: Optional[str] = None
    window: Optional[WindowClient] = None

    @classmethod
    def navigate(cls, url: str, window: Optional[WindowClient] = None) -> "RouteAction":
        return cls(RouteActionType.NAVIGATE, url=url, window=window)

    @classmethod
    def open_window(cls, url: str) -> "RouteAction":
        return cls(RouteActionType.OPEN_WINDOW, url=url)

    @classmethod
    def close(cls) -> "RouteAction":
        return cls(RouteActionType.CLOSE)

    @classmethod
    def noop(cls) -> "RouteAction":
        return cls(RouteActionType.NOOP)
