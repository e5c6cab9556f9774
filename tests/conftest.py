"""
Shared fixtures: isolated configuration and in-memory host fakes.
"""

from typing import List, Optional

import pytest

from cobrafacil.core.config import reload_config
from cobrafacil.push.store import SubscriptionStore
from cobrafacil.worker.models import ShowOptions, WindowClient
from cobrafacil.worker.presenter import NotificationPresenter
from cobrafacil.worker.router import WindowBroker

ORIGIN = "https://cobrafacil.online"

_ENV_VARS = [
    "VAPID_PUBLIC_KEY",
    "VAPID_PRIVATE_KEY",
    "VAPID_SUBJECT",
    "WORKER_ORIGIN",
    "WORKER_LOOSE_ORIGIN_MATCH",
    "NOTIFY_TITLE",
    "NOTIFY_BODY",
    "NOTIFY_URL",
]


@pytest.fixture(autouse=True)
def config(tmp_path, monkeypatch):
    for name in _ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("VAPID_SUBSCRIPTIONS_DB", str(tmp_path / "push.db"))
    monkeypatch.setenv("WORKER_ORIGIN", ORIGIN)
    yield reload_config()
    reload_config()


@pytest.fixture
def store(tmp_path):
    return SubscriptionStore(str(tmp_path / "subscriptions.db"))


class RecordingPresenter(NotificationPresenter):
    """Records show requests; optionally fails them."""

    def __init__(self, error: Optional[Exception] = None):
        self.shown = []
        self.error = error

    async def show(self, title: str, options: ShowOptions) -> None:
        if self.error:
            raise self.error
        self.shown.append((title, options))


class RecordingBroker(WindowBroker):
    """Records every window operation."""

    def __init__(
        self,
        windows: Optional[List[WindowClient]] = None,
        supports_open_window: bool = True,
        list_error: Optional[Exception] = None,
        open_error: Optional[Exception] = None,
    ):
        self.windows = list(windows or [])
        self.supports_open_window = supports_open_window
        self.list_error = list_error
        self.open_error = open_error
        self.calls = []

    async def list_windows(self, include_uncontrolled: bool = True) -> List[WindowClient]:
        self.calls.append(("list", include_uncontrolled))
        if self.list_error:
            raise self.list_error
        return list(self.windows)

    async def navigate(self, window: WindowClient, url: str) -> None:
        self.calls.append(("navigate", window.client_id, url))

    async def focus(self, window: WindowClient) -> None:
        self.calls.append(("focus", window.client_id))

    async def open_window(self, url: str) -> Optional[WindowClient]:
        self.calls.append(("open", url))
        if self.open_error:
            raise self.open_error
        return WindowClient(client_id="new", url=url)

    def names(self):
        return [call[0] for call in self.calls]


@pytest.fixture
def presenter():
    return RecordingPresenter()


@pytest.fixture
def app_window():
    return WindowClient(client_id="w1", url=f"{ORIGIN}/dashboard")


@pytest.fixture
def make_broker():
    return RecordingBroker


@pytest.fixture
def make_presenter():
    return RecordingPresenter
