"""
Push payload normalizer.

Turns an arbitrary, possibly absent or malformed push payload into a complete
NotificationDisplayModel.
"""

import json
import logging
from typing import Any, Dict, Optional, Union

from cobrafacil.core.config import NotificationDefaultsConfig, get_config
from .models import NotificationDisplayModel

logger = logging.getLogger(__name__)

_TEXT_FIELDS = ("title", "body", "icon", "badge", "tag")


class PushMessageData:
    """
    Raw payload of a push event, with JSON and text views.

    Mirrors the PushMessageData interface of the Push API.
    """

    def __init__(self, raw: Union[bytes, str]):
        if isinstance(raw, str):
            raw = raw.encode("utf-8")
        self._raw = raw

    def bytes(self) -> bytes:
        return self._raw

    def text(self) -> str:
        return self._raw.decode("utf-8", errors="replace")

    def json(self) -> Any:
        """Parse the payload as JSON. Raises ValueError on malformed input."""
        return json.loads(self.text())

    def __repr__(self) -> str:
        return f"PushMessageData({len(self._raw)} bytes)"


def default_model(defaults: Optional[NotificationDefaultsConfig] = None) -> NotificationDisplayModel:
    """Build a fresh default display model."""
    defaults = defaults or get_config().notifications
    return NotificationDisplayModel(
        title=defaults.title,
        body=defaults.body,
        icon=defaults.icon,
        badge=defaults.badge,
        tag=defaults.tag,
        data={"url": defaults.url},
    )


def _non_empty_str(value: Any) -> bool:
    return isinstance(value, str) and value != ""


def _from_payload(
    payload: Dict[str, Any],
    defaults: NotificationDefaultsConfig,
) -> NotificationDisplayModel:
    model = default_model(defaults)

    for name in _TEXT_FIELDS:
        value = payload.get(name)
        if _non_empty_str(value):
            setattr(model, name, value)

    data = payload.get("data")
    if isinstance(data, dict) and data:
        model.data = dict(data)

    # A top-level url wins over data.url
    if _non_empty_str(payload.get("url")):
        model.data["url"] = payload["url"]
    elif not _non_empty_str(model.data.get("url")):
        model.data["url"] = defaults.url

    return model


def normalize(
    push_data: Optional[PushMessageData],
    defaults: Optional[NotificationDefaultsConfig] = None,
) -> NotificationDisplayModel:
    """
    Convert a push payload into a display model.

    - No payload: the default model.
    - JSON object: non-empty fields override defaults; a top-level ``url``
      overrides ``data.url``.
    - Any other JSON value: the default model.
    - Undecodable payload or JSON ``null``: defaults, with the raw payload
      text as the body.

    Never raises.

    Args:
        push_data: Payload of the push event, or None
        defaults: Default values (defaults to the global configuration)

    Returns:
        NotificationDisplayModel
    """
    defaults = defaults or get_config().notifications

    if push_data is None:
        return default_model(defaults)

    try:
        payload = push_data.json()
        if payload is None:
            raise ValueError("payload is JSON null")
        if not isinstance(payload, dict):
            # Parsed, but carries no fields
            return default_model(defaults)
        return _from_payload(payload, defaults)
    except Exception as e:
        logger.error(f"Error parsing push data: {e}")
        model = default_model(defaults)
        try:
            model.body = push_data.text()
        except Exception as text_error:
            logger.error(f"Error reading push data as text: {text_error}")
        return model
