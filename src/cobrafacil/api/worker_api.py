"""
Worker preview endpoint.

Shows what the service worker would display for a raw push payload.
"""

import logging

from fastapi import APIRouter, Request

from cobrafacil.worker.normalizer import PushMessageData, normalize
from cobrafacil.worker.presenter import build_show_options

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/worker", tags=["worker"])


@router.post("/preview")
async def preview_notification(request: Request):
    """
    Normalize a raw payload (request body, any content type) and return the
    display model and show options. An empty body previews the defaults.
    """
    raw = await request.body()
    model = normalize(PushMessageData(raw) if raw else None)
    options = build_show_options(model)
    return {
        "model": model.to_dict(),
        "title": model.title,
        "options": options.to_dict(),
    }
