"""
CobraFácil Push - Web Push delivery for the CobraFácil billing platform

This package carries the push notification path of CobraFácil, a loan and
monthly-fee billing application for small lenders.

Main modules:
- worker: service worker logic (payload normalization, presentation, click routing)
- push: browser subscription storage and VAPID push delivery
- api: HTTP endpoints for subscriptions, key distribution and sending
- cli: operational CLI (cobractl)
"""

__version__ = "0.3.0"
__author__ = "CobraFácil Team"

DEFAULT_URL = "/dashboard"

__all__ = ["__version__", "__author__", "DEFAULT_URL"]
