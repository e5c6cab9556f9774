"""
HTTP API module for push subscriptions, sending and payload previews.
"""

__all__ = ["push_api", "worker_api", "http_server"]
