#!/usr/bin/env python3
"""
cobractl - CobraFácil Push operational CLI

A lightweight CLI for day-2 operations:
- Payload previews (cobractl preview)
- Click-flow simulation (cobractl simulate-click)
- Health checks (cobractl doctor)
- Sending a push (cobractl send)
- Version info (cobractl version)
"""

import argparse
import asyncio
import json
import os
import sqlite3
import sys
from typing import List, Optional

import httpx

from cobrafacil import __version__
from cobrafacil.api.http_server import setup_logging
from cobrafacil.core.config import get_config
from cobrafacil.core.exceptions import CobraFacilError
from cobrafacil.push.models import SendPushRequest
from cobrafacil.push.sender import PushSender
from cobrafacil.push.store import SubscriptionStore
from cobrafacil.push.vapid import is_valid_public_key
from cobrafacil.worker.host import LocalWindowBroker, ServiceWorkerHost
from cobrafacil.worker.models import WindowClient
from cobrafacil.worker.normalizer import PushMessageData, normalize
from cobrafacil.worker.presenter import build_show_options


class Colors:
    """ANSI color codes for terminal output."""

    GREEN = "\033[92m"
    YELLOW = "\033[93m"
    RED = "\033[91m"
    BLUE = "\033[94m"
    RESET = "\033[0m"
    BOLD = "\033[1m"


def colorize(text: str, color: str) -> str:
    """Colorize text if stdout is a TTY."""
    if sys.stdout.isatty():
        return f"{color}{text}{Colors.RESET}"
    return text


def read_payload(args) -> Optional[bytes]:
    """Payload from --file, the positional argument, or nothing."""
    if getattr(args, "file", None):
        if args.file == "-":
            return sys.stdin.buffer.read()
        with open(args.file, "rb") as f:
            return f.read()
    if getattr(args, "payload", None) is not None:
        return args.payload.encode("utf-8")
    return None


async def check_api(api_url: str, timeout: float = 5.0) -> tuple[str, str]:
    """
    Check if the push API is reachable and healthy.

    Returns:
        (status, message) where status is "OK", "WARN", or "ERROR"
    """
    try:
        async with httpx.AsyncClient(timeout=timeout) as client:
            response = await client.get(f"{api_url}/health")
            if response.status_code == 200:
                return "OK", "API is healthy"
            else:
                return "WARN", f"API returned status {response.status_code}"
    except httpx.ConnectError:
        return "ERROR", "Cannot connect to API (connection refused)"
    except httpx.TimeoutException:
        return "ERROR", "API connection timeout"
    except Exception as e:
        return "ERROR", f"Unexpected error: {e}"


async def check_vapid_endpoint(api_url: str, timeout: float = 5.0) -> tuple[str, str]:
    """
    Check that the API hands out a VAPID public key.

    Returns:
        (status, message) where status is "OK", "WARN", or "ERROR"
    """
    try:
        async with httpx.AsyncClient(timeout=timeout) as client:
            response = await client.get(f"{api_url}/push/vapid-public-key")
            if response.status_code == 200:
                return "OK", "Public key published"
            else:
                return "WARN", f"Key endpoint returned status {response.status_code}"
    except Exception as e:
        return "WARN", f"Key endpoint test failed: {e}"


def check_vapid_config() -> tuple[str, str]:
    """Check the local VAPID key pair."""
    push = get_config().push
    if not push.is_configured:
        return "ERROR", "VAPID_PUBLIC_KEY / VAPID_PRIVATE_KEY not set"
    if not is_valid_public_key(push.public_key):
        return "WARN", "VAPID public key is not an uncompressed P-256 point"
    return "OK", f"Key pair present (subject: {push.subject})"


def check_subscription_store() -> tuple[str, str]:
    """Check the local subscription database and count active subscriptions."""
    db_path = get_config().push.subscriptions_db
    try:
        stats = SubscriptionStore(db_path).get_stats()
    except (OSError, sqlite3.Error) as e:
        return "ERROR", f"Cannot open {db_path}: {e}"
    if stats["active"] == 0:
        return "WARN", f"No active subscriptions ({stats['total']} stored)"
    return "OK", f"{stats['active']} active subscriptions for {stats['users']} users"


def format_check_result(name: str, status: str, message: str, width: int = 40) -> str:
    """Format a check result line."""
    padding = " " * max(1, width - len(name))

    if status == "OK":
        status_str = colorize("[OK]", Colors.GREEN)
    elif status == "WARN":
        status_str = colorize("[WARN]", Colors.YELLOW)
    else:  # ERROR
        status_str = colorize("[ERROR]", Colors.RED)

    return f"{name}:{padding}{status_str} {message}"


def cmd_preview(args) -> int:
    """
    Print the show request the service worker would issue for a payload.

    Returns:
        Exit code (always 0)
    """
    raw = read_payload(args)
    model = normalize(PushMessageData(raw) if raw is not None else None)
    options = build_show_options(model)
    print(json.dumps({"title": model.title, "options": options.to_dict()}, indent=2, ensure_ascii=False))
    return 0


async def cmd_simulate_click(args) -> int:
    """
    Run push -> click against the in-process host and print the outcome.

    Returns:
        Exit code (0 on success, 1 if an event failed)
    """
    config = get_config()
    if args.origin:
        config = config.model_copy(
            update={"worker": config.worker.model_copy(update={"origin": args.origin})}
        )

    windows: List[WindowClient] = [
        WindowClient(client_id=f"w{i}", url=url)
        for i, url in enumerate(args.window or [], start=1)
    ]
    host = ServiceWorkerHost(
        windows=LocalWindowBroker(
            windows,
            supports_open_window=not args.no_open_window,
            origin=config.worker.origin,
        ),
        config=config,
    )

    raw = read_payload(args)
    if not await host.push(raw):
        print(colorize("✗ Push event failed", Colors.RED), file=sys.stderr)
        return 1

    notification = host.notifications.latest()
    print(f"Shown: {notification.title} - {notification.options.body}")

    if args.dismiss:
        ok = await host.dismiss(notification.notification_id)
    else:
        ok = await host.click(notification.notification_id, args.action)
    if not ok:
        print(colorize("✗ Notification event failed", Colors.RED), file=sys.stderr)
        return 1

    print(f"Notification state: {notification.state.value}")
    for window in host.windows.windows:
        marker = "*" if window.focused else " "
        print(f" {marker} {window.client_id}: {window.url}")
    return 0


async def cmd_doctor(args) -> int:
    """
    Run health checks and print a summary.

    Returns:
        Exit code (0 on success, non-zero on critical failure)
    """
    print(colorize("\nCobraFácil Push Doctor", Colors.BOLD))
    print(colorize("=" * 60, Colors.BOLD))
    print()

    api_url = args.api_url or os.getenv("COBRAFACIL_API_URL", "http://localhost:8000")

    all_ok = True

    status, message = check_vapid_config()
    print(format_check_result("VAPID keys", status, message))
    if status == "ERROR":
        all_ok = False

    status, message = check_subscription_store()
    print(format_check_result("Subscription database", status, message))
    if status == "ERROR":
        all_ok = False

    status, message = await check_api(api_url, timeout=args.timeout)
    print(format_check_result(f"API ({api_url})", status, message))
    if status == "ERROR":
        all_ok = False

    if status == "OK":
        status, message = await check_vapid_endpoint(api_url, timeout=args.timeout)
        print(format_check_result("VAPID public key endpoint", status, message))

    print()

    if all_ok:
        print(colorize("✓ All critical checks passed", Colors.GREEN))
        return 0
    else:
        print(colorize("✗ One or more critical checks failed", Colors.RED))
        return 1


def cmd_send(args) -> int:
    """
    Send a push through the local subscription database.

    Returns:
        Exit code (0 on success, non-zero on failure)
    """
    config = get_config()
    try:
        request = SendPushRequest(
            user_id=args.user_id,
            title=args.title,
            body=args.body,
            url=args.url,
            tag=args.tag,
        )
        sender = PushSender(SubscriptionStore(config.push.subscriptions_db))
        result = sender.send(request)
    except (CobraFacilError, ValueError) as e:
        print(colorize(f"✗ Failed to send push: {e}", Colors.RED), file=sys.stderr)
        return 1

    print(colorize(
        f"✓ Sent: {result.sent}, Failed: {result.failed}, Expired: {result.expired_removed}",
        Colors.GREEN,
    ))
    if result.message:
        print(result.message)
    return 0


def cmd_version(args) -> int:
    """
    Print version information.

    Returns:
        Exit code (always 0)
    """
    print(f"cobractl version {__version__}")
    print("CobraFácil Push - Web Push delivery for loan and billing reminders")
    return 0


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser for cobractl."""
    parser = argparse.ArgumentParser(
        description="CobraFácil Push operational CLI",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  cobractl preview '{"title": "Pagamento recebido"}'
  cobractl simulate-click '{"url": "/loans/42"}' --window https://cobrafacil.online/dashboard
  cobractl doctor
  cobractl send --user-id 42 --title "Parcela vence hoje" --body "R$150"
  cobractl version

Environment variables:
  COBRAFACIL_API_URL                 # API URL for doctor (default: http://localhost:8000)
  VAPID_PUBLIC_KEY / VAPID_PRIVATE_KEY
  WORKER_ORIGIN                      # Application origin
        """
    )
    parser.add_argument("--log-level", default=None, help="Logging level (default: from config)")

    subparsers = parser.add_subparsers(dest="command", help="Command to run")

    preview_parser = subparsers.add_parser(
        "preview",
        help="Show the notification a payload would produce"
    )
    preview_parser.add_argument("payload", nargs="?", help="Raw payload text")
    preview_parser.add_argument("--file", help="Read payload from file ('-' for stdin)")

    simulate_parser = subparsers.add_parser(
        "simulate-click",
        help="Simulate a push followed by a click or dismissal"
    )
    simulate_parser.add_argument("payload", nargs="?", help="Raw payload text")
    simulate_parser.add_argument("--file", help="Read payload from file ('-' for stdin)")
    simulate_parser.add_argument("--action", default="", help="Action id clicked (open, close, or empty)")
    simulate_parser.add_argument("--dismiss", action="store_true", help="Dismiss instead of clicking")
    simulate_parser.add_argument("--window", action="append", help="URL of an already open window (repeatable)")
    simulate_parser.add_argument("--origin", help="Application origin (default: WORKER_ORIGIN)")
    simulate_parser.add_argument(
        "--no-open-window",
        action="store_true",
        help="Simulate a host that cannot open new windows"
    )

    doctor_parser = subparsers.add_parser(
        "doctor",
        help="Run health checks and diagnostics"
    )
    doctor_parser.add_argument("--api-url", help="Push API base URL")
    doctor_parser.add_argument(
        "--timeout",
        type=float,
        default=10.0,
        help="Timeout for HTTP requests in seconds (default: 10.0)"
    )

    send_parser = subparsers.add_parser(
        "send",
        help="Send a push to a user's subscriptions"
    )
    send_parser.add_argument("--user-id", help="Target user (omit to broadcast)")
    send_parser.add_argument("--title", required=True)
    send_parser.add_argument("--body", required=True)
    send_parser.add_argument("--url", help="Navigation target when clicked")
    send_parser.add_argument("--tag", help="Coalescing tag")

    subparsers.add_parser(
        "version",
        help="Show version information"
    )

    return parser


def main(argv=None):
    """Main entry point for cobractl CLI."""
    parser = create_parser()
    args = parser.parse_args(argv)

    setup_logging(args.log_level or get_config().log_level)

    if not args.command:
        parser.print_help()
        return 0

    # Dispatch to command handlers
    if args.command == "preview":
        return cmd_preview(args)
    elif args.command == "simulate-click":
        return asyncio.run(cmd_simulate_click(args))
    elif args.command == "doctor":
        return asyncio.run(cmd_doctor(args))
    elif args.command == "send":
        return cmd_send(args)
    elif args.command == "version":
        return cmd_version(args)
    else:
        print(f"Unknown command: {args.command}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
