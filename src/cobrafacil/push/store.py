"""
Push subscription persistent storage.
"""

import logging
import sqlite3
from datetime import datetime
from pathlib import Path
from typing import Dict, Iterable, List, Optional

from .models import PushSubscription

logger = logging.getLogger(__name__)


class SubscriptionStore:
    """
    Persistent storage for push subscriptions using SQLite.

    A user has at most one row per endpoint.
    """

    def __init__(self, db_path: str = "/var/lib/cobrafacil/push_subscriptions.db"):
        """
        Initialize subscription store.

        Args:
            db_path: Path to SQLite database file
        """
        self.db_path = Path(db_path)
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        self._init_db()

    def _init_db(self) -> None:
        """Initialize database schema."""
        with sqlite3.connect(self.db_path) as conn:
            conn.execute("""
                CREATE TABLE IF NOT EXISTS push_subscriptions (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    user_id TEXT NOT NULL,
                    endpoint TEXT NOT NULL,
                    p256dh TEXT NOT NULL,
                    auth TEXT NOT NULL,
                    device_name TEXT,
                    is_active INTEGER NOT NULL DEFAULT 1,
                    created_at TEXT NOT NULL,
                    last_used_at TEXT,
                    UNIQUE (user_id, endpoint)
                )
            """)

            conn.execute("CREATE INDEX IF NOT EXISTS idx_push_user ON push_subscriptions(user_id)")
            conn.execute("CREATE INDEX IF NOT EXISTS idx_push_active ON push_subscriptions(is_active)")

            conn.commit()

        logger.info(f"Initialized push subscription database at {self.db_path}")

    def upsert(self, subscription: PushSubscription) -> PushSubscription:
        """
        Insert a subscription, or refresh keys and reactivate an existing one.

        Args:
            subscription: Subscription to save

        Returns:
            The stored subscription, with its id
        """
        with sqlite3.connect(self.db_path) as conn:
            conn.execute(
                """
                INSERT INTO push_subscriptions (
                    user_id, endpoint, p256dh, auth, device_name, is_active, created_at
                ) VALUES (?, ?, ?, ?, ?, ?, ?)
                ON CONFLICT (user_id, endpoint) DO UPDATE SET
                    p256dh = excluded.p256dh,
                    auth = excluded.auth,
                    device_name = excluded.device_name,
                    is_active = excluded.is_active
                """,
                (
                    subscription.user_id,
                    subscription.endpoint,
                    subscription.p256dh,
                    subscription.auth,
                    subscription.device_name,
                    int(subscription.is_active),
                    subscription.created_at.isoformat(),
                ),
            )
            conn.commit()

        stored = self.get(subscription.user_id, subscription.endpoint)
        logger.debug(f"Saved push subscription {stored.id} for user {subscription.user_id}")
        return stored

    def get(self, user_id: str, endpoint: str) -> Optional[PushSubscription]:
        """
        Get a subscription by user and endpoint.

        Returns:
            PushSubscription or None if not found
        """
        with sqlite3.connect(self.db_path) as conn:
            conn.row_factory = sqlite3.Row
            cursor = conn.execute(
                "SELECT * FROM push_subscriptions WHERE user_id = ? AND endpoint = ?",
                (user_id, endpoint),
            )
            row = cursor.fetchone()

            if not row:
                return None

            return self._row_to_subscription(dict(row))

    def is_active(self, user_id: str, endpoint: str) -> bool:
        subscription = self.get(user_id, endpoint)
        return subscription is not None and subscription.is_active

    def find_active(
        self,
        user_id: Optional[str] = None,
        user_ids: Optional[Iterable[str]] = None,
    ) -> List[PushSubscription]:
        """
        Active subscriptions for one user, a set of users, or everyone.

        Args:
            user_id: Single target user (takes precedence over user_ids)
            user_ids: Several target users

        Returns:
            List of active subscriptions
        """
        query = "SELECT * FROM push_subscriptions WHERE is_active = 1"
        params: list = []

        if user_id:
            query += " AND user_id = ?"
            params.append(user_id)
        elif user_ids is not None:
            user_ids = list(user_ids)
            if not user_ids:
                return []
            placeholders = ", ".join("?" for _ in user_ids)
            query += f" AND user_id IN ({placeholders})"
            params.extend(user_ids)

        query += " ORDER BY id"

        with sqlite3.connect(self.db_path) as conn:
            conn.row_factory = sqlite3.Row
            cursor = conn.execute(query, params)
            return [self._row_to_subscription(dict(row)) for row in cursor.fetchall()]

    def delete(self, user_id: str, endpoint: str) -> bool:
        """Remove a subscription. Returns True if a row was deleted."""
        with sqlite3.connect(self.db_path) as conn:
            cursor = conn.execute(
                "DELETE FROM push_subscriptions WHERE user_id = ? AND endpoint = ?",
                (user_id, endpoint),
            )
            conn.commit()
            return cursor.rowcount > 0

    def touch(self, subscription_id: int, when: Optional[datetime] = None) -> None:
        """Record a successful delivery."""
        when = when or datetime.utcnow()
        with sqlite3.connect(self.db_path) as conn:
            conn.execute(
                "UPDATE push_subscriptions SET last_used_at = ? WHERE id = ?",
                (when.isoformat(), subscription_id),
            )
            conn.commit()

    def deactivate(self, subscription_ids: Iterable[int]) -> int:
        """
        Mark subscriptions inactive.

        Returns:
            Number of rows updated
        """
        ids = list(subscription_ids)
        if not ids:
            return 0

        placeholders = ", ".join("?" for _ in ids)
        with sqlite3.connect(self.db_path) as conn:
            cursor = conn.execute(
                f"UPDATE push_subscriptions SET is_active = 0 WHERE id IN ({placeholders})",
                ids,
            )
            conn.commit()
            return cursor.rowcount

    def get_stats(self) -> Dict[str, int]:
        """Subscription counts."""
        with sqlite3.connect(self.db_path) as conn:
            total = conn.execute("SELECT COUNT(*) FROM push_subscriptions").fetchone()[0]
            active = conn.execute(
                "SELECT COUNT(*) FROM push_subscriptions WHERE is_active = 1"
            ).fetchone()[0]
            users = conn.execute(
                "SELECT COUNT(DISTINCT user_id) FROM push_subscriptions WHERE is_active = 1"
            ).fetchone()[0]

        return {"total": total, "active": active, "users": users}

    def _row_to_subscription(self, row: Dict) -> PushSubscription:
        """Convert database row to PushSubscription."""
        return PushSubscription(
            id=row["id"],
            user_id=row["user_id"],
            endpoint=row["endpoint"],
            p256dh=row["p256dh"],
            auth=row["auth"],
            device_name=row["device_name"],
            is_active=bool(row["is_active"]),
            created_at=datetime.fromisoformat(row["created_at"]),
            last_used_at=datetime.fromisoformat(row["last_used_at"]) if row["last_used_at"] else None,
        )
