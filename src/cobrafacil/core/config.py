"""
Configuration management for CobraFácil Push.

Uses Pydantic Settings for environment variable validation and type safety.
"""

from typing import List, Optional
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings


class NotificationDefaultsConfig(BaseSettings):
    """Values used when a push payload omits a field."""

    title: str = Field(
        default="CobraFácil",
        description="Notification title when the payload has none"
    )
    body: str = Field(
        default="Você tem uma nova notificação",
        description="Notification body when the payload has none"
    )
    icon: str = Field(
        default="/pwa-192x192.png",
        description="Application icon asset path"
    )
    badge: str = Field(
        default="/pwa-192x192.png",
        description="Badge icon asset path"
    )
    tag: str = Field(
        default="cobrafacil-notification",
        description="Tag used by the platform to coalesce notifications"
    )
    url: str = Field(
        default="/dashboard",
        description="Navigation target when the payload carries no URL"
    )
    open_action_title: str = Field(
        default="Open",
        description="Label of the open action button"
    )
    close_action_title: str = Field(
        default="Close",
        description="Label of the close action button"
    )

    class Config:
        env_prefix = "NOTIFY_"


class WorkerConfig(BaseSettings):
    """Service worker behaviour."""

    origin: str = Field(
        default="https://cobrafacil.online",
        description="Deployment origin used to recognise application windows"
    )
    loose_origin_match: bool = Field(
        default=False,
        description="Match windows whose URL merely contains the origin string"
    )
    vibrate_pattern: List[int] = Field(
        default_factory=lambda: [200, 100, 200],
        description="Vibration pattern in milliseconds"
    )
    require_interaction: bool = Field(
        default=True,
        description="Keep notifications on screen until dismissed"
    )

    @field_validator("vibrate_pattern")
    @classmethod
    def validate_vibrate_pattern(cls, v: List[int]) -> List[int]:
        """Validate vibration durations are non-negative."""
        if any(d < 0 for d in v):
            raise ValueError("Vibration durations must be non-negative")
        return v

    class Config:
        env_prefix = "WORKER_"


class PushConfig(BaseSettings):
    """VAPID credentials and subscription storage."""

    public_key: Optional[str] = Field(
        default=None,
        description="VAPID public key (base64url, uncompressed P-256 point)"
    )
    private_key: Optional[str] = Field(
        default=None,
        description="VAPID private key (base64url or PEM)"
    )
    subject: str = Field(
        default="mailto:contato@cobrafacil.online",
        description="VAPID subject claim"
    )
    ttl: int = Field(
        default=86400,
        ge=0,
        description="Seconds the push service keeps an undelivered message"
    )
    subscriptions_db: str = Field(
        default="/var/lib/cobrafacil/push_subscriptions.db",
        description="Path to the push subscription database"
    )

    @property
    def is_configured(self) -> bool:
        """Both halves of the key pair are present."""
        return bool(self.public_key and self.private_key)

    class Config:
        env_prefix = "VAPID_"


class ApiConfig(BaseSettings):
    """HTTP API server configuration."""

    host: str = Field(default="0.0.0.0", description="Bind address")
    port: int = Field(default=8000, ge=1, le=65535, description="Bind port")
    cors_origins: List[str] = Field(
        default_factory=lambda: ["http://localhost:5173", "https://cobrafacil.online"],
        description="Origins allowed to call the API from a browser"
    )

    class Config:
        env_prefix = "API_"


class AppConfig(BaseSettings):
    """Main application configuration."""

    log_level: str = Field(
        default="INFO",
        description="Logging level (DEBUG, INFO, WARNING, ERROR)"
    )

    # Nested configurations
    notifications: NotificationDefaultsConfig = Field(default_factory=NotificationDefaultsConfig)
    worker: WorkerConfig = Field(default_factory=WorkerConfig)
    push: PushConfig = Field(default_factory=PushConfig)
    api: ApiConfig = Field(default_factory=ApiConfig)

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level."""
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        v = v.upper()
        if v not in valid_levels:
            raise ValueError(f"Log level must be one of: {valid_levels}")
        return v

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = False
        extra = "ignore"


# Global config instance
_config: Optional[AppConfig] = None


def get_config() -> AppConfig:
    """
    Get the global configuration instance.

    Lazily loads configuration on first access.

    Returns:
        AppConfig: The global configuration instance
    """
    global _config
    if _config is None:
        _config = AppConfig(
            notifications=NotificationDefaultsConfig(),
            worker=WorkerConfig(),
            push=PushConfig(),
            api=ApiConfig(),
        )
    return _config


def reload_config() -> AppConfig:
    """
    Reload configuration from environment variables.

    Useful for testing or when environment changes.

    Returns:
        AppConfig: The reloaded configuration instance
    """
    global _config
    _config = None
    return get_config()
