import yaml
import os
from typing import Optional
from pydantic import BaseModel, Field, field_validator


DEFAULT_PUSH_API_URL = "https://api.onesignal.com/notifications?c=push"


class DatabaseConfig(BaseModel):
    url: str


class PushGatewayConfig(BaseModel):
    """
    Configuration for the push-notification gateway.

    Credentials are loaded once per process and handed to the push channel
    at construction time.
    """
    enabled: bool = True
    api_url: str = DEFAULT_PUSH_API_URL
    app_id: Optional[str] = None
    api_key: Optional[str] = None
    priority: int = 10
    ttl_seconds: int = 259200  # 3 days
    timeout_seconds: float = 30.0
    dry_run: bool = False  # Log payloads instead of sending

    @property
    def is_configured(self) -> bool:
        return bool(self.app_id and self.api_key)


class FanoutConfig(BaseModel):
    """Batching settings for broadcast delivery."""
    batch_size: int = 50

    @field_validator("batch_size")
    @classmethod
    def _positive_batch_size(cls, value: int) -> int:
        if value < 1:
            raise ValueError("batch_size must be at least 1")
        return value


class NotificationConfig(BaseModel):
    """
    Configuration for notification fan-out.

    Controls the push gateway channel and how recipients are batched.
    """
    push: PushGatewayConfig = Field(default_factory=PushGatewayConfig)
    fanout: FanoutConfig = Field(default_factory=FanoutConfig)


class AppConfig(BaseModel):
    database: DatabaseConfig
    notifications: NotificationConfig = Field(default_factory=NotificationConfig)


def load_config(config_path: str = "config.yaml") -> AppConfig:
    # If not found at relative path (e.g. running from root), try absolute or adjusted path
    if not os.path.exists(config_path):
        base_dir = os.path.dirname(os.path.abspath(__file__))
        config_path = os.path.join(base_dir, "..", "config.yaml")

    with open(config_path, "r") as f:
        data = yaml.safe_load(f) or {}

    # Allow env var override for DB URL
    env_db_url = os.environ.get("DATABASE_URL")
    if env_db_url:
        data.setdefault('database', {})
        data['database']['url'] = env_db_url

    notifications = data.get('notifications') or {}
    push = notifications.get('push') or {}

    # Gateway credentials usually come from the environment, not the file
    env_app_id = os.environ.get("ONESIGNAL_APP_ID")
    if env_app_id:
        push['app_id'] = env_app_id

    env_api_key = os.environ.get("ONESIGNAL_API_KEY")
    if env_api_key:
        push['api_key'] = env_api_key

    if os.environ.get('NOTIFICATION_DRY_RUN', '').lower() in ('true', '1', 'yes'):
        push['dry_run'] = True

    env_batch_size = os.environ.get("NOTIFICATION_BATCH_SIZE")
    if env_batch_size:
        fanout = notifications.get('fanout') or {}
        fanout['batch_size'] = int(env_batch_size)
        notifications['fanout'] = fanout

    notifications['push'] = push
    data['notifications'] = notifications

    return AppConfig(**data)
