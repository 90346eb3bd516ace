#!/usr/bin/env python3
"""
Notification Channels

The two delivery channels every broadcast uses:
- PushGatewayChannel: posts to the OneSignal-style push API, addressed by the
  recipient's external id alias
- InAppChannel: inserts a row into the notifications table

Channels are blocking and raise a DeliveryFailed subclass on any failure.
The dispatcher runs them off the event loop and turns errors into outcomes.

Usage:
    from notification.channels import PushGatewayChannel, InAppChannel

    push = PushGatewayChannel(config.notifications.push)
    push.send(recipient, message)
"""

from abc import ABC, abstractmethod
from typing import Dict, Any, Callable, ContextManager
import json
import logging

import requests
from sqlalchemy.orm import Session

from core.config_loader import PushGatewayConfig
from database.database import db_session_scope
from database.repositories import NotificationRepository
from notification.exceptions import ConfigError, PushDeliveryFailed, InAppPersistFailed
from notification.models import Recipient, NotificationMessage, Channel

logger = logging.getLogger(__name__)

USER_AGENT = 'PawsConnect-Notification-Service/1.0'


def _mask_id(user_id: str) -> str:
    """Shorten an opaque user id for logging."""
    if len(user_id) <= 8:
        return user_id
    return f"{user_id[:8]}…"


class NotificationChannel(ABC):
    """
    Abstract base class for delivery channels.

    ``send`` returns nothing on success and raises on failure; the caller
    decides what a failure means for the broadcast.
    """

    @property
    @abstractmethod
    def channel(self) -> Channel:
        """Return the channel identifier."""
        pass

    @property
    def enabled(self) -> bool:
        return True

    @abstractmethod
    def send(self, recipient: Recipient, message: NotificationMessage) -> None:
        pass

    def validate_config(self) -> bool:
        return True


class PushGatewayChannel(NotificationChannel):
    """Push notification channel via the gateway's REST API."""

    def __init__(self, config: PushGatewayConfig):
        self.config = config

    @property
    def channel(self) -> Channel:
        return Channel.PUSH

    @property
    def enabled(self) -> bool:
        return self.config.enabled

    def validate_config(self) -> bool:
        return self.config.is_configured

    def build_payload(self, recipient: Recipient, message: NotificationMessage) -> Dict[str, Any]:
        """Build the gateway request body for one recipient."""
        push = message.push
        payload: Dict[str, Any] = {
            'app_id': self.config.app_id,
            'contents': {'en': push.body},
            'headings': {'en': push.title},
            'target_channel': 'push',
            'include_aliases': {'external_id': [recipient.id]},
            'data': {'route': push.route},
            'priority': push.priority,
            'ttl': push.ttl,
        }
        if push.image_url:
            payload['big_picture'] = push.image_url
        return payload

    def _headers(self) -> Dict[str, str]:
        return {
            'Authorization': f"Bearer Key {self.config.api_key}",
            'Content-Type': 'application/json',
            'User-Agent': USER_AGENT,
        }

    def send(self, recipient: Recipient, message: NotificationMessage) -> None:
        if not self.enabled:
            logger.debug(f"Push channel disabled, skipping {_mask_id(recipient.id)}")
            return

        payload = self.build_payload(recipient, message)

        if self.config.dry_run:
            logger.info(f"[DRY RUN] push to {_mask_id(recipient.id)}: {json.dumps(payload, ensure_ascii=False)}")
            return

        if not self.validate_config():
            raise PushDeliveryFailed(recipient.id, ConfigError("push gateway app_id/api_key not set"))

        try:
            response = requests.post(
                self.config.api_url,
                json=payload,
                headers=self._headers(),
                timeout=self.config.timeout_seconds,
            )
        except requests.RequestException as e:
            raise PushDeliveryFailed(recipient.id, e) from e

        if not 200 <= response.status_code < 300:
            detail = (response.text or '')[:200]
            raise PushDeliveryFailed(recipient.id, f"gateway returned {response.status_code}: {detail}")

        logger.debug(f"Push sent to {_mask_id(recipient.id)}")


class InAppChannel(NotificationChannel):
    """In-app notification channel (stores a row per recipient)."""

    def __init__(self, session_scope: Callable[[], ContextManager[Session]] = db_session_scope):
        self._session_scope = session_scope

    @property
    def channel(self) -> Channel:
        return Channel.IN_APP

    def send(self, recipient: Recipient, message: NotificationMessage) -> None:
        try:
            with self._session_scope() as session:
                NotificationRepository(session).create(
                    user_id=recipient.id,
                    title=message.in_app.title,
                    content=message.in_app.content,
                )
        except Exception as e:
            raise InAppPersistFailed(recipient.id, e) from e

        logger.debug(f"In-app notification stored for {_mask_id(recipient.id)}")
