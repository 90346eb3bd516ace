#!/usr/bin/env python3
"""
Notification Fan-out Service

Entry point used by the route handlers when a business event should reach
many users. One broadcast runs through:
1. Recipient resolution (single read against the user/forum tables)
2. Message composition (push + in-app projections)
3. Batched dual-channel delivery

Usage:
    from notification.service import NotificationService

    service = NotificationService.from_config(config)
    result = await service.notify_new_event("Adoption Day", "42", "maria")

Only recipient resolution can fail the call; delivery failures are counted
in the returned summary and logged.
"""

import asyncio
import logging
from typing import Optional

from core.config_loader import AppConfig, NotificationConfig
from database.database import configure_engine
from notification.channels import PushGatewayChannel, InAppChannel
from notification.coordinator import BatchCoordinator
from notification.dispatcher import DualChannelDispatcher
from notification.exceptions import ConfigError, ResolutionFailure
from notification.message_builder import NotificationMessageBuilder
from notification.models import (
    TriggerContext,
    FanoutResult,
    FanoutState,
    DispatchSummary,
    NewEvent,
    NewPost,
    GlobalChatMessage,
    ForumAdminBroadcast,
    ForumMessage,
    DirectNotice,
    context_kind,
)
from notification.resolver import RecipientResolver

logger = logging.getLogger(__name__)


class NotificationService:
    """
    Orchestrates one broadcast per trigger.

    Collaborators are injected so tests and alternative stores can swap
    them; ``from_config`` wires the production ones.
    """

    def __init__(
        self,
        resolver: RecipientResolver,
        builder: NotificationMessageBuilder,
        coordinator: BatchCoordinator,
    ):
        self.resolver = resolver
        self.builder = builder
        self.coordinator = coordinator

    @classmethod
    def from_config(cls, config: AppConfig) -> "NotificationService":
        """Build the production service and bind the session factory to ``config.database.url``."""
        service = cls.from_notification_config(config.notifications)
        configure_engine(config.database.url)
        return service

    @classmethod
    def from_notification_config(cls, config: NotificationConfig) -> "NotificationService":
        push_config = config.push
        if push_config.enabled and not push_config.dry_run and not push_config.is_configured:
            raise ConfigError(
                "Push gateway enabled but ONESIGNAL_APP_ID / ONESIGNAL_API_KEY are not set"
            )

        dispatcher = DualChannelDispatcher(
            push_channel=PushGatewayChannel(push_config),
            in_app_channel=InAppChannel(),
        )
        return cls(
            resolver=RecipientResolver(),
            builder=NotificationMessageBuilder(
                priority=push_config.priority,
                ttl_seconds=push_config.ttl_seconds,
            ),
            coordinator=BatchCoordinator(dispatcher, batch_size=config.fanout.batch_size),
        )

    async def broadcast(self, context: TriggerContext) -> FanoutResult:
        """
        Run one broadcast for ``context``.

        Raises:
            ResolutionFailure: when recipients cannot be loaded; nobody is contacted.
        """
        kind = context_kind(context)

        logger.debug(f"{kind}: {FanoutState.RESOLVING.value}")
        try:
            # Blocking DB read, kept off the event loop
            recipients = await asyncio.to_thread(self.resolver.resolve, context)
        except ResolutionFailure:
            logger.error(f"{kind}: {FanoutState.FAILED.value}, no recipients contacted")
            raise

        logger.debug(f"{kind}: {FanoutState.COMPOSING.value}")
        message = self.builder.compose(context)

        if not recipients:
            logger.info(f"No recipients for {kind}, nothing to send")
            return FanoutResult(kind=kind, state=FanoutState.DONE, summary=DispatchSummary(), message=message)

        logger.debug(f"{kind}: {FanoutState.DISPATCHING.value} to {len(recipients)} recipients")
        summary = await self.coordinator.dispatch_all(recipients, message)

        return FanoutResult(kind=kind, state=FanoutState.DONE, summary=summary, message=message)

    async def notify_new_event(
        self,
        title: str,
        event_id: str,
        creator_name: Optional[str] = None
    ) -> FanoutResult:
        return await self.broadcast(NewEvent(event_id=str(event_id), title=title, creator_name=creator_name))

    async def notify_forum_admin_broadcast(
        self,
        forum_id: int,
        admin_username: Optional[str],
        message: str,
        sender_id: str,
        image_url: Optional[str] = None
    ) -> FanoutResult:
        return await self.broadcast(ForumAdminBroadcast(
            forum_id=forum_id,
            admin_name=admin_username,
            message=message,
            sender_id=sender_id,
            image_url=image_url,
        ))

    async def notify_global_chat(
        self,
        sender_username: Optional[str],
        message: str,
        sender_id: str,
        sender_role: Optional[int],
        image_url: Optional[str] = None
    ) -> FanoutResult:
        return await self.broadcast(GlobalChatMessage(
            sender_name=sender_username,
            message=message,
            sender_id=sender_id,
            sender_role=sender_role,
            image_url=image_url,
        ))

    async def notify_new_post(self, title: str, post_id: str, category: str) -> FanoutResult:
        return await self.broadcast(NewPost(post_id=str(post_id), title=title, category=category))

    async def notify_forum_message(
        self,
        forum_id: int,
        sender_username: Optional[str],
        message: str,
        sender_id: str,
        image_url: Optional[str] = None
    ) -> FanoutResult:
        return await self.broadcast(ForumMessage(
            forum_id=forum_id,
            sender_name=sender_username,
            message=message,
            sender_id=sender_id,
            image_url=image_url,
        ))

    async def notify_user(self, user_id: str, title: str, message: str, route: str) -> FanoutResult:
        return await self.broadcast(DirectNotice(user_id=user_id, title=title, message=message, route=route))


def run_broadcast(service: NotificationService, context: TriggerContext) -> FanoutResult:
    """Blocking wrapper for callers without a running event loop."""
    return asyncio.run(service.broadcast(context))
