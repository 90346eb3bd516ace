"""
Notification Module

Fan-out engine that delivers one business event to many users over two
independent channels: the push gateway and the in-app inbox.

Usage:
    from notification import NotificationService

    service = NotificationService.from_config(config)
    result = await service.notify_global_chat(
        sender_username='maria',
        message='Adoption day starts at 10!',
        sender_id='user-123',
        sender_role=1,
    )
    print(result.summary.push.failed, result.summary.in_app.failed)
"""

from notification.models import (
    Recipient,
    NewEvent,
    ForumAdminBroadcast,
    GlobalChatMessage,
    NewPost,
    ForumMessage,
    DirectNotice,
    TriggerContext,
    NotificationMessage,
    PushProjection,
    InAppProjection,
    Channel,
    ChannelOutcome,
    RecipientOutcome,
    DispatchSummary,
    FanoutResult,
    FanoutState,
)

from notification.exceptions import (
    NotificationError,
    ConfigError,
    ResolutionFailure,
    DeliveryFailed,
    PushDeliveryFailed,
    InAppPersistFailed,
)

from notification.channels import (
    NotificationChannel,
    PushGatewayChannel,
    InAppChannel,
)

from notification.resolver import RecipientResolver
from notification.message_builder import NotificationMessageBuilder
from notification.dispatcher import DualChannelDispatcher
from notification.coordinator import BatchCoordinator, chunked, DEFAULT_BATCH_SIZE

from notification.service import (
    NotificationService,
    run_broadcast,
)

__all__ = [
    # Models
    'Recipient',
    'NewEvent',
    'ForumAdminBroadcast',
    'GlobalChatMessage',
    'NewPost',
    'ForumMessage',
    'DirectNotice',
    'TriggerContext',
    'NotificationMessage',
    'PushProjection',
    'InAppProjection',
    'Channel',
    'ChannelOutcome',
    'RecipientOutcome',
    'DispatchSummary',
    'FanoutResult',
    'FanoutState',
    # Errors
    'NotificationError',
    'ConfigError',
    'ResolutionFailure',
    'DeliveryFailed',
    'PushDeliveryFailed',
    'InAppPersistFailed',
    # Channels
    'NotificationChannel',
    'PushGatewayChannel',
    'InAppChannel',
    # Pipeline
    'RecipientResolver',
    'NotificationMessageBuilder',
    'DualChannelDispatcher',
    'BatchCoordinator',
    'chunked',
    'DEFAULT_BATCH_SIZE',
    # Service
    'NotificationService',
    'run_broadcast',
]
