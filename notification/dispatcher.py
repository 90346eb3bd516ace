"""
Dual-channel delivery to a single recipient.

Push and in-app sends run concurrently in worker threads with no shared
transaction. Each is settled on its own, so a failure on one channel never
blocks or undoes the other.
"""

import asyncio
import functools
import logging
from concurrent.futures import Executor
from typing import Optional

from notification.channels import NotificationChannel
from notification.exceptions import DeliveryFailed
from notification.models import (
    Recipient,
    NotificationMessage,
    RecipientOutcome,
    ChannelOutcome,
)

logger = logging.getLogger(__name__)


class DualChannelDispatcher:
    def __init__(self, push_channel: NotificationChannel, in_app_channel: NotificationChannel):
        self.push_channel = push_channel
        self.in_app_channel = in_app_channel

    async def _send(
        self,
        channel: NotificationChannel,
        recipient: Recipient,
        message: NotificationMessage,
        executor: Optional[Executor]
    ) -> ChannelOutcome:
        if not channel.enabled:
            return ChannelOutcome.skipped_outcome(channel.channel)

        loop = asyncio.get_running_loop()
        try:
            await loop.run_in_executor(executor, functools.partial(channel.send, recipient, message))
        except DeliveryFailed as e:
            logger.error(f"{e}")
            return ChannelOutcome.failed(channel.channel, e)
        except Exception as e:
            logger.error(f"Unexpected {channel.channel.value} error for {recipient.id}: {e}", exc_info=True)
            return ChannelOutcome.failed(channel.channel, e)
        return ChannelOutcome.ok(channel.channel)

    async def deliver(
        self,
        recipient: Recipient,
        message: NotificationMessage,
        executor: Optional[Executor] = None
    ) -> RecipientOutcome:
        """
        Send ``message`` to ``recipient`` on both channels; never raises for delivery errors.

        Blocking sends run on ``executor``, or the loop's default pool when omitted.
        """
        push_outcome, in_app_outcome = await asyncio.gather(
            self._send(self.push_channel, recipient, message, executor),
            self._send(self.in_app_channel, recipient, message, executor),
        )
        return RecipientOutcome(
            recipient_id=recipient.id,
            push=push_outcome,
            in_app=in_app_outcome,
        )
