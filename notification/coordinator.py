"""
Batch coordination for broadcast delivery.

Recipients are split into fixed-size batches in resolver order. All
recipients of a batch are dispatched concurrently and the coordinator waits
for every one of them to settle before starting the next batch, which bounds
the number of in-flight gateway calls and database writes to ``batch_size``.

Sends run on a thread pool owned by each ``dispatch_all`` call, sized so
every push and in-app send of a full batch has its own worker.
"""

import asyncio
import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Iterator, List, Sequence, TypeVar

from notification.dispatcher import DualChannelDispatcher
from notification.models import (
    Recipient,
    NotificationMessage,
    RecipientOutcome,
    ChannelOutcome,
    Channel,
    DispatchSummary,
)

logger = logging.getLogger(__name__)

DEFAULT_BATCH_SIZE = 50

T = TypeVar("T")


def chunked(items: Sequence[T], size: int) -> Iterator[List[T]]:
    """Yield consecutive slices of ``items`` with at most ``size`` elements."""
    if size < 1:
        raise ValueError("batch size must be at least 1")
    for start in range(0, len(items), size):
        yield list(items[start:start + size])


class BatchCoordinator:
    def __init__(self, dispatcher: DualChannelDispatcher, batch_size: int = DEFAULT_BATCH_SIZE):
        if batch_size < 1:
            raise ValueError("batch size must be at least 1")
        self.dispatcher = dispatcher
        self.batch_size = batch_size

    async def dispatch_all(self, recipients: Sequence[Recipient], message: NotificationMessage) -> DispatchSummary:
        """
        Deliver ``message`` to every recipient, batch by batch.

        Never raises for a recipient-level failure; anything a single
        delivery throws is recorded as a failure on both channels.
        """
        summary = DispatchSummary()
        batches = list(chunked(recipients, self.batch_size))
        if not batches:
            return summary

        # Two channels per recipient
        executor = ThreadPoolExecutor(
            max_workers=2 * len(batches[0]),
            thread_name_prefix=f"fanout-{message.kind}",
        )
        try:
            for index, batch in enumerate(batches, start=1):
                logger.info(f"Sending batch {index}/{len(batches)} ({len(batch)} recipients)")
                results = await asyncio.gather(
                    *(self.dispatcher.deliver(recipient, message, executor) for recipient in batch),
                    return_exceptions=True,
                )
                summary.batch_sizes.append(len(batch))

                for recipient, result in zip(batch, results):
                    if isinstance(result, BaseException):
                        if not isinstance(result, Exception):
                            raise result
                        logger.error(f"Delivery to {recipient.id} crashed: {result}")
                        result = RecipientOutcome(
                            recipient_id=recipient.id,
                            push=ChannelOutcome.failed(Channel.PUSH, result),
                            in_app=ChannelOutcome.failed(Channel.IN_APP, result),
                        )
                    summary.record(result)
        finally:
            executor.shutdown(wait=False)

        if summary.has_failures:
            logger.warning(
                f"{message.kind} broadcast finished with failures: "
                f"push {summary.push.failed}/{summary.push.attempted} failed, "
                f"in-app {summary.in_app.failed}/{summary.in_app.attempted} failed"
            )
        else:
            logger.info(f"{message.kind} broadcast delivered to {summary.recipients} recipients in {summary.batches} batch(es)")

        return summary
