"""
Notification domain types.

Trigger contexts form a closed set of frozen dataclasses; every component that
branches on them (resolver, message builder) raises ``TypeError`` for an
unknown variant so a newly added trigger cannot be silently ignored.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Union, List

from pydantic import BaseModel

from database.models import ROLE_ADMIN


@dataclass(frozen=True)
class Recipient:
    """A user a notification is addressed to."""
    id: str
    display_name: Optional[str] = None
    role: Optional[int] = None
    status: Optional[str] = None
    muted: bool = False

    @property
    def is_admin(self) -> bool:
        return self.role == ROLE_ADMIN


# ============ Trigger contexts ============

@dataclass(frozen=True)
class NewEvent:
    event_id: str
    title: str
    creator_name: Optional[str] = None


@dataclass(frozen=True)
class ForumAdminBroadcast:
    forum_id: int
    admin_name: Optional[str]
    message: str
    sender_id: str
    image_url: Optional[str] = None


@dataclass(frozen=True)
class GlobalChatMessage:
    sender_name: Optional[str]
    message: str
    sender_id: str
    sender_role: Optional[int] = None
    image_url: Optional[str] = None

    @property
    def from_admin(self) -> bool:
        return self.sender_role == ROLE_ADMIN


@dataclass(frozen=True)
class NewPost:
    post_id: str
    title: str
    category: str


@dataclass(frozen=True)
class ForumMessage:
    """Ordinary member message in a forum chat (respects member mute)."""
    forum_id: int
    sender_name: Optional[str]
    message: str
    sender_id: str
    image_url: Optional[str] = None


@dataclass(frozen=True)
class DirectNotice:
    """Single-recipient notice, e.g. an adoption decision."""
    user_id: str
    title: str
    message: str
    route: str


TriggerContext = Union[
    NewEvent,
    ForumAdminBroadcast,
    GlobalChatMessage,
    NewPost,
    ForumMessage,
    DirectNotice,
]

TRIGGER_TYPES = (NewEvent, ForumAdminBroadcast, GlobalChatMessage, NewPost, ForumMessage, DirectNotice)


def context_kind(context: TriggerContext) -> str:
    return type(context).__name__


# ============ Composed message ============

class PushProjection(BaseModel):
    title: str
    body: str
    route: str
    image_url: Optional[str] = None
    priority: int = 10
    ttl: int = 259200


class InAppProjection(BaseModel):
    title: str
    content: str
    route: str


class NotificationMessage(BaseModel):
    """One message, two channel-specific renderings of it."""
    kind: str
    push: PushProjection
    in_app: InAppProjection


# ============ Outcomes ============

class Channel(Enum):
    PUSH = "push"
    IN_APP = "in_app"


class FanoutState(Enum):
    IDLE = "idle"
    RESOLVING = "resolving"
    COMPOSING = "composing"
    DISPATCHING = "dispatching"
    DONE = "done"
    FAILED = "failed"


@dataclass(frozen=True)
class ChannelOutcome:
    channel: Channel
    success: bool
    error: Optional[str] = None
    skipped: bool = False

    @classmethod
    def ok(cls, channel: Channel) -> "ChannelOutcome":
        return cls(channel=channel, success=True)

    @classmethod
    def failed(cls, channel: Channel, error: BaseException) -> "ChannelOutcome":
        return cls(channel=channel, success=False, error=str(error) or type(error).__name__)

    @classmethod
    def skipped_outcome(cls, channel: Channel) -> "ChannelOutcome":
        """The channel is switched off; nothing was attempted."""
        return cls(channel=channel, success=True, skipped=True)


@dataclass(frozen=True)
class RecipientOutcome:
    recipient_id: str
    push: ChannelOutcome
    in_app: ChannelOutcome


@dataclass
class ChannelStats:
    attempted: int = 0
    succeeded: int = 0
    failed: int = 0
    skipped: int = 0

    def record(self, outcome: ChannelOutcome) -> None:
        if outcome.skipped:
            self.skipped += 1
            return
        self.attempted += 1
        if outcome.success:
            self.succeeded += 1
        else:
            self.failed += 1


@dataclass
class DispatchSummary:
    """Aggregate counts for one broadcast."""
    push: ChannelStats = field(default_factory=ChannelStats)
    in_app: ChannelStats = field(default_factory=ChannelStats)
    batch_sizes: List[int] = field(default_factory=list)
    outcomes: List[RecipientOutcome] = field(default_factory=list)

    @property
    def batches(self) -> int:
        return len(self.batch_sizes)

    @property
    def recipients(self) -> int:
        return sum(self.batch_sizes)

    @property
    def has_failures(self) -> bool:
        return bool(self.push.failed or self.in_app.failed)

    def record(self, outcome: RecipientOutcome) -> None:
        self.outcomes.append(outcome)
        self.push.record(outcome.push)
        self.in_app.record(outcome.in_app)


@dataclass
class FanoutResult:
    kind: str
    state: FanoutState
    summary: DispatchSummary
    message: Optional[NotificationMessage] = None
