"""
Recipient resolution for broadcast triggers.

Each trigger maps to one read against the recipient store. Suppression policy
differs per trigger: suspended users never receive broadcasts, senders never
receive their own messages, and forum mute is honoured for member messages
but deliberately ignored for admin broadcasts.
"""

import logging
from typing import Callable, ContextManager, List

from sqlalchemy.orm import Session

from database.database import db_session_scope
from database.models import User, ForumMember
from database.repositories import RecipientRepository
from notification.exceptions import ResolutionFailure
from notification.models import (
    Recipient,
    TriggerContext,
    NewEvent,
    NewPost,
    GlobalChatMessage,
    ForumAdminBroadcast,
    ForumMessage,
    DirectNotice,
    TRIGGER_TYPES,
    context_kind,
)

logger = logging.getLogger(__name__)

SessionScope = Callable[[], ContextManager[Session]]


def _from_user(user: User, muted: bool = False) -> Recipient:
    return Recipient(
        id=str(user.id),
        display_name=user.username,
        role=user.role,
        status=user.status,
        muted=muted,
    )


def _from_member(member: ForumMember) -> Recipient:
    if member.user is not None:
        return _from_user(member.user, muted=bool(member.mute))
    return Recipient(id=str(member.member), muted=bool(member.mute))


class RecipientResolver:
    """Turns a trigger context into an ordered recipient list."""

    def __init__(self, session_scope: SessionScope = db_session_scope):
        self._session_scope = session_scope

    def resolve(self, context: TriggerContext) -> List[Recipient]:
        """
        Resolve the recipients for ``context``.

        Raises:
            ResolutionFailure: if the underlying query fails. No partial list
                is ever returned.
            TypeError: for an unknown context type.
        """
        if not isinstance(context, TRIGGER_TYPES):
            raise TypeError(f"Unsupported trigger context: {type(context).__name__}")

        kind = context_kind(context)
        try:
            with self._session_scope() as session:
                recipients = self._query(RecipientRepository(session), context)
        except Exception as e:
            logger.error(f"Recipient query failed for {kind}: {e}")
            raise ResolutionFailure(kind, e) from e

        logger.info(f"Resolved {len(recipients)} recipients for {kind}")
        return recipients

    def _query(self, repo: RecipientRepository, context: TriggerContext) -> List[Recipient]:
        if isinstance(context, (NewEvent, NewPost)):
            return [_from_user(u) for u in repo.list_active_users()]

        if isinstance(context, GlobalChatMessage):
            users = repo.list_active_users(exclude_user_id=context.sender_id)
            return [_from_user(u) for u in users]

        if isinstance(context, ForumAdminBroadcast):
            # Admin broadcasts reach muted members too
            members = repo.list_approved_forum_members(
                context.forum_id,
                exclude_user_id=context.sender_id,
                include_muted=True,
            )
            return [_from_member(m) for m in members]

        if isinstance(context, ForumMessage):
            members = repo.list_approved_forum_members(
                context.forum_id,
                exclude_user_id=context.sender_id,
                include_muted=False,
            )
            return [_from_member(m) for m in members]

        if isinstance(context, DirectNotice):
            user = repo.get_user(context.user_id)
            if user is None:
                logger.warning(f"Direct notice target {context.user_id} does not exist")
                return []
            return [_from_user(user)]

        raise TypeError(f"Unsupported trigger context: {type(context).__name__}")
