from typing import List, Optional

from sqlalchemy import select, or_

from database.models import User, ForumMember, USER_STATUS_INDEFINITE, INVITATION_APPROVED
from database.repositories.base import BaseRepository


class RecipientRepository(BaseRepository):
    """Read-only queries that produce notification audiences."""

    def list_active_users(self, exclude_user_id: Optional[str] = None) -> List[User]:
        """All users that are not indefinitely suspended, ordered by id."""
        stmt = select(User).where(
            or_(User.status.is_(None), User.status != USER_STATUS_INDEFINITE)
        )
        if exclude_user_id is not None:
            stmt = stmt.where(User.id != exclude_user_id)
        stmt = stmt.order_by(User.id)
        return list(self.db.execute(stmt).scalars().all())

    def list_approved_forum_members(
        self,
        forum_id: int,
        exclude_user_id: Optional[str] = None,
        include_muted: bool = True
    ) -> List[ForumMember]:
        """Approved members of ``forum_id`` with their user row loaded."""
        stmt = select(ForumMember).where(
            ForumMember.forum == forum_id,
            ForumMember.invitation_status == INVITATION_APPROVED,
        )
        if exclude_user_id is not None:
            stmt = stmt.where(ForumMember.member != exclude_user_id)
        if not include_muted:
            stmt = stmt.where(or_(ForumMember.mute.is_(None), ForumMember.mute.is_(False)))
        stmt = stmt.order_by(ForumMember.id)
        return list(self.db.execute(stmt).unique().scalars().all())

    def get_user(self, user_id: str) -> Optional[User]:
        stmt = select(User).where(User.id == user_id)
        return self.db.execute(stmt).scalar_one_or_none()
