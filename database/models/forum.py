from sqlalchemy import Column, Text, Boolean, Integer, TIMESTAMP, ForeignKey, Index
from sqlalchemy.orm import relationship

from .base import Base, utc_now

# Values of the invitation_status enum
INVITATION_PENDING = 'PENDING'
INVITATION_APPROVED = 'APPROVED'
INVITATION_REJECTED = 'REJECTED'


class ForumMember(Base):
    """
    Membership of a user in a forum.

    ``mute`` is the member's own choice to silence chat notifications for
    this forum.
    """
    __tablename__ = 'forum_members'

    id = Column(Integer, primary_key=True, autoincrement=True)
    forum = Column(Integer, nullable=False)
    member = Column(Text, ForeignKey('users.id', ondelete='CASCADE'), nullable=False)
    invitation_status = Column(Text, nullable=True)
    mute = Column(Boolean, nullable=True, default=False)
    created_at = Column(TIMESTAMP(timezone=True), nullable=False, default=utc_now)

    user = relationship("User", lazy="joined")

    __table_args__ = (
        Index('idx_forum_members_forum', 'forum', 'invitation_status'),
    )
