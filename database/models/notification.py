from sqlalchemy import Column, Text, Boolean, Integer, TIMESTAMP, ForeignKey, Index

from .base import Base, utc_now


class Notification(Base):
    """
    In-app notification shown in a user's inbox.

    One row per recipient per broadcast; rows are only ever inserted by the
    fan-out engine.
    """
    __tablename__ = 'notifications'

    id = Column(Integer, primary_key=True, autoincrement=True)
    user = Column(Text, ForeignKey('users.id', ondelete='CASCADE'), nullable=False)
    title = Column(Text, nullable=False)
    content = Column(Text, nullable=False)
    is_viewed = Column(Boolean, nullable=True, default=False)
    created_at = Column(TIMESTAMP(timezone=True), nullable=False, default=utc_now)
    deleted_at = Column(TIMESTAMP(timezone=True), nullable=True)

    __table_args__ = (
        Index('idx_notifications_user', 'user', 'created_at'),
    )
