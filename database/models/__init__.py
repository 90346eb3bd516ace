from .base import Base
from .user import (
    User,
    ROLE_ADMIN,
    ROLE_STAFF,
    ROLE_USER,
    USER_STATUS_PENDING,
    USER_STATUS_SEMI_VERIFIED,
    USER_STATUS_FULLY_VERIFIED,
    USER_STATUS_INDEFINITE,
)
from .forum import ForumMember, INVITATION_PENDING, INVITATION_APPROVED, INVITATION_REJECTED
from .notification import Notification

__all__ = [
    'Base',
    'User',
    'ROLE_ADMIN',
    'ROLE_STAFF',
    'ROLE_USER',
    'USER_STATUS_PENDING',
    'USER_STATUS_SEMI_VERIFIED',
    'USER_STATUS_FULLY_VERIFIED',
    'USER_STATUS_INDEFINITE',
    'ForumMember',
    'INVITATION_PENDING',
    'INVITATION_APPROVED',
    'INVITATION_REJECTED',
    'Notification',
]
