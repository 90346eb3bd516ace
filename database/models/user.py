from sqlalchemy import Column, Text, Boolean, Integer, TIMESTAMP, Index

from .base import Base, utc_now

# Values of the user_status enum
USER_STATUS_PENDING = 'PENDING'
USER_STATUS_SEMI_VERIFIED = 'SEMI_VERIFIED'
USER_STATUS_FULLY_VERIFIED = 'FULLY_VERIFIED'
USER_STATUS_INDEFINITE = 'INDEFINITE'  # Indefinitely suspended

# role.id values
ROLE_ADMIN = 1
ROLE_STAFF = 2
ROLE_USER = 3


class User(Base):
    """
    Platform user account.

    Only the columns the notification engine reads are mapped here;
    the table itself is owned by the main application.
    """
    __tablename__ = 'users'

    id = Column(Text, primary_key=True)
    username = Column(Text)
    email = Column(Text)
    phone_number = Column(Text, nullable=False, default='')
    role = Column(Integer, nullable=False, default=ROLE_USER)
    status = Column(Text, nullable=True)  # user_status enum, NULL treated as active
    is_active = Column(Boolean, default=True)
    created_at = Column(TIMESTAMP(timezone=True), nullable=False, default=utc_now)

    __table_args__ = (
        Index('idx_users_status', 'status'),
    )
