from database.repositories.base import BaseRepository
from database.repositories.recipient import RecipientRepository
from database.repositories.notification import NotificationRepository

__all__ = [
    'BaseRepository',
    'RecipientRepository',
    'NotificationRepository',
]
