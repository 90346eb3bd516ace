from typing import List, Optional

from sqlalchemy import select, func

from database.models import Notification
from database.repositories.base import BaseRepository


class NotificationRepository(BaseRepository):
    def create(self, user_id: str, title: str, content: str) -> Notification:
        notification = Notification(
            user=user_id,
            title=title,
            content=content,
            is_viewed=False,
        )
        self.db.add(notification)
        self.flush()  # Generate ID
        return notification

    def list_for_user(self, user_id: str, limit: Optional[int] = 50) -> List[Notification]:
        stmt = (
            select(Notification)
            .where(Notification.user == user_id, Notification.deleted_at.is_(None))
            .order_by(Notification.created_at.desc(), Notification.id.desc())
        )
        if limit is not None:
            stmt = stmt.limit(limit)
        return list(self.db.execute(stmt).scalars().all())

    def count_for_user(self, user_id: str) -> int:
        stmt = select(func.count()).select_from(Notification).where(Notification.user == user_id)
        return self.db.execute(stmt).scalar_one()
