from typing import Optional

from notification.models import (
    TriggerContext,
    NotificationMessage,
    PushProjection,
    InAppProjection,
    NewEvent,
    NewPost,
    GlobalChatMessage,
    ForumAdminBroadcast,
    ForumMessage,
    DirectNotice,
    context_kind,
)

DEFAULT_ACTOR = "Admin"
DEFAULT_SENDER = "PawsConnect"
ADMIN_MARKER = "ADMIN: "

GLOBAL_CHAT_ROUTE = "/global-chat"

POST_CATEGORY_LABELS = {
    'shelter_update': 'Shelter Update',
    'adoption_update': 'Adoption Update',
    'rescue_stories': 'Rescue Story',
    'health_alerts': 'Health Alert',
}

POST_CATEGORY_EMOJIS = {
    'shelter_update': '🏠',
    'adoption_update': '🐾',
    'rescue_stories': '❤️',
    'health_alerts': '⚕️',
}

DEFAULT_POST_EMOJI = '📢'


class NotificationMessageBuilder:
    """
    Renders trigger contexts into push and in-app projections.

    Pure: the same context and settings always produce the same message.
    Both projections share one route so the inbox entry and the push tap
    open the same screen.
    """

    def __init__(self, priority: int = 10, ttl_seconds: int = 259200):
        self.priority = priority
        self.ttl_seconds = ttl_seconds

    @staticmethod
    def actor_label(name: Optional[str], fallback: str = DEFAULT_ACTOR) -> str:
        """Display name for an actor, falling back when missing or blank."""
        if name and name.strip():
            return name.strip()
        return fallback

    @staticmethod
    def mark_admin(text: str) -> str:
        return f"{ADMIN_MARKER}{text}"

    @staticmethod
    def format_post_title(category: str) -> str:
        emoji = POST_CATEGORY_EMOJIS.get(category, DEFAULT_POST_EMOJI)
        label = POST_CATEGORY_LABELS.get(category, category)
        return f"{emoji} New {label}"

    def compose(self, context: TriggerContext) -> NotificationMessage:
        image_url = None

        if isinstance(context, NewEvent):
            title = "📅 New Event"
            body = f'"{context.title}" by {self.actor_label(context.creator_name)}'
            route = f"/events/{context.event_id}"

        elif isinstance(context, ForumAdminBroadcast):
            title = f"🔔 {self.actor_label(context.admin_name)} (Admin)"
            body = self.mark_admin(context.message)
            route = f"/forum-chat/{context.forum_id}"
            image_url = context.image_url

        elif isinstance(context, GlobalChatMessage):
            title = f"{self.actor_label(context.sender_name)} - Global Chat"
            body = self.mark_admin(context.message) if context.from_admin else context.message
            route = GLOBAL_CHAT_ROUTE
            image_url = context.image_url

        elif isinstance(context, NewPost):
            title = self.format_post_title(context.category)
            body = f'"{context.title}" - Check out the latest update!'
            route = f"/posts/{context.post_id}"

        elif isinstance(context, ForumMessage):
            title = self.actor_label(context.sender_name, fallback=DEFAULT_SENDER)
            body = context.message
            route = f"/forum-chat/{context.forum_id}"
            image_url = context.image_url

        elif isinstance(context, DirectNotice):
            title = context.title
            body = context.message
            route = context.route

        else:
            raise TypeError(f"Unsupported trigger context: {type(context).__name__}")

        return NotificationMessage(
            kind=context_kind(context),
            push=PushProjection(
                title=title,
                body=body,
                route=route,
                image_url=image_url or None,
                priority=self.priority,
                ttl=self.ttl_seconds,
            ),
            in_app=InAppProjection(title=title, content=body, route=route),
        )
