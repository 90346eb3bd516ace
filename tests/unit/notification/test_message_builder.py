"""Tests for NotificationMessageBuilder."""

import unittest

from notification.message_builder import NotificationMessageBuilder, ADMIN_MARKER
from notification.models import (
    NewEvent,
    ForumAdminBroadcast,
    GlobalChatMessage,
    NewPost,
    ForumMessage,
    DirectNotice,
)
from database.models import ROLE_ADMIN, ROLE_USER


class TestNotificationMessageBuilder(unittest.TestCase):

    def setUp(self):
        self.builder = NotificationMessageBuilder()

    def test_new_event(self):
        message = self.builder.compose(NewEvent(event_id='42', title='Adoption Day', creator_name='maria'))

        self.assertEqual(message.kind, 'NewEvent')
        self.assertEqual(message.push.title, '📅 New Event')
        self.assertEqual(message.push.body, '"Adoption Day" by maria')
        self.assertEqual(message.push.route, '/events/42')

    def test_new_event_without_creator_uses_admin(self):
        message = self.builder.compose(NewEvent(event_id='1', title='Walk', creator_name=None))
        self.assertEqual(message.push.body, '"Walk" by Admin')

        message = self.builder.compose(NewEvent(event_id='1', title='Walk', creator_name='   '))
        self.assertEqual(message.push.body, '"Walk" by Admin')

    def test_forum_admin_broadcast(self):
        message = self.builder.compose(ForumAdminBroadcast(
            forum_id=7,
            admin_name='sam',
            message='Meeting moved to 5pm',
            sender_id='u1',
            image_url='https://cdn.example.org/p.png',
        ))

        self.assertEqual(message.push.title, '🔔 sam (Admin)')
        self.assertEqual(message.push.body, 'ADMIN: Meeting moved to 5pm')
        self.assertTrue(message.push.body.startswith(ADMIN_MARKER))
        self.assertEqual(message.push.route, '/forum-chat/7')
        self.assertEqual(message.push.image_url, 'https://cdn.example.org/p.png')

    def test_forum_admin_broadcast_without_name(self):
        message = self.builder.compose(ForumAdminBroadcast(
            forum_id=7, admin_name=None, message='hi', sender_id='u1'
        ))
        self.assertEqual(message.push.title, '🔔 Admin (Admin)')
        self.assertIsNone(message.push.image_url)

    def test_global_chat_from_admin_is_marked(self):
        message = self.builder.compose(GlobalChatMessage(
            sender_name='sam', message='Welcome!', sender_id='u1', sender_role=ROLE_ADMIN
        ))

        self.assertEqual(message.push.title, 'sam - Global Chat')
        self.assertEqual(message.push.body, 'ADMIN: Welcome!')
        self.assertEqual(message.push.route, '/global-chat')

    def test_global_chat_from_member_is_not_marked(self):
        message = self.builder.compose(GlobalChatMessage(
            sender_name='ben', message='Anyone fostering?', sender_id='u2', sender_role=ROLE_USER
        ))
        self.assertEqual(message.push.body, 'Anyone fostering?')

    def test_new_post_known_category(self):
        message = self.builder.compose(NewPost(post_id='3', title='Vaccination drive', category='health_alerts'))

        self.assertEqual(message.push.title, '⚕️ New Health Alert')
        self.assertEqual(message.push.body, '"Vaccination drive" - Check out the latest update!')
        self.assertEqual(message.push.route, '/posts/3')

    def test_new_post_unknown_category(self):
        message = self.builder.compose(NewPost(post_id='3', title='X', category='misc'))
        self.assertEqual(message.push.title, '📢 New misc')

    def test_forum_message(self):
        message = self.builder.compose(ForumMessage(
            forum_id=9, sender_name=None, message='hello', sender_id='u2'
        ))
        self.assertEqual(message.push.title, 'PawsConnect')
        self.assertEqual(message.push.body, 'hello')
        self.assertEqual(message.push.route, '/forum-chat/9')

    def test_direct_notice(self):
        message = self.builder.compose(DirectNotice(
            user_id='u7', title='Adoption approved', message='Come pick up Rex', route='/adoption/9'
        ))
        self.assertEqual(message.push.title, 'Adoption approved')
        self.assertEqual(message.push.body, 'Come pick up Rex')
        self.assertEqual(message.push.route, '/adoption/9')

    def test_projections_share_text_and_route(self):
        contexts = [
            NewEvent(event_id='1', title='A'),
            ForumAdminBroadcast(forum_id=1, admin_name='a', message='m', sender_id='u', image_url='i'),
            GlobalChatMessage(sender_name='s', message='m', sender_id='u'),
            NewPost(post_id='2', title='t', category='shelter_update'),
        ]
        for context in contexts:
            message = self.builder.compose(context)
            self.assertEqual(message.in_app.title, message.push.title)
            self.assertEqual(message.in_app.content, message.push.body)
            self.assertEqual(message.in_app.route, message.push.route)

    def test_priority_and_ttl_from_settings(self):
        builder = NotificationMessageBuilder(priority=5, ttl_seconds=60)
        message = builder.compose(NewEvent(event_id='1', title='A'))
        self.assertEqual(message.push.priority, 5)
        self.assertEqual(message.push.ttl, 60)

    def test_compose_is_deterministic(self):
        context = NewPost(post_id='2', title='t', category='rescue_stories')
        self.assertEqual(self.builder.compose(context), self.builder.compose(context))

    def test_unknown_context_raises_type_error(self):
        with self.assertRaises(TypeError):
            self.builder.compose(object())


if __name__ == '__main__':
    unittest.main()
