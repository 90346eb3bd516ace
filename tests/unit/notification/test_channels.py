"""Tests for push gateway and in-app channels."""

import unittest
from unittest.mock import patch, Mock

import pytest
import requests

from core.config_loader import PushGatewayConfig
from database.models import User
from database.repositories import NotificationRepository
from notification.channels import PushGatewayChannel, InAppChannel
from notification.exceptions import PushDeliveryFailed, InAppPersistFailed, ConfigError
from notification.message_builder import NotificationMessageBuilder
from notification.models import Recipient, ForumAdminBroadcast, NewEvent, Channel
from tests import SQLiteTestDatabase


def _config(**overrides):
    values = {'app_id': 'app-123', 'api_key': 'secret'}
    values.update(overrides)
    return PushGatewayConfig(**values)


class TestPushGatewayChannel(unittest.TestCase):

    def setUp(self):
        self.recipient = Recipient(id='user-abcdef-123456', display_name='ana')
        self.message = NotificationMessageBuilder().compose(ForumAdminBroadcast(
            forum_id=7, admin_name='sam', message='hi', sender_id='u1', image_url='https://img/x.png'
        ))

    def test_channel_identifier(self):
        self.assertEqual(PushGatewayChannel(_config()).channel, Channel.PUSH)

    def test_build_payload(self):
        payload = PushGatewayChannel(_config()).build_payload(self.recipient, self.message)

        self.assertEqual(payload['app_id'], 'app-123')
        self.assertEqual(payload['headings'], {'en': '🔔 sam (Admin)'})
        self.assertEqual(payload['contents'], {'en': 'ADMIN: hi'})
        self.assertEqual(payload['target_channel'], 'push')
        self.assertEqual(payload['include_aliases'], {'external_id': ['user-abcdef-123456']})
        self.assertEqual(payload['data'], {'route': '/forum-chat/7'})
        self.assertEqual(payload['big_picture'], 'https://img/x.png')
        self.assertEqual(payload['priority'], 10)
        self.assertEqual(payload['ttl'], 259200)

    def test_build_payload_without_image(self):
        message = NotificationMessageBuilder().compose(NewEvent(event_id='1', title='A'))
        payload = PushGatewayChannel(_config()).build_payload(self.recipient, message)
        self.assertNotIn('big_picture', payload)

    @patch('notification.channels.requests.post')
    def test_send_success(self, mock_post):
        mock_post.return_value = Mock(status_code=200, text='{"id": "n1"}')
        config = _config(api_url='https://push.example.org/notifications', timeout_seconds=5)

        PushGatewayChannel(config).send(self.recipient, self.message)

        mock_post.assert_called_once()
        args, kwargs = mock_post.call_args
        self.assertEqual(args[0], 'https://push.example.org/notifications')
        self.assertEqual(kwargs['headers']['Authorization'], 'Bearer Key secret')
        self.assertEqual(kwargs['headers']['Content-Type'], 'application/json')
        self.assertEqual(kwargs['timeout'], 5)
        self.assertEqual(kwargs['json']['include_aliases']['external_id'], ['user-abcdef-123456'])

    @patch('notification.channels.requests.post')
    def test_send_non_2xx_raises(self, mock_post):
        mock_post.return_value = Mock(status_code=400, text='invalid app_id')

        with self.assertRaises(PushDeliveryFailed) as ctx:
            PushGatewayChannel(_config()).send(self.recipient, self.message)

        self.assertEqual(ctx.exception.recipient_id, 'user-abcdef-123456')
        self.assertIn('400', str(ctx.exception))

    @patch('notification.channels.requests.post')
    def test_send_network_error_raises(self, mock_post):
        mock_post.side_effect = requests.ConnectionError('connection refused')

        with self.assertRaises(PushDeliveryFailed) as ctx:
            PushGatewayChannel(_config()).send(self.recipient, self.message)

        self.assertIsInstance(ctx.exception.cause, requests.ConnectionError)

    @patch('notification.channels.requests.post')
    def test_dry_run_does_not_call_gateway(self, mock_post):
        PushGatewayChannel(_config(dry_run=True)).send(self.recipient, self.message)
        mock_post.assert_not_called()

    @patch('notification.channels.requests.post')
    def test_disabled_channel_is_noop(self, mock_post):
        PushGatewayChannel(_config(enabled=False)).send(self.recipient, self.message)
        mock_post.assert_not_called()

    @patch.object(PushGatewayChannel, 'build_payload')
    def test_disabled_channel_builds_no_payload(self, mock_build):
        channel = PushGatewayChannel(_config(enabled=False))

        self.assertFalse(channel.enabled)
        channel.send(self.recipient, self.message)

        mock_build.assert_not_called()

    @patch('notification.channels.requests.post')
    def test_unconfigured_raises_without_calling_gateway(self, mock_post):
        channel = PushGatewayChannel(PushGatewayConfig())

        self.assertFalse(channel.validate_config())
        with self.assertRaises(PushDeliveryFailed) as ctx:
            channel.send(self.recipient, self.message)

        self.assertIsInstance(ctx.exception.cause, ConfigError)
        mock_post.assert_not_called()


@pytest.mark.db
class TestInAppChannel(unittest.TestCase):

    def setUp(self):
        self.db = SQLiteTestDatabase()
        with self.db.session_scope() as session:
            session.add(User(id='u1', username='ana'))
        self.message = NotificationMessageBuilder().compose(NewEvent(event_id='5', title='Walk', creator_name='sam'))

    def tearDown(self):
        self.db.close()

    def test_channel_identifier(self):
        self.assertEqual(InAppChannel(self.db.session_scope).channel, Channel.IN_APP)

    def test_send_stores_row(self):
        InAppChannel(self.db.session_scope).send(Recipient(id='u1'), self.message)

        with self.db.session_scope() as session:
            rows = NotificationRepository(session).list_for_user('u1')
            self.assertEqual(len(rows), 1)
            self.assertEqual(rows[0].title, '📅 New Event')
            self.assertEqual(rows[0].content, '"Walk" by sam')
            self.assertFalse(rows[0].is_viewed)

    def test_store_failure_raises(self):
        failing_scope = Mock(side_effect=RuntimeError('database is locked'))

        with self.assertRaises(InAppPersistFailed) as ctx:
            InAppChannel(failing_scope).send(Recipient(id='u1'), self.message)

        self.assertEqual(ctx.exception.recipient_id, 'u1')
        self.assertEqual(ctx.exception.channel, 'in_app')


if __name__ == '__main__':
    unittest.main()
