"""
WebSocket consumer tests, run against the in-memory channel layer.
"""

import pytest
from channels.db import database_sync_to_async
from channels.layers import get_channel_layer
from channels.testing import WebsocketCommunicator
from django.contrib.auth.models import AnonymousUser

from conftest import CompanyFactory, NotificationFactory, UserFactory
from notifications.consumers import NotificationConsumer, UnreadCounter
from notifications.models import Notification
from notifications.services import user_group_name


class TestUnreadCounter:

    def test_never_negative(self):
        counter = UnreadCounter(1)
        counter.decrement()
        counter.decrement()
        assert counter.count == 0

    def test_sync_overrides_local_drift(self):
        counter = UnreadCounter(7)
        assert counter.sync(2) == 2
        assert counter.increment() == 3
        assert counter.reset() == 0


@pytest.fixture
def ws_user(transactional_db):
    user = UserFactory()
    company = CompanyFactory()
    NotificationFactory(company=company, user=user)
    return user


async def connect(user):
    communicator = WebsocketCommunicator(NotificationConsumer.as_asgi(), '/ws/notifications/')
    communicator.scope['user'] = user
    connected, _ = await communicator.connect()
    return communicator, connected


@pytest.mark.asyncio
@pytest.mark.django_db(transaction=True)
class TestNotificationConsumer:

    async def test_anonymous_is_refused(self):
        communicator, connected = await connect(AnonymousUser())
        assert not connected

    async def test_connect_reports_unread_count(self, ws_user):
        communicator, connected = await connect(ws_user)
        assert connected

        message = await communicator.receive_json_from()

        assert message['type'] == 'connection_established'
        assert message['unread_count'] == 1
        await communicator.disconnect()

    async def test_pushed_notification_increments(self, ws_user):
        communicator, _ = await connect(ws_user)
        await communicator.receive_json_from()

        await get_channel_layer().group_send(user_group_name(ws_user.pk), {
            'type': 'send_notification',
            'notification': {'id': 99, 'title': 'New application'},
        })
        message = await communicator.receive_json_from()

        assert message['type'] == 'new_notification'
        assert message['notification']['title'] == 'New application'
        assert message['unread_count'] == 2
        await communicator.disconnect()

    async def test_mark_read(self, ws_user):
        notification = await database_sync_to_async(Notification.objects.get)(user=ws_user)
        communicator, _ = await connect(ws_user)
        await communicator.receive_json_from()

        await communicator.send_json_to({'type': 'mark_read', 'notification_id': notification.pk})
        response = await communicator.receive_json_from()

        assert response == {
            'type': 'mark_read_response',
            'notification_id': notification.pk,
            'success': True,
            'unread_count': 0,
        }
        await communicator.disconnect()

    async def test_server_count_reconciles_sessions(self, ws_user):
        communicator, _ = await connect(ws_user)
        await communicator.receive_json_from()

        await get_channel_layer().group_send(user_group_name(ws_user.pk), {
            'type': 'unread_count_update',
            'count': 5,
        })

        assert await communicator.receive_json_from() == {'type': 'unread_count', 'count': 5}
        await communicator.disconnect()

    async def test_get_unread_count_resyncs_from_database(self, ws_user):
        communicator, _ = await connect(ws_user)
        await communicator.receive_json_from()
        await get_channel_layer().group_send(user_group_name(ws_user.pk), {
            'type': 'send_notification',
            'notification': {'id': 100},
        })
        await communicator.receive_json_from()

        await communicator.send_json_to({'type': 'get_unread_count'})

        assert await communicator.receive_json_from() == {'type': 'unread_count', 'count': 1}
        await communicator.disconnect()

    async def test_mark_all_read(self, ws_user):
        communicator, _ = await connect(ws_user)
        await communicator.receive_json_from()

        await communicator.send_json_to({'type': 'mark_all_read'})
        response = await communicator.receive_json_from()

        assert response['type'] == 'mark_all_read_response'
        assert response['count'] == 1
        assert response['unread_count'] == 0
        await communicator.disconnect()

    async def test_ping_and_unknown(self, ws_user):
        communicator, _ = await connect(ws_user)
        await communicator.receive_json_from()

        await communicator.send_json_to({'type': 'ping'})
        assert await communicator.receive_json_from() == {'type': 'pong'}

        await communicator.send_to(text_data='not json')
        assert (await communicator.receive_json_from())['type'] == 'error'

        await communicator.send_json_to({'type': 'subscribe'})
        assert (await communicator.receive_json_from())['message'] == 'Unknown message type: subscribe'
        await communicator.disconnect()
