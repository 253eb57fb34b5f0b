"""
WebSocket consumer for real-time notifications.

Each connection joins the ``notifications_<user id>`` group and keeps its own
UnreadCounter. The counter is seeded from the database on connect, bumped on
every pushed notification and lowered on acknowledgements made through this
connection. Whenever the database count is broadcast (a mark-read from any
session) or explicitly requested, the counter is overwritten with it.
"""

import json
import logging
from dataclasses import dataclass

from channels.db import database_sync_to_async
from channels.generic.websocket import AsyncWebsocketConsumer
from django.utils import timezone

from .services import NotificationService, user_group_name

logger = logging.getLogger(__name__)


@dataclass
class UnreadCounter:
    """Per-connection unread count."""

    count: int = 0

    def increment(self) -> int:
        self.count += 1
        return self.count

    def decrement(self) -> int:
        self.count = max(0, self.count - 1)
        return self.count

    def reset(self) -> int:
        self.count = 0
        return self.count

    def sync(self, authoritative: int) -> int:
        self.count = max(0, int(authoritative))
        return self.count


class NotificationConsumer(AsyncWebsocketConsumer):

    async def connect(self):
        self.user = self.scope.get('user')

        if not self.user or not self.user.is_authenticated:
            await self.close(code=4001)
            return

        self.user_group = user_group_name(self.user.id)
        await self.channel_layer.group_add(self.user_group, self.channel_name)
        await self.accept()

        self.counter = UnreadCounter(await self.get_unread_count())
        await self.send_json({
            'type': 'connection_established',
            'user_id': self.user.id,
            'unread_count': self.counter.count,
            'timestamp': timezone.now().isoformat(),
        })

        logger.info(f"User {self.user.id} connected to notifications")

    async def disconnect(self, close_code):
        if hasattr(self, 'user_group'):
            await self.channel_layer.group_discard(self.user_group, self.channel_name)
            logger.info(f"User {self.user.id} disconnected from notifications")

    async def receive(self, text_data=None, bytes_data=None):
        if not text_data:
            return

        try:
            data = json.loads(text_data)
        except json.JSONDecodeError:
            await self.send_json({'type': 'error', 'message': 'Invalid JSON'})
            return

        message_type = data.get('type')
        if message_type == 'mark_read':
            await self.handle_mark_read(data)
        elif message_type == 'mark_all_read':
            await self.handle_mark_all_read()
        elif message_type == 'get_unread_count':
            await self.handle_get_unread_count()
        elif message_type == 'ping':
            await self.send_json({'type': 'pong'})
        else:
            await self.send_json({
                'type': 'error',
                'message': f'Unknown message type: {message_type}',
            })

    async def handle_mark_read(self, data):
        notification_id = data.get('notification_id')
        if not notification_id:
            await self.send_json({'type': 'error', 'message': 'notification_id is required'})
            return

        success = await self.mark_notification_read(notification_id)
        if success:
            self.counter.decrement()
        await self.send_json({
            'type': 'mark_read_response',
            'notification_id': notification_id,
            'success': success,
            'unread_count': self.counter.count,
        })

    async def handle_mark_all_read(self):
        count = await self.mark_all_read()
        self.counter.reset()
        await self.send_json({
            'type': 'mark_all_read_response',
            'success': True,
            'count': count,
            'unread_count': self.counter.count,
        })

    async def handle_get_unread_count(self):
        self.counter.sync(await self.get_unread_count())
        await self.send_json({
            'type': 'unread_count',
            'count': self.counter.count,
        })

    # Group events

    async def send_notification(self, event):
        self.counter.increment()
        await self.send_json({
            'type': 'new_notification',
            'notification': event['notification'],
            'unread_count': self.counter.count,
        })

    async def unread_count_update(self, event):
        self.counter.sync(event['count'])
        await self.send_json({
            'type': 'unread_count',
            'count': self.counter.count,
        })

    async def send_json(self, content):
        await self.send(text_data=json.dumps(content))

    # Database access

    @database_sync_to_async
    def get_unread_count(self) -> int:
        return NotificationService.unread_count(self.user)

    @database_sync_to_async
    def mark_notification_read(self, notification_id) -> bool:
        return NotificationService.mark_read(self.user, notification_id)

    @database_sync_to_async
    def mark_all_read(self) -> int:
        return NotificationService.mark_all_read(self.user)
