import json

from channels.db import database_sync_to_async
from channels.generic.websocket import AsyncWebsocketConsumer

from .broadcast import cycle_group, slot_group
from .engine import DrawEngine


class DrawConsumer(AsyncWebsocketConsumer):
    """
    Live view of one (cycle, month) slot. Sends a snapshot on connect, then
    every spin, draw and roster change published for the slot or its cycle.
    """

    async def connect(self):
        kwargs = self.scope['url_route']['kwargs']
        self.cycle_id = kwargs['cycle_id']
        self.month = kwargs['month']
        self.subscribed_groups = [
            slot_group(self.cycle_id, self.month),
            cycle_group(self.cycle_id),
        ]
        for group in self.subscribed_groups:
            await self.channel_layer.group_add(group, self.channel_name)

        await self.accept()
        await self.send(text_data=json.dumps(await self.get_snapshot()))

    async def disconnect(self, close_code):
        for group in getattr(self, 'subscribed_groups', []):
            await self.channel_layer.group_discard(group, self.channel_name)

    async def receive(self, text_data=None, bytes_data=None):
        if not text_data:
            return
        data = json.loads(text_data)
        if data.get('type') == 'refresh':
            await self.send(text_data=json.dumps(await self.get_snapshot()))

    async def draw_event(self, event):
        await self.send(text_data=json.dumps(event['payload']))

    @database_sync_to_async
    def get_snapshot(self):
        return DrawEngine().snapshot(self.cycle_id, self.month)
