import logging
import re

from asgiref.sync import async_to_sync
from channels.layers import get_channel_layer

from api.utils import get_roster
from api.serializers import ParticipantSerializer

from .models import slot_key
from .serializers import DrawSerializer

logger = logging.getLogger('draw.broadcast')

# Channel layer group names allow ASCII letters, digits, hyphens, underscores and periods.
GROUP_INVALID_RE = re.compile(r'[^0-9A-Za-z_.-]')
GROUP_MAX_LENGTH = 99


def _group(prefix, name):
    return (prefix + GROUP_INVALID_RE.sub('-', name))[:GROUP_MAX_LENGTH]


def slot_group(cycle_id, month):
    return _group('slot.', slot_key(cycle_id, month))


def cycle_group(cycle_id):
    return _group('cycle.', cycle_id)


def send(group, payload):
    layer = get_channel_layer()
    if layer is None:
        return
    try:
        async_to_sync(layer.group_send)(group, {'type': 'draw.event', 'payload': payload})
    except Exception:
        logger.error('Failed to broadcast %s to %s', payload.get('type'), group, exc_info=True)


def spin_changed(cycle_id, month, is_spinning):
    send(slot_group(cycle_id, month), {
        'type': 'spin',
        'cycle_id': cycle_id,
        'month': month,
        'is_spinning': is_spinning,
    })


def draw_changed(cycle_id, month, draw=None):
    send(slot_group(cycle_id, month), {
        'type': 'draw',
        'cycle_id': cycle_id,
        'month': month,
        'draw': DrawSerializer(draw).data if draw is not None else None,
    })


def roster_changed(cycle_id):
    send(cycle_group(cycle_id), {
        'type': 'roster',
        'cycle_id': cycle_id,
        'participants': ParticipantSerializer(get_roster(cycle_id), many=True).data,
    })
