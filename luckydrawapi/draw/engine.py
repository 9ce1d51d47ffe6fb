"""Draw engine: picks one winner per (cycle, month) slot and drives the shared spin state."""

import asyncio
import logging
import random
import threading
from datetime import timedelta

from asgiref.sync import async_to_sync
from channels.db import database_sync_to_async
from django.conf import settings
from django.db import IntegrityError, connection, transaction
from django.db.models import Q
from django.utils import timezone

from api.exceptions import DrawError, EmptyRoster, NotAllowed, SlotResolved, SlotSpinning
from api.models import Participant
from api.serializers import ParticipantSerializer
from api.utils import get_roster

from . import broadcast
from .models import Draw, SpinState, slot_key
from .serializers import DrawSerializer

logger = logging.getLogger('draw.engine')

NO_DRAW = 'no_draw'
SPINNING = 'spinning'
RESOLVED = 'resolved'

# Delayed resolutions running on the serving event loop.
_pending = set()


async def _running_loop():
    return asyncio.get_running_loop()


def serving_loop():
    """
    The event loop serving this request, or ``None`` outside an ASGI
    server. Without one, async_to_sync runs on a throwaway loop that is
    closed by the time it returns.
    """
    loop = async_to_sync(_running_loop)()
    return None if loop.is_closed() else loop


class DrawEngine:
    """
    State machine per slot: ``no_draw -> spinning -> resolved``, and back to
    ``no_draw`` only through an admin :meth:`reset`.

    Parameters
    ----------
    delay : float, optional
        Seconds between setting the spin flag and picking the winner.
        Defaults to ``settings.LUCKYDRAW_SPIN_DELAY``.
    stale_after : float, optional
        A spin flag older than this many seconds is treated as abandoned
        and a new trigger may take it over.
    rng : random.Random, optional
        Source of randomness. Defaults to ``random.SystemRandom``.
    """

    def __init__(self, delay=None, stale_after=None, rng=None):
        self.delay = settings.LUCKYDRAW_SPIN_DELAY if delay is None else delay
        self.stale_after = (
            settings.LUCKYDRAW_SPIN_STALE_AFTER if stale_after is None else stale_after
        )
        self._rng = rng or random.SystemRandom()

    def state(self, cycle_id, month):
        key = slot_key(cycle_id, month)
        if Draw.objects.filter(pk=key).exists():
            return RESOLVED
        if SpinState.objects.filter(pk=key, is_spinning=True).exists():
            return SPINNING
        return NO_DRAW

    def snapshot(self, cycle_id, month):
        """Everything a viewer of the slot needs to render it."""
        draw = Draw.objects.filter(pk=slot_key(cycle_id, month)).first()
        state = self.state(cycle_id, month)
        return {
            'type': 'snapshot',
            'cycle_id': cycle_id,
            'month': month,
            'state': state,
            'is_spinning': state == SPINNING,
            'draw': DrawSerializer(draw).data if draw is not None else None,
            'participants': ParticipantSerializer(get_roster(cycle_id), many=True).data,
        }

    def history(self, cycle_id=None):
        draws = Draw.objects.order_by('-timestamp')
        if cycle_id:
            draws = draws.filter(cycle_id=cycle_id)
        return draws

    def start(self, capability, cycle_id, month):
        """Check the trigger preconditions and raise the slot's spin flag."""
        if not capability.can_trigger(cycle_id, month):
            raise NotAllowed('Not allowed to run this draw.')

        key = slot_key(cycle_id, month)
        if Draw.objects.filter(pk=key).exists():
            raise SlotResolved(f'{month} of {cycle_id} already has a winner.')
        if not Participant.objects.filter(cycle_id=cycle_id).exists():
            raise EmptyRoster(f'No participants in {cycle_id}.')

        now = timezone.now()
        SpinState.objects.get_or_create(pk=key, defaults={'cycle_id': cycle_id, 'month': month})
        # Conditional update: only one concurrent caller flips the flag.
        updated = SpinState.objects.filter(pk=key).filter(
            Q(is_spinning=False) | Q(started_at__lt=now - timedelta(seconds=self.stale_after))
        ).update(is_spinning=True, started_at=now, started_by=capability.email or capability.role)
        if not updated:
            raise SlotSpinning(f'{month} of {cycle_id} is already spinning.')

        logger.info('Spin started for %s by %s', key, capability.email or capability.role)
        broadcast.spin_changed(cycle_id, month, True)

    def resolve(self, cycle_id, month):
        """
        Pick the winner from the current roster and record it. The spin flag
        is lowered whether or not a draw could be recorded.
        """
        key = slot_key(cycle_id, month)
        try:
            roster = get_roster(cycle_id)
            if not roster:
                raise EmptyRoster(f'No participants left in {cycle_id}.')
            winner = roster[self._rng.randrange(len(roster))]
            try:
                with transaction.atomic():
                    draw = Draw.objects.create(
                        id=key,
                        cycle_id=cycle_id,
                        month=month,
                        winner=winner,
                        winner_name=winner.name,
                    )
            except IntegrityError:
                raise SlotResolved(f'{month} of {cycle_id} already has a winner.')
            logger.info('Winner for %s is %s (%s)', key, winner.name, winner.pk)
            return draw
        finally:
            self._stop_spin(cycle_id, month)

    def trigger(self, capability, cycle_id, month):
        """
        Start a draw. With a positive delay ``None`` is returned and the
        winner is picked later: on the serving event loop, so viewers
        subscribed through the channel layer get the result, or on a timer
        thread when there is no loop. Otherwise the draw is returned.
        """
        self.start(capability, cycle_id, month)
        if self.delay <= 0:
            return self.resolve(cycle_id, month)

        loop = serving_loop()
        if loop is not None:
            future = asyncio.run_coroutine_threadsafe(self.resolve_after_delay(cycle_id, month), loop)
            _pending.add(future)
            future.add_done_callback(_pending.discard)
            return None

        timer = threading.Timer(self.delay, self._resolve_later, args=(cycle_id, month))
        timer.daemon = True
        timer.start()
        return None

    def reset(self, capability, cycle_id, month):
        if not capability.is_admin:
            raise NotAllowed('Only admins can reset a draw.')
        key = slot_key(cycle_id, month)
        deleted, _ = Draw.objects.filter(pk=key).delete()
        self._stop_spin(cycle_id, month)
        logger.info('Draw %s reset by %s', key, capability.email)
        return bool(deleted)

    def _stop_spin(self, cycle_id, month):
        key = slot_key(cycle_id, month)
        if SpinState.objects.filter(pk=key, is_spinning=True).update(
            is_spinning=False, started_at=None, started_by=None,
        ):
            broadcast.spin_changed(cycle_id, month, False)

    async def resolve_after_delay(self, cycle_id, month):
        await asyncio.sleep(self.delay)
        try:
            await database_sync_to_async(self.resolve)(cycle_id, month)
        except DrawError as e:
            logger.warning('Draw for %s %s not recorded: %s', cycle_id, month, e)
        except Exception:
            logger.error('Draw for %s %s failed', cycle_id, month, exc_info=True)

    def _resolve_later(self, cycle_id, month):
        try:
            self.resolve(cycle_id, month)
        except DrawError as e:
            logger.warning('Draw for %s %s not recorded: %s', cycle_id, month, e)
        except Exception:
            logger.error('Draw for %s %s failed', cycle_id, month, exc_info=True)
        finally:
            connection.close()
