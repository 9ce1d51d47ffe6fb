import logging
import re

from django.db import transaction

from .exceptions import (
    ConfirmationRequired, CycleExists, EmptyName, InvalidCycleName, NotAllowed, UnknownCycle,
)
from .models import CycleConfig, Participant


logger = logging.getLogger('api.utils')

CYCLE_NAME_RE = re.compile(r'^\d{4}-\d{4}$')


def get_cycles():
    return list(CycleConfig.load().cycles)


def latest_cycle():
    cycles = get_cycles()
    return cycles[-1] if cycles else ''


def create_cycle(capability, name):
    if not capability.is_admin:
        raise NotAllowed('Only admins can create cycles.')
    name = (name or '').strip()
    if not CYCLE_NAME_RE.match(name):
        raise InvalidCycleName(f'Cycle name must look like 2025-2026, got {name!r}.')

    with transaction.atomic():
        config = CycleConfig.load()
        if name in config.cycles:
            raise CycleExists(f'Cycle {name} already exists.')
        config.cycles = sorted(config.cycles + [name])
        config.save()

    logger.info('Cycle %s created by %s', name, capability.email)
    return config.cycles


def get_roster(cycle_id):
    return list(Participant.objects.filter(cycle_id=cycle_id).order_by('created_at', 'id'))


def add_participant(capability, cycle_id, name):
    if not capability.can_edit_roster:
        raise NotAllowed('Only editors and admins can add participants.')
    name = (name or '').strip()
    if not name:
        raise EmptyName('Participant name is required.')
    if cycle_id not in get_cycles():
        raise UnknownCycle(f'Unknown cycle {cycle_id!r}.')

    participant = Participant.objects.create(name=name, cycle_id=cycle_id)
    logger.info('Participant %s (%s) added to %s by %s', name, participant.pk, cycle_id, capability.email)
    return participant


def remove_participant(capability, participant_id, confirm=False):
    """
    Delete a participant. A draw already won by the participant keeps its
    ``winner_name``; nothing else refers to the removed row afterwards.
    """
    if not capability.can_edit_roster:
        raise NotAllowed('Only editors and admins can remove participants.')
    if not confirm:
        raise ConfirmationRequired('Removing a participant must be confirmed.')

    deleted, _ = Participant.objects.filter(pk=participant_id).delete()
    if deleted:
        logger.info('Participant %s removed by %s', participant_id, capability.email)
    return bool(deleted)
