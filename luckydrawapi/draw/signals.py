from django.db.models.signals import post_delete, post_save
from django.dispatch import receiver

from api.models import Participant

from . import broadcast
from .models import Draw


@receiver(post_save, sender=Draw)
def draw_saved(sender, instance, **kwargs):
    broadcast.draw_changed(instance.cycle_id, instance.month, instance)


@receiver(post_delete, sender=Draw)
def draw_deleted(sender, instance, **kwargs):
    broadcast.draw_changed(instance.cycle_id, instance.month, None)


@receiver(post_save, sender=Participant)
@receiver(post_delete, sender=Participant)
def roster_updated(sender, instance, **kwargs):
    if instance.cycle_id:
        broadcast.roster_changed(instance.cycle_id)
