import re

from django.db import models


WHITESPACE_RE = re.compile(r'\s+')


def slot_key(cycle_id, month):
    return '{}_{}'.format(cycle_id, WHITESPACE_RE.sub('', month or ''))


class Draw(models.Model):

    class Meta:
        db_table = 'draws'
        ordering = ['-timestamp']

    # slot_key(cycle_id, month); the primary key keeps one winner per slot.
    id = models.CharField(primary_key=True, max_length=100)
    cycle_id = models.CharField(max_length=9, db_index=True)
    month = models.CharField(max_length=64)
    winner = models.ForeignKey('api.Participant', on_delete=models.SET_NULL, null=True)
    winner_name = models.CharField(max_length=200)
    timestamp = models.DateTimeField(auto_now_add=True)


class SpinState(models.Model):

    class Meta:
        db_table = 'game_state'

    id = models.CharField(primary_key=True, max_length=100)
    cycle_id = models.CharField(max_length=9)
    month = models.CharField(max_length=64)
    is_spinning = models.BooleanField(default=False)
    started_at = models.DateTimeField(null=True, default=None)
    started_by = models.CharField(max_length=254, null=True, default=None)


class WinnerArchive(models.Model):

    class Meta:
        db_table = 'winners'
        ordering = ['-created_at']

    winner_name = models.CharField(max_length=200)
    draw_month = models.CharField(max_length=64)
    draw_year = models.IntegerField()
    created_at = models.DateTimeField(auto_now_add=True)
