from django.db import models


class Participant(models.Model):

    class Meta:
        db_table = 'participants'
        ordering = ['created_at', 'id']

    name = models.CharField(max_length=200)
    cycle_id = models.CharField(max_length=9, db_index=True, blank=True, default='')
    # Set by the legacy add-participant/set-winner handlers only.
    draw_month = models.CharField(max_length=64, null=True, default=None, blank=True)
    is_winner = models.BooleanField(default=False)
    created_at = models.DateTimeField(auto_now_add=True)

    def __str__(self):
        return self.name


class SingletonModel(models.Model):

    class Meta:
        abstract = True

    def save(self, *args, **kwargs):
        self.pk = 1
        super(SingletonModel, self).save(*args, **kwargs)

    def delete(self, *args, **kwargs):
        pass

    @classmethod
    def load(cls):
        obj, created = cls.objects.get_or_create(pk=1)
        return obj


class CycleConfig(SingletonModel):

    class Meta:
        db_table = 'config'

    cycles = models.JSONField(default=list)
