from django.db import models


class GuestToken(models.Model):

    class Meta:
        db_table = 'guest_tokens'
        ordering = ['-created_at']

    token = models.CharField(primary_key=True, max_length=64)
    created_at = models.DateTimeField()
    expires_at = models.DateTimeField()
    created_by = models.CharField(max_length=254, null=True)
    cycle_id = models.CharField(max_length=9)
    month = models.CharField(max_length=64)

    def is_active(self, now):
        return self.expires_at > now
