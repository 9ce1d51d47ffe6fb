from django.apps import AppConfig


class GuestlinkConfig(AppConfig):
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'guestlink'
