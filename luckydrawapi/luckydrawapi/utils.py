import os
import yaml


def custom_settings():
    django_settings = os.environ.get('DJANGO_SETTINGS_FILE')
    if django_settings and os.path.exists(django_settings):
        with open(django_settings, 'r') as f:
            django_settings = yaml.safe_load(f)
    django_settings = django_settings or {}
    return django_settings


def email_list(value):
    """
    Normalize an allow-list given either as a comma separated string
    (environment) or as a YAML list.
    """
    if not value:
        return []
    if isinstance(value, str):
        value = value.split(',')
    return [i.strip().lower() for i in value if i and i.strip()]


def luckydraw_settings(django_settings):
    draw = dict(django_settings.get('luckydraw') or {})
    for key, env in (
        ('admin_emails', 'ADMIN_EMAILS'),
        ('editor_emails', 'EDITOR_EMAILS'),
    ):
        if os.environ.get(env) is not None:
            draw[key] = os.environ[env]
        draw[key] = email_list(draw.get(key))
    return draw
