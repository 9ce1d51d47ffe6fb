import pytest
from django.contrib.auth import get_user_model
from rest_framework.test import APIClient

from api.auth import ADMIN, EDITOR, Capability
from api.models import CycleConfig, Participant

CYCLE = '2025-2026'
MONTH = 'November 2025'
PASSWORD = 'correct-Horse-42'


@pytest.fixture(autouse=True)
def draw_settings(settings):
    settings.LUCKYDRAW_ADMIN_EMAILS = ['admin@example.com']
    settings.LUCKYDRAW_EDITOR_EMAILS = ['editor@example.com']
    settings.LUCKYDRAW_SPIN_DELAY = 0
    settings.LUCKYDRAW_SPIN_STALE_AFTER = 60
    settings.LUCKYDRAW_GUEST_LEASE_MINUTES = 30
    settings.LUCKYDRAW_ALLOW_LEGACY_GUEST = False
    settings.SITE_URL = 'https://draw.example.com/'
    return settings


@pytest.fixture
def admin():
    return Capability(role=ADMIN, email='admin@example.com')


@pytest.fixture
def editor():
    return Capability(role=EDITOR, email='editor@example.com')


@pytest.fixture
def viewer():
    return Capability()


@pytest.fixture
def cycle(db):
    config = CycleConfig.load()
    config.cycles = [CYCLE]
    config.save()
    return CYCLE


@pytest.fixture
def roster(cycle):
    return [Participant.objects.create(name=name, cycle_id=cycle) for name in ('A', 'B', 'C')]


def make_client(username, email):
    user = get_user_model().objects.create_user(username, email, PASSWORD)
    client = APIClient()
    client.force_login(user)
    return client


@pytest.fixture
def admin_api(db):
    return make_client('admin', 'admin@example.com')


@pytest.fixture
def editor_api(db):
    return make_client('editor', 'Editor@Example.com')


@pytest.fixture
def viewer_api(db):
    return make_client('viewer', 'someone@example.com')


@pytest.fixture
def anon_api(db):
    return APIClient()
