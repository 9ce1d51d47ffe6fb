from datetime import timedelta

import pytest
from django.utils import timezone

from api.exceptions import InvalidGuestToken, NotAllowed
from guestlink.models import GuestToken
from guestlink.utils import active_links, issue_link, revoke_link, share_url, validate_token

from .conftest import CYCLE, MONTH

pytestmark = pytest.mark.django_db


def test_issue_link(admin):
    now = timezone.now()
    guest_token = issue_link(admin, CYCLE, MONTH, now=now)

    assert len(guest_token.token) >= 32
    assert guest_token.created_at == now
    assert guest_token.expires_at == now + timedelta(minutes=30)
    assert guest_token.created_by == 'admin@example.com'
    assert (guest_token.cycle_id, guest_token.month) == (CYCLE, MONTH)


def test_issue_link_uses_configured_lease(admin, settings):
    settings.LUCKYDRAW_GUEST_LEASE_MINUTES = 5
    now = timezone.now()
    assert issue_link(admin, CYCLE, MONTH, now=now).expires_at == now + timedelta(minutes=5)


def test_tokens_are_unique(admin):
    tokens = {issue_link(admin, CYCLE, MONTH).token for _ in range(20)}
    assert len(tokens) == 20


def test_issue_requires_admin(editor, viewer):
    for capability in (editor, viewer):
        with pytest.raises(NotAllowed):
            issue_link(capability, CYCLE, MONTH)
    assert not GuestToken.objects.exists()


def test_share_url():
    assert share_url('https://draw.example.com/', 'abc') == 'https://draw.example.com/?token=abc'
    assert share_url('https://draw.example.com/?cycle=1', 'abc') == 'https://draw.example.com/?cycle=1&token=abc'


def test_validate_until_expiry(admin):
    guest_token = issue_link(admin, CYCLE, MONTH)

    assert validate_token(guest_token.token, now=guest_token.expires_at - timedelta(seconds=1)) == guest_token
    with pytest.raises(InvalidGuestToken):
        validate_token(guest_token.token, now=guest_token.expires_at)
    with pytest.raises(InvalidGuestToken):
        validate_token(guest_token.token, now=guest_token.expires_at + timedelta(days=1))


def test_validate_unknown_token():
    with pytest.raises(InvalidGuestToken):
        validate_token('not-a-token')
    with pytest.raises(InvalidGuestToken):
        validate_token('')


def test_revoke(admin, editor):
    guest_token = issue_link(admin, CYCLE, MONTH)
    with pytest.raises(NotAllowed):
        revoke_link(editor, guest_token.token)

    assert revoke_link(admin, guest_token.token) is True
    assert revoke_link(admin, guest_token.token) is False
    with pytest.raises(InvalidGuestToken):
        validate_token(guest_token.token)


def test_active_links_hide_expired(admin, viewer):
    now = timezone.now()
    expired = issue_link(admin, CYCLE, 'October 2025', now=now - timedelta(hours=1))
    active = issue_link(admin, CYCLE, MONTH, now=now)

    assert active_links(admin, now=now) == [active]
    # Expired links are only hidden, not removed.
    assert GuestToken.objects.filter(pk=expired.pk).exists()

    with pytest.raises(NotAllowed):
        active_links(viewer)
