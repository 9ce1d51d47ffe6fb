import logging
import secrets
from datetime import timedelta
from urllib.parse import urlencode

from django.conf import settings
from django.utils import timezone

from api.exceptions import InvalidGuestToken, NotAllowed

from .models import GuestToken

logger = logging.getLogger('guestlink.utils')

TOKEN_BYTES = 24


def share_url(base_url, token):
    separator = '&' if '?' in base_url else '?'
    return f'{base_url}{separator}{urlencode({"token": token})}'


def issue_link(capability, cycle_id, month, now=None):
    """
    Create a guest token allowing one (cycle, month) draw to be triggered
    without logging in. Tokens are random and not checked for collisions.
    """
    if not capability.is_admin:
        raise NotAllowed('Only admins can issue guest links.')

    now = now or timezone.now()
    guest_token = GuestToken.objects.create(
        token=secrets.token_urlsafe(TOKEN_BYTES),
        created_at=now,
        expires_at=now + timedelta(minutes=settings.LUCKYDRAW_GUEST_LEASE_MINUTES),
        created_by=capability.email,
        cycle_id=cycle_id,
        month=month,
    )
    logger.info(
        'Guest link for %s %s issued by %s, expires %s',
        cycle_id, month, capability.email, guest_token.expires_at.isoformat(),
    )
    return guest_token


def validate_token(token, now=None):
    if not token:
        raise InvalidGuestToken('A guest token is required.')
    now = now or timezone.now()
    guest_token = GuestToken.objects.filter(token=token).first()
    if guest_token is None:
        raise InvalidGuestToken('Unknown guest link.')
    if not guest_token.is_active(now):
        raise InvalidGuestToken('This guest link has expired.')
    return guest_token


def revoke_link(capability, token):
    if not capability.is_admin:
        raise NotAllowed('Only admins can revoke guest links.')
    deleted, _ = GuestToken.objects.filter(token=token).delete()
    if deleted:
        logger.info('Guest link %s... revoked by %s', token[:6], capability.email)
    return bool(deleted)


def active_links(capability, now=None):
    if not capability.is_admin:
        raise NotAllowed('Only admins can list guest links.')
    now = now or timezone.now()
    # Expired rows stay in the table until revoked; they are only hidden here.
    return [i for i in GuestToken.objects.order_by('-created_at') if i.is_active(now)]
