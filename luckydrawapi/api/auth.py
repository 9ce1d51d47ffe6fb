import logging
from dataclasses import dataclass
from typing import Optional

from django.conf import settings
from django.contrib import auth

from draw.models import slot_key

logger = logging.getLogger('api.auth')

ADMIN = 'admin'
EDITOR = 'editor'
VIEWER = 'viewer'
GUEST = 'guest'

GUEST_SESSION_KEY = 'guest'


@dataclass(frozen=True)
class Capability:
    """
    What the caller of a request may do. Resolved once from the session and
    handed to every roster, cycle, draw and guest link operation.

    A guest capability carries the slot it was granted for. ``cycle_id`` and
    ``month`` are ``None`` for the unscoped legacy ``?guest=true`` grant.
    """

    role: str = VIEWER
    email: Optional[str] = None
    cycle_id: Optional[str] = None
    month: Optional[str] = None
    token: Optional[str] = None

    @property
    def is_admin(self):
        return self.role == ADMIN

    @property
    def is_guest(self):
        return self.role == GUEST

    @property
    def can_edit_roster(self):
        return self.role in (ADMIN, EDITOR)

    def can_trigger(self, cycle_id, month):
        if self.is_admin:
            return True
        if not self.is_guest:
            return False
        if self.cycle_id is None and self.month is None:
            return True
        return slot_key(self.cycle_id, self.month) == slot_key(cycle_id, month)

    def as_dict(self):
        return {
            'role': self.role,
            'email': self.email,
            'cycle_id': self.cycle_id,
            'month': self.month,
        }


def role_for_email(email):
    if not email:
        return VIEWER
    email = email.strip().lower()
    if email in settings.LUCKYDRAW_ADMIN_EMAILS:
        return ADMIN
    if email in settings.LUCKYDRAW_EDITOR_EMAILS:
        return EDITOR
    return VIEWER


def resolve_capability(request):
    user = getattr(request, 'user', None)
    if user is not None and user.is_authenticated:
        return Capability(role=role_for_email(user.email), email=user.email or None)

    grant = request.session.get(GUEST_SESSION_KEY)
    if grant:
        return Capability(
            role=GUEST,
            cycle_id=grant.get('cycle_id'),
            month=grant.get('month'),
            token=grant.get('token'),
        )
    return Capability()


def grant_guest(request, cycle_id=None, month=None, token=None):
    """Remember a validated guest grant for the rest of the session."""
    request.session[GUEST_SESSION_KEY] = {
        'cycle_id': cycle_id,
        'month': month,
        'token': token,
    }


def login(request, username, password):
    user = auth.authenticate(request, username=username, password=password)
    if user is None:
        return None
    auth.login(request, user)
    logger.info('%s signed in as %s', user.get_username(), role_for_email(user.email))
    return user


def logout(request):
    if request.user.is_authenticated:
        logger.info('%s signed out', request.user.get_username())
    auth.logout(request)
