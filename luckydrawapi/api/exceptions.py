from rest_framework import status
from rest_framework.exceptions import APIException, PermissionDenied, ValidationError


class DrawError(Exception):
    """Base class for errors raised by the draw, roster, cycle and guest link operations."""


class NotAllowed(DrawError):
    pass


class InvalidCycleName(DrawError):
    pass


class CycleExists(DrawError):
    pass


class UnknownCycle(DrawError):
    pass


class EmptyName(DrawError):
    pass


class ConfirmationRequired(DrawError):
    pass


class SlotResolved(DrawError):
    pass


class SlotSpinning(DrawError):
    pass


class EmptyRoster(DrawError):
    pass


class InvalidGuestToken(DrawError):
    pass


class Conflict(APIException):
    status_code = status.HTTP_409_CONFLICT
    default_detail = 'Conflict with the current state.'
    default_code = 'conflict'


CONFLICTS = (CycleExists, SlotResolved, SlotSpinning)


def to_api_exception(exc):
    if isinstance(exc, (NotAllowed, InvalidGuestToken)):
        return PermissionDenied(detail=str(exc) or None)
    if isinstance(exc, CONFLICTS):
        return Conflict(detail=str(exc))
    return ValidationError({'detail': str(exc)})
