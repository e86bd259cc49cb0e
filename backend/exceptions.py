# backend/exceptions.py — service errors and their translation for the JSON API
import logging

from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import exception_handler

logger = logging.getLogger(__name__)


class UserFriendlyDataError(Exception):
    """Validation failure whose message can be shown to the end user as is."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class EntityNotFoundError(Exception):
    """Raised by ``load()`` when no row has the requested id."""


def api_exception_handler(exc, context):
    """
    DRF exception handler:
    - UserFriendlyDataError -> 400 {"detail": message}
    - EntityNotFoundError   -> 404 {"detail": ...}
    - everything else goes through the default handler
    """
    if isinstance(exc, UserFriendlyDataError):
        logger.info(f"Rejected API request: {exc.message}")
        return Response({"detail": exc.message}, status=status.HTTP_400_BAD_REQUEST)
    if isinstance(exc, EntityNotFoundError):
        return Response({"detail": str(exc) or "Not found."}, status=status.HTTP_404_NOT_FOUND)
    return exception_handler(exc, context)
