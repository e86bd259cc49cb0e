"""
User administration service
"""

import logging
from typing import Optional

from django.db import transaction
from django.db.models import Q, QuerySet

from backend.exceptions import UserFriendlyDataError
from backend.models import Role, User
from backend.services.crud import FilterableCrudService, PageRequest, normalize_filter, paginate

logger = logging.getLogger(__name__)

MODIFY_LOCKED_USER_NOT_PERMITTED = "User has been locked and cannot be modified or deleted"
DELETING_SELF_NOT_PERMITTED = "You cannot delete your own account"


class UserService(FilterableCrudService):
    """Login accounts; locked accounts and the caller's own account are protected"""

    model = User

    def matching(self, filter_text: Optional[str]) -> QuerySet:
        filter_text = normalize_filter(filter_text)
        if filter_text is not None:
            return self.queryset().filter(
                Q(email__icontains=filter_text)
                | Q(first_name__icontains=filter_text)
                | Q(last_name__icontains=filter_text)
                | Q(role__icontains=filter_text)
            )
        return self.queryset()

    def find(self, page_request: Optional[PageRequest] = None):
        return paginate(self.queryset(), page_request)

    def save(self, current_user, entity):
        self._throw_if_user_locked(entity)
        return super().save(current_user, entity)

    @transaction.atomic
    def delete(self, current_user, entity):
        self._throw_if_deleting_self(current_user, entity)
        self._throw_if_user_locked(entity)
        super().delete(current_user, entity)

    def create_new(self, current_user):
        return User(role=Role.BARISTA)

    def _throw_if_deleting_self(self, current_user, user):
        if current_user == user:
            logger.warning(f"{current_user} tried to delete their own account")
            raise UserFriendlyDataError(DELETING_SELF_NOT_PERMITTED)

    def _throw_if_user_locked(self, entity):
        if entity is not None and entity.locked:
            logger.warning(f"Change to locked user {entity} rejected")
            raise UserFriendlyDataError(MODIFY_LOCKED_USER_NOT_PERMITTED)


user_service = UserService()
