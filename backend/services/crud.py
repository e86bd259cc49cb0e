"""
Base CRUD services shared by every entity service
"""

import logging
from dataclasses import dataclass
from typing import Optional, Tuple

from django.core.paginator import Page, Paginator
from django.db import transaction
from django.db.models import QuerySet

from backend.exceptions import EntityNotFoundError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PageRequest:
    """Page number (1-based), page size and ORM ordering for a paged query"""
    number: int = 1
    size: int = 20
    sort: Tuple[str, ...] = ()


def paginate(queryset: QuerySet, page_request: Optional[PageRequest] = None) -> Page:
    """Apply ordering and slice the queryset into the requested page."""
    page_request = page_request or PageRequest()
    if page_request.sort:
        queryset = queryset.order_by(*page_request.sort)
    return Paginator(queryset, page_request.size).get_page(page_request.number)


def normalize_filter(value: Optional[str]) -> Optional[str]:
    """Blank filter text means no filter."""
    if value is None:
        return None
    value = value.strip()
    return value or None


class CrudService:
    """Create, load, save and delete for one model"""

    model = None

    def queryset(self) -> QuerySet:
        return self.model._default_manager.all()

    def save(self, current_user, entity):
        entity.save()
        logger.info(f"{self.model.__name__} {entity.pk} saved by {current_user}")
        return entity

    def delete(self, current_user, entity):
        entity.delete()
        logger.info(f"{self.model.__name__} deleted by {current_user}")

    @transaction.atomic
    def delete_by_id(self, current_user, entity_id):
        self.delete(current_user, self.load(entity_id))

    def count(self) -> int:
        return self.queryset().count()

    def load(self, entity_id):
        try:
            return self.queryset().get(pk=entity_id)
        except (self.model.DoesNotExist, ValueError, TypeError):
            raise EntityNotFoundError(f"{self.model.__name__} {entity_id} not found")

    def create_new(self, current_user):
        return self.model()


class FilterableCrudService(CrudService):
    """CRUD service whose listings can be narrowed by a free-text filter"""

    def matching(self, filter_text: Optional[str]) -> QuerySet:
        raise NotImplementedError

    def find_any_matching(self, filter_text: Optional[str], page_request: Optional[PageRequest] = None) -> Page:
        return paginate(self.matching(filter_text), page_request)

    def count_any_matching(self, filter_text: Optional[str]) -> int:
        return self.matching(filter_text).count()
