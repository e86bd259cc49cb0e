"""
Product catalog service
"""

import logging
from typing import Optional

from django.db import IntegrityError, transaction
from django.db.models import ProtectedError, QuerySet

from backend.exceptions import UserFriendlyDataError
from backend.models import Product
from backend.services.crud import FilterableCrudService, PageRequest, normalize_filter, paginate

logger = logging.getLogger(__name__)

DUPLICATE_PRODUCT_NAME = (
    "There is already a product with that name. Please select a unique name for the product."
)
PRODUCT_IN_USE = "The product is part of existing orders and cannot be deleted"


class ProductService(FilterableCrudService):
    """Products with a unique name"""

    model = Product

    def matching(self, filter_text: Optional[str]) -> QuerySet:
        filter_text = normalize_filter(filter_text)
        if filter_text is not None:
            return self.queryset().filter(name__icontains=filter_text)
        return self.queryset()

    def find(self, page_request: Optional[PageRequest] = None):
        return paginate(self.queryset(), page_request)

    def save(self, current_user, entity):
        try:
            # own savepoint: the caller's transaction survives the violation
            with transaction.atomic():
                return super().save(current_user, entity)
        except IntegrityError:
            logger.info(f"Duplicate product name rejected: {entity.name!r}")
            raise UserFriendlyDataError(DUPLICATE_PRODUCT_NAME)

    def delete(self, current_user, entity):
        try:
            with transaction.atomic():
                super().delete(current_user, entity)
        except ProtectedError:
            raise UserFriendlyDataError(PRODUCT_IN_USE)


product_service = ProductService()
