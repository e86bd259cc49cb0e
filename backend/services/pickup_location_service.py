"""
Pickup location service
"""

from typing import Optional

from django.db.models import QuerySet

from backend.exceptions import EntityNotFoundError
from backend.models import PickupLocation
from backend.services.crud import FilterableCrudService, normalize_filter


class PickupLocationService(FilterableCrudService):
    """Places where customers collect their orders"""

    model = PickupLocation

    def matching(self, filter_text: Optional[str]) -> QuerySet:
        filter_text = normalize_filter(filter_text)
        if filter_text is not None:
            return self.queryset().filter(name__icontains=filter_text)
        return self.queryset()

    def get_default(self) -> PickupLocation:
        """The first pickup location; new orders start with it."""
        location = self.queryset().order_by("id").first()
        if location is None:
            raise EntityNotFoundError("No pickup location has been configured")
        return location


pickup_location_service = PickupLocationService()
