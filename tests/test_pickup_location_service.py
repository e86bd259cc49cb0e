import pytest

from backend.exceptions import EntityNotFoundError
from backend.services import pickup_location_service


def test_matching_filters_by_name(store, bakery_location):
    assert list(pickup_location_service.matching("bak")) == [bakery_location]
    assert pickup_location_service.count_any_matching(None) == 2
    assert pickup_location_service.count_any_matching("") == 2


def test_default_is_the_first_location(store, bakery_location):
    assert pickup_location_service.get_default() == store


def test_default_without_locations(db):
    with pytest.raises(EntityNotFoundError):
        pickup_location_service.get_default()
