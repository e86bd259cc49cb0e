"""
Shared fixtures: accounts for every role, a small catalog and an order factory.
"""

from datetime import time

import pytest
from rest_framework.test import APIClient

from backend.models import Customer, Order, OrderItem, OrderState, PickupLocation, Product, Role, User


@pytest.fixture(autouse=True)
def fast_password_hasher(settings):
    settings.PASSWORD_HASHERS = ["django.contrib.auth.hashers.MD5PasswordHasher"]


@pytest.fixture
def admin_user(db):
    return User.objects.create_user(
        "admin@example.com", "admin", first_name="Ada", last_name="Admin", role=Role.ADMIN
    )


@pytest.fixture
def baker(db):
    return User.objects.create_user(
        "baker@example.com", "baker", first_name="Bea", last_name="Baker", role=Role.BAKER
    )


@pytest.fixture
def barista(db):
    return User.objects.create_user(
        "barista@example.com", "barista", first_name="Bo", last_name="Barista", role=Role.BARISTA
    )


@pytest.fixture
def locked_admin(db):
    return User.objects.create_user(
        "peter@example.com", "peter", first_name="Peter", last_name="Bush", role=Role.ADMIN, locked=True
    )


@pytest.fixture
def store(db):
    return PickupLocation.objects.create(name="Store")


@pytest.fixture
def bakery_location(db):
    return PickupLocation.objects.create(name="Bakery")


@pytest.fixture
def cake(db):
    return Product.objects.create(name="Strawberry Cake", price=1250)


@pytest.fixture
def pastry(db):
    return Product.objects.create(name="Vanilla Pastry", price=300)


@pytest.fixture
def customer(db):
    return Customer.objects.create(full_name="Jane Doe", phone_number="+1-555-0100")


@pytest.fixture
def make_order(db, store, customer):
    """Build and save an order; ``items`` is a list of ``(product, quantity)``."""

    def _make(due_date, state=OrderState.NEW, items=(), customer_name=None, created_by=None, **extra):
        owner = customer
        if customer_name is not None:
            owner = Customer.objects.create(full_name=customer_name, phone_number="+1-555-0199")
        order = Order.new_for(created_by)
        order.due_date = due_date
        order.due_time = extra.pop("due_time", time(16, 0))
        order.pickup_location = extra.pop("pickup_location", store)
        order.customer = owner
        order.state = state
        for field, value in extra.items():
            setattr(order, field, value)
        order.save()
        for product, quantity in items:
            OrderItem.objects.create(order=order, product=product, quantity=quantity)
        return order

    return _make


@pytest.fixture
def api_client():
    return APIClient()


@pytest.fixture
def admin_api(api_client, admin_user):
    api_client.force_authenticate(admin_user)
    return api_client


@pytest.fixture
def baker_api(api_client, baker):
    api_client.force_authenticate(baker)
    return api_client
