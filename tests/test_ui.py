"""
Server-rendered pages: access control, the tab menu, the storefront and the admin CRUD pages.
"""

from datetime import timedelta

import pytest
from django.test import RequestFactory
from django.urls import reverse
from django.utils import timezone

from backend.models import Order, OrderState, Product, User
from backend.services.product_service import DUPLICATE_PRODUCT_NAME
from backend.services.user_service import DELETING_SELF_NOT_PERMITTED
from ui.navigation import available_tabs


@pytest.fixture
def admin_client(client, admin_user):
    client.force_login(admin_user)
    return client


@pytest.fixture
def baker_client(client, baker):
    client.force_login(baker)
    return client


class TestAccess:
    def test_anonymous_is_sent_to_login(self, client, db):
        response = client.get(reverse("storefront"))
        assert response.status_code == 302
        assert response.url.startswith(reverse("login"))

    def test_login_by_email(self, client, baker):
        response = client.post(reverse("login"), {"username": "baker@example.com", "password": "baker"})
        assert response.status_code == 302
        assert response.url == reverse("storefront")

    @pytest.mark.parametrize("url_name", ["products", "users", "product-new", "user-new"])
    def test_admin_pages_forbidden_for_baker(self, baker_client, url_name):
        assert baker_client.get(reverse(url_name)).status_code == 403

    def test_logout_is_a_post(self, baker_client):
        response = baker_client.post(reverse("logout"))
        assert response.status_code == 302
        assert baker_client.get(reverse("storefront")).status_code == 302


class TestMenu:
    def titles(self, response):
        return [tab.title for tab in response.context["menu_tabs"]]

    def test_admin_sees_every_tab(self, admin_client):
        response = admin_client.get(reverse("dashboard"))
        assert self.titles(response) == ["Storefront", "Dashboard", "Users", "Products"]
        assert b"Logout" in response.content

    def test_baker_sees_only_allowed_tabs(self, baker_client):
        response = baker_client.get(reverse("storefront"))
        assert self.titles(response) == ["Storefront", "Dashboard"]

    def test_current_route_selects_its_tab(self, admin_client, store):
        response = admin_client.get(reverse("order-new"))
        selected = [tab.title for tab in response.context["menu_tabs"] if tab.selected]
        assert selected == ["Storefront"]

    def test_route_outside_menu_selects_nothing(self, admin_user):
        request = RequestFactory().get("/somewhere-else/")
        request.user = admin_user
        assert not any(tab.selected for tab in available_tabs(request))


class TestStorefront:
    def test_hides_past_orders_by_default(self, baker_client, make_order):
        today = timezone.localdate()
        past = make_order(today - timedelta(days=1), customer_name="Past Customer")
        current = make_order(today, customer_name="Current Customer")

        shown = list(baker_client.get(reverse("storefront")).context["page"])
        assert shown == [current]

        shown = list(baker_client.get(reverse("storefront"), {"checkbox": "on"}).context["page"])
        assert shown == [past, current]

    def test_search_by_customer(self, baker_client, make_order):
        today = timezone.localdate()
        make_order(today, customer_name="Alice Smith")
        bob = make_order(today, customer_name="Bob Jones")
        response = baker_client.get(reverse("storefront"), {"filter": "bob"})
        assert list(response.context["page"]) == [bob]
        assert b"New order" in response.content


class TestOrders:
    def test_create_order(self, baker_client, baker, store, cake):
        today = timezone.localdate()
        data = {
            "due_date": today.isoformat(),
            "due_time": "16:00",
            "pickup_location": store.pk,
            "state": OrderState.NEW,
            "customer-full_name": "Walk In",
            "customer-phone_number": "555-0000",
            "customer-details": "",
            "items-TOTAL_FORMS": "1",
            "items-INITIAL_FORMS": "0",
            "items-MIN_NUM_FORMS": "1",
            "items-MAX_NUM_FORMS": "1000",
            "items-0-product": cake.pk,
            "items-0-quantity": "3",
            "items-0-comment": "",
        }
        response = baker_client.post(reverse("order-new"), data)
        order = Order.objects.get()
        assert response.status_code == 302
        assert response.url == reverse("order-detail", args=[order.pk])
        assert order.customer.full_name == "Walk In"
        assert order.total_price == 3 * 1250
        assert order.history.get().created_by == baker

    def test_order_without_items_is_rejected(self, baker_client, store):
        data = {
            "due_date": timezone.localdate().isoformat(),
            "due_time": "16:00",
            "pickup_location": store.pk,
            "state": OrderState.NEW,
            "customer-full_name": "Walk In",
            "customer-phone_number": "555-0000",
            "items-TOTAL_FORMS": "1",
            "items-INITIAL_FORMS": "0",
            "items-MIN_NUM_FORMS": "1",
            "items-MAX_NUM_FORMS": "1000",
        }
        response = baker_client.post(reverse("order-new"), data)
        assert response.status_code == 200
        assert not Order.objects.exists()

    def test_comment_on_detail_page(self, baker_client, make_order):
        order = make_order(timezone.localdate())
        response = baker_client.post(reverse("order-detail", args=[order.pk]), {"comment": "Gift wrap"})
        assert response.status_code == 302
        assert order.history.last().message == "Gift wrap"

    def test_unknown_order(self, baker_client):
        assert baker_client.get(reverse("order-detail", args=[999])).status_code == 404


def test_dashboard_page(baker_client, make_order, cake):
    make_order(timezone.localdate(), state=OrderState.DELIVERED, items=[(cake, 1)])
    response = baker_client.get(reverse("dashboard"))
    assert response.status_code == 200
    assert response.context["stats"].delivered_today == 1
    assert b'id="dashboard-data"' in response.content


class TestProductPages:
    def test_create_with_currency_string(self, admin_client):
        response = admin_client.post(reverse("product-new"), {"name": "Apple Pie", "price_display": "$12.50"})
        assert response.status_code == 302
        assert Product.objects.get(name="Apple Pie").price == 1250

    def test_duplicate_name_shows_message(self, admin_client, cake):
        response = admin_client.post(reverse("product-new"), {"name": cake.name, "price_display": "1"})
        assert response.status_code == 200
        assert DUPLICATE_PRODUCT_NAME in response.content.decode()

    def test_bad_price(self, admin_client):
        response = admin_client.post(reverse("product-new"), {"name": "Apple Pie", "price_display": "cheap"})
        assert response.status_code == 200
        assert not Product.objects.filter(name="Apple Pie").exists()

    def test_delete_needs_confirmation(self, admin_client, cake):
        assert admin_client.get(reverse("product-delete", args=[cake.pk])).status_code == 200
        assert Product.objects.filter(pk=cake.pk).exists()
        admin_client.post(reverse("product-delete", args=[cake.pk]))
        assert not Product.objects.filter(pk=cake.pk).exists()


class TestUserPages:
    def test_search(self, admin_client, baker, barista):
        response = admin_client.get(reverse("users"), {"filter": "barista"})
        assert list(response.context["page"]) == [barista]

    def test_deleting_self_shows_error(self, admin_client, admin_user):
        response = admin_client.post(reverse("user-delete", args=[admin_user.pk]), follow=True)
        assert DELETING_SELF_NOT_PERMITTED in response.content.decode()
        assert User.objects.filter(pk=admin_user.pk).exists()
