from datetime import date, time, timedelta

import pytest
from django.utils import timezone

from backend.exceptions import EntityNotFoundError
from backend.models import Customer, HistoryItem, Order, OrderItem, OrderState
from backend.services import PageRequest, order_service


@pytest.fixture
def orders(make_order):
    return {
        "jan_past": make_order(date(2024, 1, 10), customer_name="Jan Past"),
        "jan_future": make_order(date(2024, 1, 20), customer_name="Jan Future"),
        "ann_future": make_order(date(2024, 1, 20), customer_name="Ann Future", due_time=time(9, 0)),
    }


class TestMatchingAfterDueDate:
    def test_filter_and_date(self, orders):
        found = order_service.matching_after_due_date("jan", date(2024, 1, 15))
        assert list(found) == [orders["jan_future"]]

    def test_filter_only(self, orders):
        found = order_service.matching_after_due_date("JAN", None)
        assert set(found) == {orders["jan_past"], orders["jan_future"]}

    def test_date_only(self, orders):
        found = order_service.matching_after_due_date(None, date(2024, 1, 15))
        assert list(found) == [orders["ann_future"], orders["jan_future"]]

    def test_due_date_is_strictly_after(self, orders):
        assert order_service.count_any_matching_after_due_date(None, date(2024, 1, 20)) == 0

    def test_no_filter_no_date(self, orders):
        assert order_service.count_any_matching_after_due_date("", None) == 3

    def test_paged_and_sorted(self, orders):
        page = order_service.find_any_matching_after_due_date(
            None, None, PageRequest(number=1, size=2, sort=("due_date", "due_time", "id"))
        )
        assert list(page) == [orders["jan_past"], orders["ann_future"]]
        assert page.has_next()


def test_starting_today(make_order):
    today = timezone.localdate()
    make_order(today - timedelta(days=1))
    due_today = make_order(today)
    due_later = make_order(today + timedelta(days=3))
    assert list(order_service.find_any_matching_starting_today()) == [due_today, due_later]


class TestHistory:
    def test_new_order_is_placed(self, make_order, baker):
        order = make_order(date(2024, 3, 1), created_by=baker)
        history = list(order.history.all())
        assert [h.message for h in history] == ["Order placed"]
        assert history[0].new_state == OrderState.NEW
        assert history[0].created_by == baker

    def test_state_change_is_recorded(self, make_order, baker):
        order = make_order(date(2024, 3, 1))
        order.change_state(baker, OrderState.CONFIRMED)
        order.save()
        last = order.history.last()
        assert last.message == "Order confirmed"
        assert last.new_state == OrderState.CONFIRMED
        assert last.created_by == baker

    def test_same_state_adds_nothing(self, make_order, baker):
        order = make_order(date(2024, 3, 1))
        order.change_state(baker, OrderState.NEW)
        order.save()
        assert order.history.count() == 1

    def test_add_comment(self, make_order, baker):
        order = make_order(date(2024, 3, 1), state=OrderState.READY)
        order_service.add_comment(baker, order, "Customer called, will be late")
        last = HistoryItem.objects.filter(order=order).last()
        assert last.message == "Customer called, will be late"
        assert last.new_state == OrderState.READY


class TestSaveOrder:
    def test_creates_new_order(self, baker, store, cake):
        def fill(user, order):
            order.customer = Customer.objects.create(full_name="New Customer", phone_number="555")
            order.pickup_location = store
            order.due_date = date(2024, 4, 1)
            order.due_time = time(10, 30)

        order = order_service.save_order(baker, None, fill)
        OrderItem.objects.create(order=order, product=cake, quantity=2)

        assert Order.objects.count() == 1
        assert order.history.get().message == "Order placed"
        assert order.total_price == 2500

    def test_updates_existing_order(self, make_order, baker):
        existing = make_order(date(2024, 4, 1))

        def fill(user, order):
            order.paid = True
            order.change_state(user, OrderState.DELIVERED)

        order_service.save_order(baker, existing.pk, fill)
        existing.refresh_from_db()
        assert existing.paid
        assert existing.state == OrderState.DELIVERED
        assert existing.history.count() == 2

    def test_unknown_order(self, baker):
        with pytest.raises(EntityNotFoundError):
            order_service.save_order(baker, 12345, lambda user, order: None)


def test_create_new_defaults(baker):
    order = order_service.create_new(baker)
    assert order.pk is None
    assert order.state == OrderState.NEW
    assert order.due_time == time(16, 0)
    assert order.due_date == timezone.localdate()
