from datetime import date, timedelta

from django.utils import timezone

from backend.models import OrderState
from backend.services import order_service
from backend.services.order_service import flatten_and_replace_missing_with_none


def test_flatten_fills_gaps_with_none():
    assert flatten_and_replace_missing_with_none(5, [(2, 7), (5, 1)]) == [None, 7, None, None, 1]


def test_flatten_without_rows():
    assert flatten_and_replace_missing_with_none(3, []) == [None, None, None]


class TestDashboardData:
    def test_deliveries_and_sales(self, make_order, cake, pastry):
        delivered = OrderState.DELIVERED
        make_order(date(2023, 6, 5), state=delivered, items=[(cake, 2)])
        make_order(date(2023, 6, 5), state=OrderState.CANCELLED, items=[(cake, 9)])
        make_order(date(2023, 3, 10), state=delivered, items=[(pastry, 3), (cake, 1)])
        make_order(date(2021, 3, 1), state=delivered, items=[(pastry, 1)])
        make_order(date(2020, 3, 1), state=delivered, items=[(pastry, 1)])

        data = order_service.get_dashboard_data(6, 2023)

        assert len(data.deliveries_this_month) == 30
        assert data.deliveries_this_month[4] == 1
        assert data.deliveries_this_month.count(None) == 29

        assert data.deliveries_this_year[2] == 1
        assert data.deliveries_this_year[5] == 1
        assert data.deliveries_this_year.count(None) == 10

        assert len(data.sales_per_month) == 3
        assert all(len(row) == 12 for row in data.sales_per_month)
        # the requested month is left out of the sales matrix
        assert data.sales_per_month[0][5] is None
        assert data.sales_per_month[0][2] == 3 * 300 + 1250
        assert data.sales_per_month[2][2] == 300
        assert data.sales_per_month[1] == [None] * 12

        assert data.product_deliveries == {cake: 2}

    def test_product_deliveries_ordered_by_product(self, make_order, cake, pastry):
        make_order(date(2023, 6, 1), state=OrderState.DELIVERED, items=[(pastry, 4), (cake, 1)])
        make_order(date(2023, 6, 2), state=OrderState.DELIVERED, items=[(pastry, 2)])

        data = order_service.get_dashboard_data(6, 2023)

        assert list(data.product_deliveries.items()) == [(cake, 1), (pastry, 6)]
        assert data.to_dict()["product_deliveries"] == [
            {"product_id": cake.id, "product": cake.name, "deliveries": 1},
            {"product_id": pastry.id, "product": pastry.name, "deliveries": 6},
        ]

    def test_delivery_stats(self, make_order):
        today = timezone.localdate()
        make_order(today, state=OrderState.NEW)
        make_order(today, state=OrderState.DELIVERED)
        make_order(today, state=OrderState.CANCELLED)
        make_order(today + timedelta(days=1), state=OrderState.CONFIRMED)

        stats = order_service.get_dashboard_data(today.month, today.year).delivery_stats

        assert stats.due_today == 3
        assert stats.due_tomorrow == 1
        assert stats.delivered_today == 1
        assert stats.not_available_today == 1
        assert stats.new_orders == 1
