"""
Order service: storefront queries, order updates and dashboard aggregation
"""

import calendar
import logging
from datetime import date, datetime, time, timedelta
from typing import Callable, Iterable, List, Optional, Tuple

from django.conf import settings
from django.db import transaction
from django.db.models import Count, F, IntegerField, QuerySet, Sum
from django.db.models.functions import ExtractDay, ExtractMonth, ExtractYear
from django.utils import timezone

from backend.dashboard import DashboardData, DeliveryStats
from backend.models import Order, OrderItem, OrderState, Product
from backend.services.crud import CrudService, PageRequest, normalize_filter, paginate

logger = logging.getLogger(__name__)

# due orders in these states cannot be handed over today
NOT_AVAILABLE_STATES = frozenset(
    set(OrderState.values) - {OrderState.DELIVERED, OrderState.READY, OrderState.CANCELLED}
)


def flatten_and_replace_missing_with_none(length: int, rows: Iterable[Tuple[int, int]]) -> List[Optional[int]]:
    """
    Turns sparse ``(one_based_index, value)`` rows into a list of ``length``
    slots, None where the query returned nothing.
    """
    counts: List[Optional[int]] = [None] * length
    for index, value in rows:
        counts[index - 1] = value
    return counts


def _parse_time(raw: str) -> time:
    return datetime.strptime(raw.strip(), "%H:%M").time()


class OrderService(CrudService):
    """Orders placed at the storefront"""

    model = Order

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------
    @transaction.atomic
    def save_order(self, current_user, order_id, filler: Callable) -> Order:
        """Create (order_id None) or load an order, let ``filler`` fill it, then save it."""
        if order_id is None:
            order = Order.new_for(current_user)
        else:
            order = self.load(order_id)
        filler(current_user, order)
        order.save()
        logger.info(f"Order {order.pk} saved by {current_user}")
        return order

    @transaction.atomic
    def save(self, current_user, entity):
        return super().save(current_user, entity)

    def save_order_instance(self, order: Order) -> Order:
        with transaction.atomic():
            order.save()
        return order

    @transaction.atomic
    def add_comment(self, current_user, order: Order, comment: str) -> Order:
        order.add_history_item(current_user, comment)
        order.save()
        return order

    def create_new(self, current_user) -> Order:
        order = Order.new_for(current_user)
        order.due_time = _parse_time(settings.BAKERY_DEFAULT_DUE_TIME)
        order.due_date = timezone.localdate()
        return order

    # ------------------------------------------------------------------
    # Storefront queries
    # ------------------------------------------------------------------
    def matching_after_due_date(self, filter_text: Optional[str], filter_date: Optional[date]) -> QuerySet:
        filter_text = normalize_filter(filter_text)
        orders = self.queryset().select_related("customer", "pickup_location").prefetch_related("items__product")
        if filter_text is not None:
            if filter_date is not None:
                return orders.filter(customer__full_name__icontains=filter_text, due_date__gt=filter_date)
            return orders.filter(customer__full_name__icontains=filter_text)
        if filter_date is not None:
            return orders.filter(due_date__gt=filter_date)
        return orders

    def find_any_matching_after_due_date(
        self,
        filter_text: Optional[str],
        filter_date: Optional[date],
        page_request: Optional[PageRequest] = None,
    ):
        return paginate(self.matching_after_due_date(filter_text, filter_date), page_request)

    def count_any_matching_after_due_date(self, filter_text: Optional[str], filter_date: Optional[date]) -> int:
        return self.matching_after_due_date(filter_text, filter_date).count()

    def find_any_matching_starting_today(self) -> QuerySet:
        return (
            self.queryset()
            .filter(due_date__gte=timezone.localdate())
            .select_related("customer", "pickup_location")
            .prefetch_related("items__product")
        )

    # ------------------------------------------------------------------
    # Dashboard
    # ------------------------------------------------------------------
    def get_dashboard_data(self, month: int, year: int) -> DashboardData:
        data = DashboardData()
        data.delivery_stats = self._delivery_stats(timezone.localdate())
        data.deliveries_this_month = self._deliveries_per_day(month, year)
        data.deliveries_this_year = self._deliveries_per_month(year)

        sales_per_month: List[List[Optional[int]]] = [[None] * 12 for _ in range(3)]
        for row in self._sum_per_month_last_three_years(year):
            y = year - row["sale_year"]
            m = row["sale_month"] - 1
            if y == 0 and m == month - 1:
                # the requested month is still incomplete
                continue
            sales_per_month[y][m] = row["deliveries"]
        data.sales_per_month = sales_per_month

        rows = list(self._count_per_product(year, month))
        products = Product.objects.in_bulk([row["product"] for row in rows])
        data.product_deliveries = {products[row["product"]]: row["total"] for row in rows}
        return data

    def _delivery_stats(self, today: date) -> DeliveryStats:
        orders = self.queryset()
        return DeliveryStats(
            due_today=orders.filter(due_date=today).count(),
            due_tomorrow=orders.filter(due_date=today + timedelta(days=1)).count(),
            delivered_today=orders.filter(due_date=today, state=OrderState.DELIVERED).count(),
            not_available_today=orders.filter(due_date=today, state__in=NOT_AVAILABLE_STATES).count(),
            new_orders=orders.filter(state=OrderState.NEW).count(),
        )

    def _deliveries_per_day(self, month: int, year: int) -> List[Optional[int]]:
        days_in_month = calendar.monthrange(year, month)[1]
        rows = (
            self._delivered()
            .filter(due_date__year=year, due_date__month=month)
            .annotate(day=ExtractDay("due_date"))
            .values("day")
            .annotate(deliveries=Count("id"))
            .order_by("day")
        )
        return flatten_and_replace_missing_with_none(days_in_month, ((r["day"], r["deliveries"]) for r in rows))

    def _deliveries_per_month(self, year: int) -> List[Optional[int]]:
        rows = (
            self._delivered()
            .filter(due_date__year=year)
            .annotate(month=ExtractMonth("due_date"))
            .values("month")
            .annotate(deliveries=Count("id"))
            .order_by("month")
        )
        return flatten_and_replace_missing_with_none(12, ((r["month"], r["deliveries"]) for r in rows))

    def _sum_per_month_last_three_years(self, year: int) -> QuerySet:
        return (
            self._delivered()
            .filter(due_date__year__gt=year - 3, due_date__year__lte=year)
            .annotate(sale_year=ExtractYear("due_date"), sale_month=ExtractMonth("due_date"))
            .values("sale_year", "sale_month")
            .annotate(
                deliveries=Sum(F("items__quantity") * F("items__product__price"), output_field=IntegerField())
            )
            .order_by("-sale_year", "sale_month")
        )

    def _count_per_product(self, year: int, month: int) -> QuerySet:
        return (
            OrderItem.objects.filter(
                order__state=OrderState.DELIVERED,
                order__due_date__year=year,
                order__due_date__month=month,
            )
            .values("product")
            .annotate(total=Sum("quantity"))
            .order_by("product")
        )

    def _delivered(self) -> QuerySet:
        return self.queryset().filter(state=OrderState.DELIVERED)


order_service = OrderService()
