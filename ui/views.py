# ui/views.py — storefront, order pages, dashboard, users and products
import logging
from datetime import timedelta

from django.conf import settings
from django.contrib import messages
from django.db import transaction
from django.http import Http404
from django.shortcuts import redirect, render
from django.urls import reverse
from django.utils import timezone
from django.views import View
from django.views.generic import TemplateView

from backend.exceptions import EntityNotFoundError
from backend.models import Customer, Role
from backend.services import (
    PageRequest,
    order_service,
    pickup_location_service,
    product_service,
    user_service,
)

from .access import RoleRequiredMixin
from .crud import EntityDeleteView, EntityEditView, EntityListView
from .forms import (
    CommentForm,
    CustomerForm,
    OrderForm,
    OrderItemFormSet,
    ProductForm,
    SearchBarForm,
    UserForm,
)
from .navigation import TITLE_DASHBOARD, TITLE_PRODUCTS, TITLE_STOREFRONT, TITLE_USERS

logger = logging.getLogger(__name__)

MONTH_NAMES = ["Jan", "Feb", "Mar", "Apr", "May", "Jun", "Jul", "Aug", "Sep", "Oct", "Nov", "Dec"]


def _load_order(order_id):
    try:
        return order_service.load(order_id)
    except EntityNotFoundError:
        raise Http404("Order not found")


# ===============================
# Storefront
# ===============================
class StorefrontView(RoleRequiredMixin, TemplateView):
    template_name = "ui/storefront.html"

    def get_context_data(self, **kwargs):
        context = super().get_context_data(**kwargs)
        search = SearchBarForm(
            self.request.GET or None,
            placeholder="Search",
            checkbox_text="Show past orders",
            action_text="New order",
            action_url=reverse("order-new"),
        )
        # without the checkbox only orders due from today onwards are listed
        filter_date = None if search.is_checkbox_checked() else timezone.localdate() - timedelta(days=1)
        page = order_service.find_any_matching_after_due_date(
            search.get_filter(),
            filter_date,
            PageRequest(
                number=self.request.GET.get("page") or 1,
                size=settings.BAKERY_PAGE_SIZE,
                sort=("due_date", "due_time", "id"),
            ),
        )
        context.update(title=TITLE_STOREFRONT, search=search, page=page)
        return context


class OrderEditView(RoleRequiredMixin, View):
    """Creates a new order (no pk) or edits an existing one."""

    template_name = "ui/order_form.html"

    def get(self, request, pk=None):
        order = self._order(pk)
        customer = order.customer if order.customer_id else Customer()
        return self._render(
            order,
            OrderForm(instance=order),
            CustomerForm(instance=customer, prefix="customer"),
            OrderItemFormSet(instance=order, prefix="items"),
        )

    def post(self, request, pk=None):
        order = self._order(pk)
        customer = order.customer if order.customer_id else Customer()
        order_form = OrderForm(request.POST, instance=order)
        customer_form = CustomerForm(request.POST, instance=customer, prefix="customer")
        formset = OrderItemFormSet(request.POST, instance=order, prefix="items")

        if not (order_form.is_valid() and customer_form.is_valid() and formset.is_valid()):
            return self._render(order, order_form, customer_form, formset)

        def fill(current_user, target):
            target.customer = customer_form.save()
            for field in ("due_date", "due_time", "pickup_location", "paid"):
                setattr(target, field, order_form.cleaned_data[field])
            target.change_state(current_user, order_form.cleaned_data["state"])

        with transaction.atomic():
            saved = order_service.save_order(request.user, pk, fill)
            formset.instance = saved
            formset.save()

        messages.success(request, f"Order #{saved.pk} saved.")
        return redirect("order-detail", pk=saved.pk)

    def _order(self, pk):
        if pk is not None:
            return _load_order(pk)
        order = order_service.create_new(self.request.user)
        try:
            order.pickup_location = pickup_location_service.get_default()
        except EntityNotFoundError:
            logger.warning("No pickup location configured; new orders start without one")
        return order

    def _render(self, order, order_form, customer_form, formset):
        return render(self.request, self.template_name, {
            "title": TITLE_STOREFRONT,
            "order": order,
            "order_form": order_form,
            "customer_form": customer_form,
            "formset": formset,
        })


class OrderDetailView(RoleRequiredMixin, View):
    template_name = "ui/order_detail.html"

    def get(self, request, pk):
        return self._render(_load_order(pk), CommentForm())

    def post(self, request, pk):
        order = _load_order(pk)
        form = CommentForm(request.POST)
        if not form.is_valid():
            return self._render(order, form)
        order_service.add_comment(request.user, order, form.cleaned_data["comment"])
        return redirect("order-detail", pk=order.pk)

    def _render(self, order, comment_form):
        return render(self.request, self.template_name, {
            "title": TITLE_STOREFRONT,
            "order": order,
            "items": order.items.select_related("product"),
            "history": order.history.select_related("created_by"),
            "comment_form": comment_form,
        })


# ===============================
# Dashboard
# ===============================
class DashboardView(RoleRequiredMixin, TemplateView):
    template_name = "ui/dashboard.html"

    def get_context_data(self, **kwargs):
        context = super().get_context_data(**kwargs)
        today = timezone.localdate()
        data = order_service.get_dashboard_data(today.month, today.year)
        context.update(
            title=TITLE_DASHBOARD,
            today=today,
            stats=data.delivery_stats,
            deliveries_per_day=list(enumerate(data.deliveries_this_month, start=1)),
            deliveries_per_month=list(zip(MONTH_NAMES, data.deliveries_this_year)),
            month_names=MONTH_NAMES,
            sales_rows=[(today.year - offset, row) for offset, row in enumerate(data.sales_per_month)],
            product_deliveries=list(data.product_deliveries.items()),
            dashboard_json=data.to_dict(),
            upcoming_orders=order_service.find_any_matching_starting_today()[:50],
        )
        return context


# ===============================
# Users (admins only)
# ===============================
class UsersView(EntityListView):
    allowed_roles = (Role.ADMIN,)
    template_name = "ui/users.html"
    service = user_service
    entity_name = "User"
    title = TITLE_USERS
    list_url_name = "users"
    new_url_name = "user-new"


class UserEditView(EntityEditView):
    allowed_roles = (Role.ADMIN,)
    service = user_service
    form_class = UserForm
    entity_name = "User"
    list_url_name = "users"


class UserDeleteView(EntityDeleteView):
    allowed_roles = (Role.ADMIN,)
    service = user_service
    entity_name = "User"
    list_url_name = "users"


# ===============================
# Products (admins only)
# ===============================
class ProductsView(EntityListView):
    allowed_roles = (Role.ADMIN,)
    template_name = "ui/products.html"
    service = product_service
    entity_name = "Product"
    title = TITLE_PRODUCTS
    list_url_name = "products"
    new_url_name = "product-new"


class ProductEditView(EntityEditView):
    allowed_roles = (Role.ADMIN,)
    service = product_service
    form_class = ProductForm
    entity_name = "Product"
    list_url_name = "products"


class ProductDeleteView(EntityDeleteView):
    allowed_roles = (Role.ADMIN,)
    service = product_service
    entity_name = "Product"
    list_url_name = "products"
