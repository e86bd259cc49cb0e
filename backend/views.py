# backend/views.py — ViewSets over the services + dashboard endpoint

from django.http import JsonResponse
from django.utils import timezone
from django.utils.dateparse import parse_date
from rest_framework import status, viewsets
from rest_framework.decorators import action
from rest_framework.exceptions import ValidationError
from rest_framework.response import Response
from rest_framework.views import APIView

from .permissions import IsAdminRole, IsAdminRoleOrReadOnly
from .serializers import (
    CommentSerializer,
    OrderReadSerializer,
    OrderWriteSerializer,
    PickupLocationSerializer,
    ProductSerializer,
    UserSerializer,
)
from .services import order_service, pickup_location_service, product_service, user_service


def health(_request):
    return JsonResponse({"service": "Bakery Backend", "status": "healthy"})


def _int_param(params, name, default, low, high):
    raw = params.get(name)
    if raw in (None, ""):
        return default
    try:
        value = int(raw)
    except (TypeError, ValueError):
        raise ValidationError({name: "Must be an integer."})
    if not low <= value <= high:
        raise ValidationError({name: f"Must be between {low} and {high}."})
    return value


# -------------------------------------------------
# Products (CRUD, writes for admins)
# -------------------------------------------------
class ProductViewSet(viewsets.ModelViewSet):
    permission_classes = [IsAdminRoleOrReadOnly]
    serializer_class = ProductSerializer
    ordering_fields = ["id", "name", "price"]

    def get_queryset(self):
        return product_service.matching(self.request.query_params.get("filter"))

    def perform_destroy(self, instance):
        product_service.delete(self.request.user, instance)


# -------------------------------------------------
# Pickup locations (read only)
# -------------------------------------------------
class PickupLocationViewSet(viewsets.ReadOnlyModelViewSet):
    serializer_class = PickupLocationSerializer
    ordering_fields = ["id", "name"]

    def get_queryset(self):
        return pickup_location_service.matching(self.request.query_params.get("filter"))

    @action(detail=False, methods=["get"])
    def default(self, request):
        location = pickup_location_service.get_default()
        return Response(PickupLocationSerializer(location).data)


# -------------------------------------------------
# Users (admins only)
# -------------------------------------------------
class UserViewSet(viewsets.ModelViewSet):
    permission_classes = [IsAdminRole]
    serializer_class = UserSerializer
    ordering_fields = ["email", "first_name", "last_name", "role"]

    def get_queryset(self):
        return user_service.matching(self.request.query_params.get("filter"))

    def perform_destroy(self, instance):
        user_service.delete(self.request.user, instance)


# -------------------------------------------------
# Orders (separate read and write serializers)
# -------------------------------------------------
class OrderViewSet(viewsets.ModelViewSet):
    filterset_fields = ["state", "pickup_location", "paid"]
    ordering_fields = ["due_date", "due_time", "state", "id"]

    def get_queryset(self):
        qp = self.request.query_params
        due_after = None
        if qp.get("due_after"):
            due_after = parse_date(qp["due_after"])
            if due_after is None:
                raise ValidationError({"due_after": "Use the YYYY-MM-DD format."})
        return order_service.matching_after_due_date(qp.get("filter"), due_after).prefetch_related(
            "history__created_by"
        )

    def get_serializer_class(self):
        if self.request.method in ("GET", "HEAD", "OPTIONS"):
            return OrderReadSerializer
        return OrderWriteSerializer

    def perform_destroy(self, instance):
        order_service.delete(self.request.user, instance)

    @action(detail=True, methods=["post"])
    def comment(self, request, pk=None):
        ser = CommentSerializer(data=request.data)
        ser.is_valid(raise_exception=True)
        order_service.add_comment(request.user, self.get_object(), ser.validated_data["comment"])
        # reload so the prefetched history includes the new entry
        order = self.get_object()
        return Response(OrderReadSerializer(order, context={"request": request}).data, status=status.HTTP_201_CREATED)

    @action(detail=False, methods=["get"])
    def upcoming(self, request):
        orders = order_service.find_any_matching_starting_today()
        page = self.paginate_queryset(orders)
        ser = OrderReadSerializer(page if page is not None else orders, many=True, context={"request": request})
        if page is not None:
            return self.get_paginated_response(ser.data)
        return Response(ser.data)


# -------------------------------------------------
# Dashboard
# -------------------------------------------------
class DashboardView(APIView):
    def get(self, request):
        today = timezone.localdate()
        month = _int_param(request.query_params, "month", today.month, 1, 12)
        year = _int_param(request.query_params, "year", today.year, 1, 9999)
        return Response(order_service.get_dashboard_data(month, year).to_dict())
