# backend/serializers.py — read/write serializers; every write goes through the services
from django.core.validators import MinLengthValidator
from django.db import transaction
from rest_framework import serializers

from .formatting import format_price
from .models import Customer, HistoryItem, Order, OrderItem, OrderState, PickupLocation, Product, User
from .services import order_service, product_service, user_service


def _current_user(serializer):
    request = serializer.context.get("request")
    return getattr(request, "user", None)


# --------- Products ---------
class ProductSerializer(serializers.ModelSerializer):
    price_formatted = serializers.SerializerMethodField()

    class Meta:
        model = Product
        fields = ["id", "name", "price", "price_formatted"]
        # uniqueness is reported by ProductService with its own message
        extra_kwargs = {"name": {"validators": [MinLengthValidator(2)]}}

    def get_price_formatted(self, obj):
        return format_price(obj.price)

    def create(self, validated_data):
        user = _current_user(self)
        product = product_service.create_new(user)
        for attr, value in validated_data.items():
            setattr(product, attr, value)
        return product_service.save(user, product)

    def update(self, instance, validated_data):
        for attr, value in validated_data.items():
            setattr(instance, attr, value)
        return product_service.save(_current_user(self), instance)


# --------- Pickup locations ---------
class PickupLocationSerializer(serializers.ModelSerializer):
    class Meta:
        model = PickupLocation
        fields = ["id", "name"]


# --------- Users ---------
class UserSerializer(serializers.ModelSerializer):
    password = serializers.CharField(write_only=True, required=False, allow_blank=False, min_length=4)

    class Meta:
        model = User
        fields = ["id", "email", "first_name", "last_name", "role", "locked", "password"]
        read_only_fields = ["id", "locked"]

    def validate(self, attrs):
        if self.instance is None and not attrs.get("password"):
            raise serializers.ValidationError({"password": "Required for new users."})
        return attrs

    def create(self, validated_data):
        user = _current_user(self)
        entity = user_service.create_new(user)
        return self._save(user, entity, validated_data)

    def update(self, instance, validated_data):
        return self._save(_current_user(self), instance, validated_data)

    def _save(self, current_user, entity, validated_data):
        password = validated_data.pop("password", None)
        for attr, value in validated_data.items():
            setattr(entity, attr, value)
        if password:
            entity.set_password(password)
        return user_service.save(current_user, entity)


# --------- Orders (read) ---------
class CustomerSerializer(serializers.ModelSerializer):
    class Meta:
        model = Customer
        fields = ["id", "full_name", "phone_number", "details"]
        read_only_fields = ["id"]


class OrderItemReadSerializer(serializers.ModelSerializer):
    product = ProductSerializer(read_only=True)
    total_price = serializers.IntegerField(read_only=True)

    class Meta:
        model = OrderItem
        fields = ["id", "product", "quantity", "comment", "total_price"]


class HistoryItemSerializer(serializers.ModelSerializer):
    created_by = serializers.StringRelatedField()

    class Meta:
        model = HistoryItem
        fields = ["id", "new_state", "message", "timestamp", "created_by"]


class OrderReadSerializer(serializers.ModelSerializer):
    customer = CustomerSerializer(read_only=True)
    pickup_location = PickupLocationSerializer(read_only=True)
    items = OrderItemReadSerializer(many=True, read_only=True)
    history = HistoryItemSerializer(many=True, read_only=True)
    total_price = serializers.IntegerField(read_only=True)
    total_price_formatted = serializers.SerializerMethodField()

    class Meta:
        model = Order
        fields = [
            "id",
            "due_date",
            "due_time",
            "pickup_location",
            "customer",
            "state",
            "paid",
            "items",
            "history",
            "total_price",
            "total_price_formatted",
        ]

    def get_total_price_formatted(self, obj):
        return format_price(obj.total_price)


# --------- Orders (write) ---------
class OrderItemWriteSerializer(serializers.ModelSerializer):
    product = serializers.PrimaryKeyRelatedField(queryset=Product.objects.all())
    quantity = serializers.IntegerField(min_value=1, default=1)

    class Meta:
        model = OrderItem
        fields = ["product", "quantity", "comment"]


class OrderWriteSerializer(serializers.ModelSerializer):
    customer = CustomerSerializer()
    items = OrderItemWriteSerializer(many=True)
    state = serializers.ChoiceField(choices=OrderState.choices, required=False)

    class Meta:
        model = Order
        fields = ["id", "due_date", "due_time", "pickup_location", "customer", "state", "paid", "items"]
        read_only_fields = ["id"]

    def validate_items(self, value):
        if not value:
            raise serializers.ValidationError("An order needs at least one item.")
        return value

    @transaction.atomic
    def create(self, validated_data):
        items = validated_data.pop("items")
        customer_data = validated_data.pop("customer")

        def fill(current_user, order):
            order.customer = Customer.objects.create(**customer_data)
            self._apply(current_user, order, validated_data)

        order = order_service.save_order(_current_user(self), None, fill)
        self._replace_items(order, items)
        return order

    @transaction.atomic
    def update(self, instance, validated_data):
        items = validated_data.pop("items", None)
        customer_data = validated_data.pop("customer", None)

        def fill(current_user, order):
            if customer_data:
                for attr, value in customer_data.items():
                    setattr(order.customer, attr, value)
                order.customer.save()
            self._apply(current_user, order, validated_data)

        order = order_service.save_order(_current_user(self), instance.pk, fill)
        if items is not None:
            self._replace_items(order, items)
        return order

    def to_representation(self, instance):
        return OrderReadSerializer(instance, context=self.context).data

    @staticmethod
    def _apply(current_user, order, validated_data):
        state = validated_data.pop("state", None)
        for attr, value in validated_data.items():
            setattr(order, attr, value)
        if state is not None:
            order.change_state(current_user, state)

    @staticmethod
    def _replace_items(order, items):
        order.items.all().delete()
        OrderItem.objects.bulk_create([OrderItem(order=order, **item) for item in items])


class CommentSerializer(serializers.Serializer):
    comment = serializers.CharField(max_length=255)
