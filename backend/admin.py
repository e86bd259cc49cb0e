# backend/admin.py
from django.contrib import admin
from django.contrib.auth import forms as auth_forms
from django.contrib.auth.admin import UserAdmin as DjangoUserAdmin

from .formatting import format_price
from .models import Customer, HistoryItem, Order, OrderItem, PickupLocation, Product, User


# ===============================
# User (logs in by e-mail, no username)
# ===============================
class UserCreationForm(auth_forms.UserCreationForm):
    class Meta:
        model = User
        fields = ("email", "first_name", "last_name", "role")


class UserChangeForm(auth_forms.UserChangeForm):
    class Meta:
        model = User
        fields = "__all__"


@admin.register(User)
class UserAdmin(DjangoUserAdmin):
    form = UserChangeForm
    add_form = UserCreationForm
    ordering = ("email",)
    list_display = ("id", "email", "first_name", "last_name", "role", "locked", "is_staff")
    list_filter = ("role", "locked", "is_staff", "is_active")
    search_fields = ("email", "first_name", "last_name", "role")
    readonly_fields = ("locked", "last_login", "date_joined")
    fieldsets = (
        (None, {"fields": ("email", "password")}),
        ("Personal info", {"fields": ("first_name", "last_name", "role", "locked")}),
        ("Permissions", {"fields": ("is_active", "is_staff", "is_superuser", "groups", "user_permissions")}),
        ("Important dates", {"fields": ("last_login", "date_joined")}),
    )
    add_fieldsets = (
        (None, {
            "classes": ("wide",),
            "fields": ("email", "first_name", "last_name", "role", "password1", "password2"),
        }),
    )

    # same guards as UserService: locked users are frozen, nobody deletes themselves
    def has_change_permission(self, request, obj=None):
        if obj is not None and obj.locked:
            return False
        return super().has_change_permission(request, obj)

    def has_delete_permission(self, request, obj=None):
        if obj is not None and (obj.locked or obj == request.user):
            return False
        return super().has_delete_permission(request, obj)


# ===============================
# Product
# ===============================
@admin.register(Product)
class ProductAdmin(admin.ModelAdmin):
    list_display = ("id", "name", "price_fmt")
    search_fields = ("name",)

    def price_fmt(self, obj):
        return format_price(obj.price)
    price_fmt.short_description = "Price"


# ===============================
# PickupLocation / Customer
# ===============================
@admin.register(PickupLocation)
class PickupLocationAdmin(admin.ModelAdmin):
    list_display = ("id", "name")
    search_fields = ("name",)


@admin.register(Customer)
class CustomerAdmin(admin.ModelAdmin):
    list_display = ("id", "full_name", "phone_number")
    search_fields = ("full_name", "phone_number")


# ===============================
# Order / OrderItem / HistoryItem
# ===============================
class OrderItemInline(admin.TabularInline):
    model = OrderItem
    extra = 0
    autocomplete_fields = ("product",)


class HistoryItemInline(admin.TabularInline):
    model = HistoryItem
    extra = 0
    readonly_fields = ("new_state", "message", "timestamp", "created_by")
    can_delete = False


@admin.register(Order)
class OrderAdmin(admin.ModelAdmin):
    list_display = ("id", "customer", "due_date", "due_time", "pickup_location", "state", "paid", "total_fmt")
    list_filter = ("state", "paid", "pickup_location")
    search_fields = ("customer__full_name",)
    date_hierarchy = "due_date"
    list_select_related = ("customer", "pickup_location")
    inlines = [OrderItemInline, HistoryItemInline]

    def total_fmt(self, obj):
        return format_price(obj.total_price)
    total_fmt.short_description = "Total"
