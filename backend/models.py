# backend/models.py — User, Customer, Product, PickupLocation, Order, OrderItem and HistoryItem
from django.contrib.auth.models import AbstractUser, BaseUserManager
from django.core.validators import MaxValueValidator, MinLengthValidator, MinValueValidator
from django.db import models
from django.utils import timezone


# --------- Users ---------
class Role(models.TextChoices):
    ADMIN = "admin", "Admin"
    BAKER = "baker", "Baker"
    BARISTA = "barista", "Barista"


class UserManager(BaseUserManager):
    """Users log in with their e-mail address; there is no username."""
    use_in_migrations = True

    def _create_user(self, email, password, **extra_fields):
        if not email:
            raise ValueError("The e-mail address must be set")
        email = self.normalize_email(email)
        user = self.model(email=email, **extra_fields)
        user.set_password(password)
        user.save(using=self._db)
        return user

    def create_user(self, email, password=None, **extra_fields):
        extra_fields.setdefault("is_staff", False)
        extra_fields.setdefault("is_superuser", False)
        return self._create_user(email, password, **extra_fields)

    def create_superuser(self, email, password=None, **extra_fields):
        extra_fields.setdefault("is_staff", True)
        extra_fields.setdefault("is_superuser", True)
        extra_fields.setdefault("role", Role.ADMIN)
        if extra_fields.get("is_staff") is not True:
            raise ValueError("Superuser must have is_staff=True.")
        if extra_fields.get("is_superuser") is not True:
            raise ValueError("Superuser must have is_superuser=True.")
        return self._create_user(email, password, **extra_fields)


class User(AbstractUser):
    username = None
    email = models.EmailField("email address", unique=True)
    role = models.CharField(max_length=20, choices=Role.choices, default=Role.BARISTA)
    # locked accounts are demo fixtures: they can log in but never be changed
    locked = models.BooleanField(default=False)

    USERNAME_FIELD = "email"
    REQUIRED_FIELDS = ["first_name", "last_name"]

    objects = UserManager()

    class Meta:
        ordering = ["email"]

    def __str__(self):
        return self.email

    @property
    def is_admin(self) -> bool:
        return self.role == Role.ADMIN


# --------- Customers ---------
class Customer(models.Model):
    full_name = models.CharField(max_length=255)
    phone_number = models.CharField(max_length=20)
    details = models.CharField(max_length=255, blank=True, default="")

    class Meta:
        ordering = ["full_name"]

    def __str__(self):
        return self.full_name


# --------- Products ---------
class Product(models.Model):
    name = models.CharField(max_length=255, unique=True, validators=[MinLengthValidator(2)])
    # price stored in cents
    price = models.PositiveIntegerField(default=0, validators=[MaxValueValidator(100000)])

    class Meta:
        ordering = ["name"]

    def __str__(self):
        return self.name


# --------- Pickup locations ---------
class PickupLocation(models.Model):
    name = models.CharField(max_length=255, unique=True)

    class Meta:
        ordering = ["id"]

    def __str__(self):
        return self.name


# --------- Orders ---------
class OrderState(models.TextChoices):
    NEW = "new", "New"
    CONFIRMED = "confirmed", "Confirmed"
    READY = "ready", "Ready"
    DELIVERED = "delivered", "Delivered"
    PROBLEM = "problem", "Problem"
    CANCELLED = "cancelled", "Cancelled"


class Order(models.Model):
    due_date = models.DateField(db_index=True)
    due_time = models.TimeField()
    pickup_location = models.ForeignKey(
        PickupLocation, related_name="orders", on_delete=models.PROTECT
    )
    customer = models.ForeignKey(Customer, related_name="orders", on_delete=models.PROTECT)
    state = models.CharField(max_length=20, choices=OrderState.choices, default=OrderState.NEW)
    paid = models.BooleanField(default=False)

    class Meta:
        ordering = ["due_date", "due_time", "id"]

    def __str__(self):
        return f"Order #{self.pk} - {self.customer_id and self.customer.full_name}"

    @classmethod
    def new_for(cls, created_by):
        order = cls(state=OrderState.NEW)
        order.add_history_item(created_by, "Order placed")
        return order

    @property
    def total_price(self) -> int:
        if not self.pk:
            return 0
        return sum(item.total_price for item in self.items.all())

    def add_history_item(self, created_by, message):
        """
        Records a history entry carrying the current state.

        Entries are kept on the instance and written by save(), so history can
        be added to an order that has no primary key yet.
        """
        item = HistoryItem(created_by=created_by, message=message, new_state=self.state)
        self.__dict__.setdefault("_pending_history", []).append(item)
        return item

    def change_state(self, user, state):
        create_history = self.state != state and self.state is not None and state is not None
        self.state = state
        if create_history:
            self.add_history_item(user, f"Order {OrderState(state).label.lower()}")

    def save(self, *args, **kwargs):
        super().save(*args, **kwargs)
        for item in self.__dict__.pop("_pending_history", []):
            item.order = self
            item.save()


class OrderItem(models.Model):
    order = models.ForeignKey(Order, related_name="items", on_delete=models.CASCADE)
    product = models.ForeignKey(Product, related_name="order_items", on_delete=models.PROTECT)
    quantity = models.PositiveIntegerField(default=1, validators=[MinValueValidator(1)])
    comment = models.CharField(max_length=255, blank=True, default="")

    class Meta:
        ordering = ["id"]

    def __str__(self):
        return f"{self.quantity}x {self.product.name}"

    @property
    def total_price(self) -> int:
        return self.quantity * self.product.price


class HistoryItem(models.Model):
    order = models.ForeignKey(Order, related_name="history", on_delete=models.CASCADE)
    new_state = models.CharField(max_length=20, choices=OrderState.choices)
    message = models.CharField(max_length=255)
    timestamp = models.DateTimeField(default=timezone.now)
    created_by = models.ForeignKey(
        "User", related_name="history_items", on_delete=models.SET_NULL, null=True, blank=True
    )

    class Meta:
        ordering = ["timestamp", "id"]

    def __str__(self):
        return f"{self.timestamp:%Y-%m-%d %H:%M} {self.message}"
