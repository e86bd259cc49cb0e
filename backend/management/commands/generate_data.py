# backend/management/commands/generate_data.py — demo pickup locations, products, users and orders
import logging
import random
from datetime import time, timedelta

from django.core.management.base import BaseCommand
from django.db import transaction
from django.utils import timezone

from backend.models import Customer, Order, OrderItem, OrderState, PickupLocation, Product, Role, User

logger = logging.getLogger(__name__)

FILLINGS = [
    "Strawberry", "Chocolate", "Blueberry", "Raspberry", "Vanilla", "Apple", "Cherry",
    "Lemon", "Pecan", "Cinnamon", "Almond", "Caramel",
]
TYPES = ["Cake", "Pastry", "Tart", "Muffin", "Biscuit", "Bread", "Bagel", "Bun", "Brownie", "Cookie"]
FIRST_NAMES = [
    "Ori", "Amanda", "Octavia", "Laurel", "Lael", "Delilah", "Jason", "Skyler", "Arsenio", "Haley",
    "Lionel", "Sylvia", "Jessica", "Lester", "Ferdinand", "Elaine", "Griffin", "Kerry", "Dominique",
]
LAST_NAMES = [
    "Carter", "Castro", "Rich", "Barr", "Nixon", "Hays", "Cook", "Pollard", "Lyons", "Pope",
    "Schmidt", "Horne", "Reese", "Sosa", "Bender", "Wagner", "Fletcher", "Holman", "Hebert",
]
DETAILS = ["", "", "", "Gluten free", "Bring a box", "Needs to be extra sweet", "Call before pickup"]

DEFAULT_PASSWORD = "password"

USERS = [
    # email, first, last, role, locked
    ("baker@example.com", "Heidi", "Carter", Role.BAKER, False),
    ("barista@example.com", "Malin", "Castro", Role.BARISTA, False),
    ("admin@example.com", "Göran", "Rich", Role.ADMIN, False),
    ("mary@example.com", "Mary", "Ocon", Role.BAKER, True),
    ("peter@example.com", "Peter", "Bush", Role.ADMIN, True),
]


class Command(BaseCommand):
    help = "Fill an empty database with demo data."

    def add_arguments(self, parser):
        parser.add_argument("--seed", type=int, default=None, help="Random seed for repeatable data.")
        parser.add_argument("--years", type=int, default=3, help="How many years of order history to create.")
        parser.add_argument("--force", action="store_true", help="Generate even when users already exist.")

    def handle(self, *args, **options):
        if User.objects.exists() and not options["force"]:
            self.stdout.write("Database already contains users; nothing generated (use --force).")
            return

        rng = random.Random(options["seed"])
        with transaction.atomic():
            locations = self._pickup_locations()
            products = self._products(rng)
            users = self._users()
            count = self._orders(rng, users, products, locations, options["years"])

        self.stdout.write(self.style.SUCCESS(
            f"Created {len(products)} products, {len(users)} users and {count} orders."
        ))

    def _pickup_locations(self):
        return [PickupLocation.objects.get_or_create(name=name)[0] for name in ("Store", "Bakery")]

    def _products(self, rng):
        names = {f"{filling} {kind}" for filling in FILLINGS for kind in TYPES}
        products = []
        for name in sorted(names):
            product, _ = Product.objects.get_or_create(
                name=name, defaults={"price": rng.choice([299, 349, 450, 599, 799, 1299, 2499])}
            )
            products.append(product)
        logger.info(f"{len(products)} products ready")
        return products

    def _users(self):
        users = []
        for email, first, last, role, locked in USERS:
            user = User.objects.filter(email=email).first()
            if user is None:
                user = User.objects.create_user(
                    email,
                    DEFAULT_PASSWORD,
                    first_name=first,
                    last_name=last,
                    role=role,
                    locked=locked,
                    is_staff=role == Role.ADMIN,
                )
            users.append(user)
        return users

    def _orders(self, rng, users, products, locations, years):
        today = timezone.localdate()
        start = today.replace(year=today.year - years + 1, month=1, day=1)
        end = today + timedelta(days=14)
        created = 0

        day = start
        while day <= end:
            # more orders near today, fewer further back
            per_day = rng.randint(0, 3 if day < today - timedelta(days=90) else 8)
            for _ in range(per_day):
                self._order(rng, day, today, users, products, locations)
                created += 1
            day += timedelta(days=1)
            if day.day == 1:
                logger.info(f"Generated orders up to {day:%Y-%m}")
        return created

    def _order(self, rng, due_date, today, users, products, locations):
        user = rng.choice(users)
        customer = Customer.objects.create(
            full_name=f"{rng.choice(FIRST_NAMES)} {rng.choice(LAST_NAMES)}",
            phone_number=f"+1-555-{rng.randint(100, 999)}-{rng.randint(1000, 9999)}",
            details=rng.choice(DETAILS),
        )
        order = Order.new_for(user)
        order.customer = customer
        order.pickup_location = rng.choice(locations)
        order.due_date = due_date
        order.due_time = time(rng.randint(8, 17), rng.choice([0, 15, 30, 45]))

        for state in self._state_path(rng, due_date, today):
            order.change_state(user, state)
        order.paid = order.state == OrderState.DELIVERED or rng.random() < 0.3
        order.save()

        OrderItem.objects.bulk_create([
            OrderItem(
                order=order,
                product=product,
                quantity=rng.randint(1, 10),
                comment=rng.choice(DETAILS),
            )
            for product in rng.sample(products, rng.randint(1, 4))
        ])

    def _state_path(self, rng, due_date, today):
        if due_date < today:
            if rng.random() < 0.9:
                return [OrderState.CONFIRMED, OrderState.READY, OrderState.DELIVERED]
            return [OrderState.CANCELLED]
        if due_date == today:
            return rng.choice([
                [],
                [OrderState.CONFIRMED],
                [OrderState.CONFIRMED, OrderState.READY],
                [OrderState.CONFIRMED, OrderState.READY, OrderState.DELIVERED],
                [OrderState.PROBLEM],
            ])
        return rng.choice([[], [], [OrderState.CONFIRMED]])
