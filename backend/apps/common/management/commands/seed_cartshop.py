from decimal import Decimal

from django.core.management.base import BaseCommand
from django.db import transaction

from apps.catalog.models import Product
from apps.common import get_logger
from apps.users.models import User

logger = get_logger(__name__).bind(component="common", layer="command")

PRODUCTS = [
    (
        "Fjallraven - Foldsack No. 1 Backpack, Fits 15 Laptops",
        Decimal("109.95"),
        "Your perfect pack for everyday use and walks in the forest.",
        "https://images.example.com/products/81fPKd-2AYL._AC_SL1500_t.png",
    ),
    (
        "Mens Casual Premium Slim Fit T-Shirts",
        Decimal("22.30"),
        "Slim-fitting style, contrast raglan long sleeve, three-button henley placket.",
        "https://images.example.com/products/71-3HjGNDUL._AC_SY879._SX._UX._SY._UY_t.png",
    ),
    (
        "Mens Cotton Jacket",
        Decimal("55.99"),
        "Great outerwear jacket for Spring/Autumn/Winter.",
        "https://images.example.com/products/71li-ujtlUL._AC_UX679_t.png",
    ),
    (
        "WD 2TB Elements Portable External Hard Drive - USB 3.0",
        Decimal("64.00"),
        "USB 3.0 and USB 2.0 compatibility, fast data transfers.",
        "https://images.example.com/products/61IBBVJvSDL._AC_SY879_t.png",
    ),
]

USERS = [
    ("johnd", "john@example.com", "m38rmF$"),
    ("mor_2314", "morrison@example.com", "83r5^_"),
]


class Command(BaseCommand):
    help = "Seed demo users and products so the cart API can be exercised locally."

    def add_arguments(self, parser):
        parser.add_argument(
            "--skip-users",
            action="store_true",
            help="Only seed products.",
        )

    @transaction.atomic
    def handle(self, *args, **options):
        created_products = 0
        for title, price, description, image in PRODUCTS:
            _, created = Product.objects.get_or_create(
                title=title,
                defaults={"price": price, "description": description, "image": image},
            )
            created_products += int(created)

        created_users = 0
        if not options["skip_users"]:
            for username, email, password in USERS:
                if User.objects.filter(username=username).exists():
                    continue
                User.objects.create_user(username=username, email=email, password=password)
                created_users += 1

        logger.info(
            "Seed completed",
            products_created=created_products,
            users_created=created_users,
        )
        self.stdout.write(
            self.style.SUCCESS(
                f"Seeded {created_products} products and {created_users} users"
            )
        )
