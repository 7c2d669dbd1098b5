from __future__ import annotations

import random
from datetime import timedelta
from decimal import Decimal

from django.contrib.auth import get_user_model
from django.core.management.base import BaseCommand
from django.utils import timezone

from modules.categories.models import Category
from modules.orders.dtos import CreateOrderDTO, CreateOrderItemDTO, CustomerInfoDTO
from modules.orders.models import Order
from modules.orders.services import get_order_service
from modules.products.constants import ProductStatus, ProductUnit
from modules.products.models import Product
from modules.store_settings.services import get_store_settings_service

CATEGORIES = [
    ("Ground Crackers", "Ground based crackers and chakkars", 1),
    ("Aerial Fireworks", "Sky rockets and aerial display fireworks", 2),
    ("Sparklers", "Hand held sparklers and torches", 3),
    ("Fountains", "Flower pots and fountain crackers", 4),
    ("Gift Boxes", "Assorted cracker gift boxes", 5),
]

# (sku, name, category, price, discount_price, unit, featured)
CATALOG = [
    ("GC-001", "Ground Chakkar Big", "Ground Crackers", "120.00", "99.00", ProductUnit.BOX, True),
    ("GC-002", "Ground Chakkar Special", "Ground Crackers", "180.00", None, ProductUnit.BOX, False),
    ("GC-003", "Bullet Bomb", "Ground Crackers", "90.00", "75.00", ProductUnit.PACKET, False),
    ("GC-004", "1000 Wala", "Ground Crackers", "650.00", "560.00", ProductUnit.BOX, True),
    ("AF-001", "Sky Shot 12", "Aerial Fireworks", "450.00", None, ProductUnit.BOX, True),
    ("AF-002", "Rocket Bomb", "Aerial Fireworks", "150.00", "130.00", ProductUnit.PACKET, False),
    ("AF-003", "Multicolour Shot 30", "Aerial Fireworks", "1200.00", "999.00", ProductUnit.BOX, True),
    ("SP-001", "Electric Sparklers 10cm", "Sparklers", "40.00", None, ProductUnit.BOX, False),
    ("SP-002", "Colour Sparklers 30cm", "Sparklers", "110.00", "95.00", ProductUnit.BOX, False),
    ("SP-003", "Giant Sparklers 50cm", "Sparklers", "220.00", None, ProductUnit.BOX, False),
    ("FT-001", "Flower Pot Big", "Fountains", "160.00", "140.00", ProductUnit.BOX, True),
    ("FT-002", "Colour Koti", "Fountains", "300.00", None, ProductUnit.BOX, False),
    ("GB-001", "Family Gift Box 25 Items", "Gift Boxes", "1500.00", "1299.00", ProductUnit.BOX, True),
    ("GB-002", "Kids Special Gift Box", "Gift Boxes", "799.00", None, ProductUnit.BOX, False),
]

CUSTOMERS = [
    ("Arun Kumar", "arun@example.com", "9876500001", "Chennai", "Tamil Nadu"),
    ("Priya Raman", "priya@example.com", "9876500002", "Madurai", "Tamil Nadu"),
    ("Vikram Shah", "vikram@example.com", "9876500003", "Bengaluru", "Karnataka"),
    ("Meena Iyer", "meena@example.com", "9876500004", "Coimbatore", "Tamil Nadu"),
]


class Command(BaseCommand):
    help = "Seed the store with default settings, sample catalog and users."

    def add_arguments(self, parser):
        parser.add_argument(
            "--orders",
            type=int,
            default=0,
            help=(
                "Also place N sample orders through the checkout "
                "(notification e-mails follow the store settings)."
            ),
        )

    def handle(self, *args, **options):
        random.seed(42)
        self.stdout.write("Seeding store data...")

        users_created = self._seed_users()
        settings_created = get_store_settings_service().initialize_defaults()
        categories = self._seed_categories()
        products = self._seed_products(categories)
        orders_created = self._seed_orders(products, options["orders"])

        self.stdout.write(
            self.style.SUCCESS(
                "Seed completed: "
                f"users={users_created}, "
                f"settings={settings_created}, "
                f"categories={len(categories)}, "
                f"products={len(products)}, "
                f"orders={orders_created}"
            )
        )

    def _seed_users(self) -> int:
        User = get_user_model()
        created = 0
        if not User.objects.filter(username="admin@crackershop.com").exists():
            User.objects.create_superuser(
                "admin@crackershop.com",
                email="admin@crackershop.com",
                password="admin123",
                first_name="Store Admin",
            )
            created += 1
        if not User.objects.filter(username="customer@example.com").exists():
            User.objects.create_user(
                "customer@example.com",
                email="customer@example.com",
                password="customer123",
                first_name="Sample Customer",
            )
            created += 1
        return created

    def _seed_categories(self) -> dict[str, Category]:
        self.stdout.write("Creating categories...")
        categories: dict[str, Category] = {}
        for name, description, sort_order in CATEGORIES:
            category, _ = Category.objects.get_or_create(
                name=name,
                defaults={"description": description, "sort_order": sort_order},
            )
            categories[name] = category
        self.stdout.write(self.style.SUCCESS("Creating categories... Done!"))
        return categories

    def _seed_products(self, categories: dict[str, Category]) -> list[Product]:
        self.stdout.write("Creating products...")
        products: list[Product] = []
        for sku, name, category, price, discount, unit, featured in CATALOG:
            product, _ = Product.objects.get_or_create(
                sku=sku,
                defaults={
                    "name": name,
                    "description": f"{name} from our {category} range.",
                    "category": categories[category],
                    "price": Decimal(price),
                    "discount_price": Decimal(discount) if discount else None,
                    "unit": unit,
                    "is_featured": featured,
                    "tags": [category.lower(), "diwali"],
                    "stock_quantity": random.randint(20, 200),
                    "status": ProductStatus.ACTIVE,
                },
            )
            products.append(product)
        self.stdout.write(self.style.SUCCESS("Creating products... Done!"))
        return products

    def _seed_orders(self, products: list[Product], count: int) -> int:
        if count <= 0:
            return 0
        self.stdout.write("Creating orders...")
        service = get_order_service()
        created = 0

        for i in range(count):
            name, email, phone, city, state = random.choice(CUSTOMERS)
            picked = random.sample(products, k=random.randint(1, 4))
            dto = CreateOrderDTO(
                customer=CustomerInfoDTO(
                    name=name, email=email, phone=phone, city=city, state=state
                ),
                items=[
                    CreateOrderItemDTO(product_id=p.id, quantity=random.randint(1, 3))
                    for p in picked
                ],
                notes=f"Seed order {i + 1}",
                idempotency_key=f"seed-order-{i + 1}",
            )
            order = service.create_order(dto)

            created_at = timezone.now() - timedelta(days=random.randint(0, 30))
            Order.objects.filter(id=order.id).update(created_at=created_at)
            created += 1

        self.stdout.write(self.style.SUCCESS("Creating orders... Done!"))
        return created
