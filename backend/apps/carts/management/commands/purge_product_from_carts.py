from django.core.management.base import BaseCommand, CommandError

from apps.carts.container import build_cart_service


class Command(BaseCommand):
    help = "Remove a retired product from every cart."

    def add_arguments(self, parser):
        parser.add_argument("product_id", type=int)

    def handle(self, *args, **options):
        product_id = options["product_id"]
        if product_id <= 0:
            raise CommandError("product_id must be a positive integer")
        removed = build_cart_service().purge_product(product_id)
        self.stdout.write(
            self.style.SUCCESS(f"Removed product {product_id} from {removed} cart line(s)")
        )
