from __future__ import annotations

from django.core.management.base import BaseCommand

from modules.products.repositories.django_repository import ProductDjangoRepository
from modules.products.services import ProductService


class Command(BaseCommand):
    help = "Generate slugs for products that have none (NULL or empty)."

    def add_arguments(self, parser):
        parser.add_argument(
            "--dry-run",
            action="store_true",
            help="List the products that would get a slug without saving.",
        )

    def handle(self, *args, **options):
        repository = ProductDjangoRepository()

        if options["dry_run"]:
            pending = repository.list_missing_slug()
            self.stdout.write(f"Found {len(pending)} products without slugs")
            for product in pending:
                self.stdout.write(f"  {product.id}  {product.name}")
            return

        result = ProductService(repository=repository).backfill_slugs()

        style = self.style.SUCCESS if result.errors == 0 else self.style.WARNING
        self.stdout.write(
            style(
                "Slug generation completed: "
                f"updated={result.updated}, "
                f"errors={result.errors}"
            )
        )
