"""Asynchronous maintenance tasks for the product catalog."""

import structlog
from celery import shared_task

from modules.products.repositories.django_repository import ProductDjangoRepository
from modules.products.services import ProductService

logger = structlog.get_logger(__name__)


@shared_task(name="products.backfill_slugs")
def backfill_slugs():
    """Assign slugs to products that were stored without one."""
    result = ProductService(repository=ProductDjangoRepository()).backfill_slugs()
    logger.info("backfill_slugs.executed", **result.as_dict())
    return result.as_dict()
