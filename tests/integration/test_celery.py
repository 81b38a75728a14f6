"""Integration tests for the Celery configuration and catalog tasks."""

import pytest

pytestmark = pytest.mark.integration


@pytest.fixture(autouse=True)
def _celery_eager(settings):
    """Run tasks synchronously inside the test process."""
    settings.CELERY_TASK_ALWAYS_EAGER = True
    settings.CELERY_TASK_EAGER_PROPAGATES = True


class TestCeleryConfig:
    def test_celery_app_is_importable(self):
        from config.celery import app

        assert app.main == "marketplace"

    def test_celery_app_exported_from_init(self):
        from config import celery_app

        assert celery_app.main == "marketplace"

    def test_celery_serializer_is_json(self, settings):
        assert settings.CELERY_TASK_SERIALIZER == "json"
        assert settings.CELERY_RESULT_SERIALIZER == "json"
        assert settings.CELERY_ACCEPT_CONTENT == ["json"]

    def test_celery_timezone_matches_django(self, settings):
        assert settings.CELERY_TIMEZONE == settings.TIME_ZONE

    def test_backfill_is_scheduled(self, settings):
        tasks = [entry["task"] for entry in settings.CELERY_BEAT_SCHEDULE.values()]
        assert "products.backfill_slugs" in tasks


class TestBackfillSlugsTask:
    def test_direct_call(self, make_product):
        from modules.products.tasks import backfill_slugs

        product = make_product(name="Gaming Chair")

        assert backfill_slugs() == {"updated": 1, "errors": 0}
        product.refresh_from_db()
        assert product.slug == "gaming-chair"

    def test_registered_name(self):
        from modules.products.tasks import backfill_slugs

        assert backfill_slugs.name == "products.backfill_slugs"
