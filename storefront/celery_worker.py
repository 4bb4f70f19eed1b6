# storefront/celery_worker.py
from celery import Celery

from storefront.utils.settings import (
    CELERY_BROKER_URL,
    CELERY_RESULT_BACKEND,
    PRODUCT_SYNC_INTERVAL_SECONDS,
)

celery_app = Celery(
    "storefront",
    broker=CELERY_BROKER_URL,
    backend=CELERY_RESULT_BACKEND,
)

# import tasks explicitly so the worker registers them
celery_app.conf.imports = (
    "storefront.tasks.sync_products",
    "storefront.services.notification_service",
)

celery_app.conf.beat_schedule = {
    "sync-products": {
        "task": "storefront.tasks.sync_products.sync_products_task",
        "schedule": PRODUCT_SYNC_INTERVAL_SECONDS,
    },
}

celery_app.conf.timezone = "UTC"
