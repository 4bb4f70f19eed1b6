# storefront/tasks/sync_products.py
from storefront.celery_worker import celery_app
from storefront.data.database import SessionLocal
from storefront.services.catalog_sync import CatalogSync, SupermarketFeedClient
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


@celery_app.task(name="storefront.tasks.sync_products.sync_products_task")
def sync_products_task():
    logger.info("Sync products task started")

    db = SessionLocal()
    try:
        results = CatalogSync(db, SupermarketFeedClient()).sync_all()
        logger.info(f"Sync products task finished: {results}")
        return results
    finally:
        db.close()
