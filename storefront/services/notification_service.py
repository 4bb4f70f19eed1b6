# storefront/services/notification_service.py
from storefront.celery_worker import celery_app
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


class NotificationService:
    """
    Buyer notifications about payment outcomes.
    Dispatched through Celery so the webhook answers without waiting.
    """

    @staticmethod
    def send_payment_notification(order_id: str, status: str):
        send_payment_notification_task.delay(order_id, status)


@celery_app.task(name="storefront.services.notification_service.send_payment_notification_task")
def send_payment_notification_task(order_id: str, status: str):
    """
    Delivery channel (email/SMS/push) lives outside this service; the task
    records the notification.
    """
    logger.info(f"[NOTIFICATION] Order {order_id} is now {status}")

    return {"order_id": order_id, "status": status, "notification": "sent"}
