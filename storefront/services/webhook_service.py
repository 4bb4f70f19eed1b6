# storefront/services/webhook_service.py
import hashlib
import hmac
from typing import Dict

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from storefront.data.models.order import ORDER_PAID, ORDER_FAILED
from storefront.domain.errors import InvalidSignature, StorefrontError
from storefront.domain.events import (
    ChargeFailed,
    ChargeSuccess,
    PaymentEvent,
    parse_payment_event,
)
from storefront.repos.order_repo import OrderRepo
from storefront.services.notification_service import NotificationService
from storefront.utils.settings import PAYSTACK_SECRET_KEY
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


def sign(raw_body: bytes, secret: str) -> str:
    return hmac.new(secret.encode(), raw_body, hashlib.sha512).hexdigest()


def verify_signature(raw_body: bytes, signature: str | None, secret: str) -> bool:
    if not signature or not secret:
        return False
    return hmac.compare_digest(sign(raw_body, secret), signature.strip().lower())


class WebhookService:
    """
    Sole writer of an order's terminal status.

    Signature first, then parsing, then a single conditional UPDATE by
    reference. Replays and unknown references are acknowledged as no-ops.
    Last write wins; paid -> failed is logged since delivery order is not
    guaranteed by the gateway.
    """

    def __init__(self, db: Session, notification_service: NotificationService | None = None, secret: str | None = None):
        self.repo = OrderRepo(db)
        self.notification_service = notification_service or NotificationService()
        self.secret = secret if secret is not None else PAYSTACK_SECRET_KEY

    def handle_notification(self, raw_body: bytes, signature: str | None) -> Dict[str, str]:
        if not verify_signature(raw_body, signature, self.secret):
            logger.warning("Webhook rejected: invalid signature")
            raise InvalidSignature()

        event = parse_payment_event(raw_body)
        logger.info(f"Webhook event: {event.event}")

        try:
            self._apply(event)
        except SQLAlchemyError as e:
            self.repo.rollback()
            logger.exception(f"Webhook processing failed for {event.event}: {e}")
            raise StorefrontError("Webhook processing failed") from e

        return {"status": "ok"}

    def _apply(self, event: PaymentEvent) -> None:
        if isinstance(event, ChargeSuccess):
            reference = event.data.reference
            changed = self.repo.update_order_status(reference, ORDER_PAID)
            self._check_amount(reference, event)
            self._after_update(reference, ORDER_PAID, changed)

        elif isinstance(event, ChargeFailed):
            reference = event.data.reference
            previous = self.repo.get_order(reference)
            if previous is not None and previous.status == ORDER_PAID:
                logger.warning(f"Order {reference} was paid, late charge.failed moves it to failed")
            changed = self.repo.update_order_status(reference, ORDER_FAILED)
            self._after_update(reference, ORDER_FAILED, changed)

        else:
            logger.info(f"Ignoring unrecognized webhook event {event.event}")

    def _after_update(self, reference: str, status: str, changed: int) -> None:
        if not changed:
            #unknown reference or replay
            logger.info(f"Order {reference} not changed to {status}")
            return
        logger.info(f"Order {reference} marked as {status}")
        # status is already committed, ack even when the broker is down
        try:
            self.notification_service.send_payment_notification(reference, status)
        except Exception as e:
            logger.exception(f"Notification for order {reference} ({status}) not dispatched: {e}")

    def _check_amount(self, reference: str, event: ChargeSuccess) -> None:
        order = self.repo.get_order(reference)
        if order is not None and order.total_amount != event.data.major_amount:
            logger.warning(
                f"Order {reference} paid {event.data.major_amount}, "
                f"expected {order.total_amount}"
            )
