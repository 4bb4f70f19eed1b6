# storefront/api/routers/payments.py
from fastapi import APIRouter, Depends, Header, Request
from fastapi.responses import JSONResponse
from requests import RequestException
from sqlalchemy.orm import Session

from storefront.api.deps import get_notification_service, get_payment_client
from storefront.data.database import get_db
from storefront.domain.errors import StorefrontError
from storefront.domain.schemas import PayIn
from storefront.services.notification_service import NotificationService
from storefront.services.payment_client import PaymentClient, PaymentGatewayError
from storefront.services.webhook_service import WebhookService
from storefront.utils.logging import get_logger

logger = get_logger(__name__)

router = APIRouter(prefix="/api", tags=["payments"])


@router.post("/pay")
def pay(payload: PayIn, payment_client: PaymentClient = Depends(get_payment_client)):
    """
    Proxy to the gateway's transaction initialization. Returns the gateway
    body verbatim so the caller can read data.authorization_url.
    """
    if not payload.email or not payload.amount or not payload.reference:
        return JSONResponse(
            status_code=400,
            content={"error": "Missing required fields: email, amount, reference"},
        )
    if payload.amount < 0:
        return JSONResponse(status_code=400, content={"error": "amount must be positive"})

    try:
        return payment_client.initialize_transaction(
            email=payload.email,
            amount=payload.amount,
            reference=payload.reference,
        )
    except PaymentGatewayError as e:
        return JSONResponse(status_code=400, content={"error": e.body})
    except RequestException as e:
        logger.error(f"/api/pay error: {e}")
        return JSONResponse(status_code=500, content={"error": "Payment gateway unreachable"})


@router.post("/paystack-webhook")
async def paystack_webhook(
    request: Request,
    x_paystack_signature: str | None = Header(None),
    db: Session = Depends(get_db),
    notification_service: NotificationService = Depends(get_notification_service),
):
    # signature covers the exact bytes, read them before anything parses the body
    raw_body = await request.body()
    svc = WebhookService(db, notification_service=notification_service)
    try:
        return svc.handle_notification(raw_body, x_paystack_signature)
    except StorefrontError as e:
        return JSONResponse(status_code=e.status_code, content={"error": e.message})
    except Exception as e:
        logger.exception(f"Webhook error: {e}")
        return JSONResponse(status_code=500, content={"error": "Webhook processing failed"})
