# storefront/api/routers/checkout.py
from fastapi import APIRouter, Body, Depends, HTTPException
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from storefront.api.deps import (
    get_cart_store,
    get_lock_service,
    get_optional_buyer,
    get_payment_client,
)
from storefront.data.database import get_db
from storefront.domain.errors import GatewayUnavailable, StorefrontError
from storefront.domain.schemas import Buyer, CheckoutIn, CheckoutOut
from storefront.services.cart_store import CartStore
from storefront.services.checkout_service import CheckoutService
from storefront.services.lock_service import LockService
from storefront.services.payment_client import PaymentClient

router = APIRouter(prefix="/supermarkets/{supermarket_id}", tags=["checkout"])


@router.post("/checkout", response_model=CheckoutOut, status_code=201)
def checkout(
    supermarket_id: str,
    payload: CheckoutIn | None = Body(None),
    buyer: Buyer | None = Depends(get_optional_buyer),
    db: Session = Depends(get_db),
    payment_client: PaymentClient = Depends(get_payment_client),
    cart_store: CartStore = Depends(get_cart_store),
    lock_service: LockService = Depends(get_lock_service),
):
    """
    Places a pending order from the buyer's cart and returns the payment
    page to redirect to. The order is final once created; payment status
    arrives later through the webhook.
    """
    svc = CheckoutService(
        db=db,
        payment_client=payment_client,
        cart_store=cart_store,
        lock_service=lock_service,
    )
    try:
        return svc.checkout(supermarket_id, buyer, payload.items if payload else None)
    except GatewayUnavailable as e:
        # order exists, the client needs its id to retry payment
        return JSONResponse(status_code=e.status_code, content={"error": e.message, "order_id": e.order_id})
    except StorefrontError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)
