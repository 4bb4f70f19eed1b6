# storefront/api/deps.py
from functools import lru_cache

from fastapi import Depends, Header, HTTPException
from sqlalchemy.orm import Session

from storefront.data.database import get_db
from storefront.domain.errors import StorefrontError
from storefront.domain.schemas import Buyer
from storefront.services.auth_service import AuthService
from storefront.services.cart_store import CartStore
from storefront.services.identity_client import IdentityClient
from storefront.services.lock_service import LockService
from storefront.services.notification_service import NotificationService
from storefront.services.payment_client import PaymentClient


#one redis connection pool per process
@lru_cache
def get_cart_store() -> CartStore:
    return CartStore()


@lru_cache
def get_lock_service() -> LockService:
    return LockService()


def get_payment_client() -> PaymentClient:
    return PaymentClient()


def get_identity_client() -> IdentityClient:
    return IdentityClient()


def get_notification_service() -> NotificationService:
    return NotificationService()


def get_optional_buyer(
    authorization: str | None = Header(None),
    db: Session = Depends(get_db),
    identity_client: IdentityClient = Depends(get_identity_client),
) -> Buyer | None:
    if not authorization:
        return None
    try:
        return AuthService(db, identity_client).resolve_buyer(authorization)
    except StorefrontError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)


def get_current_buyer(buyer: Buyer | None = Depends(get_optional_buyer)) -> Buyer:
    if buyer is None:
        raise HTTPException(status_code=401, detail="Authentication required")
    return buyer
