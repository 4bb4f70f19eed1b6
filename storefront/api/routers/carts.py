# storefront/api/routers/carts.py
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from storefront.api.deps import get_cart_store, get_current_buyer
from storefront.data.database import get_db
from storefront.domain.errors import StorefrontError
from storefront.domain.schemas import Buyer, CartItemIn, CartOut, CartQuantityIn
from storefront.services.cart_service import CartService
from storefront.services.cart_store import CartStore

router = APIRouter(prefix="/supermarkets/{supermarket_id}/cart", tags=["cart"])


def get_service(db: Session, cart_store: CartStore):
    return CartService(db=db, cart_store=cart_store)


@router.get("", response_model=CartOut)
def get_cart(
    supermarket_id: str,
    buyer: Buyer = Depends(get_current_buyer),
    db: Session = Depends(get_db),
    cart_store: CartStore = Depends(get_cart_store),
):
    svc = get_service(db, cart_store)
    return svc.get_cart(supermarket_id, buyer.id)


@router.post("/items", response_model=CartOut)
def add_item(
    supermarket_id: str,
    payload: CartItemIn,
    buyer: Buyer = Depends(get_current_buyer),
    db: Session = Depends(get_db),
    cart_store: CartStore = Depends(get_cart_store),
):
    svc = get_service(db, cart_store)
    try:
        return svc.add_product(supermarket_id, buyer.id, payload.product_id, payload.quantity)
    except StorefrontError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)


@router.patch("/items/{product_id}", response_model=CartOut)
def update_item(
    supermarket_id: str,
    product_id: str,
    payload: CartQuantityIn,
    buyer: Buyer = Depends(get_current_buyer),
    db: Session = Depends(get_db),
    cart_store: CartStore = Depends(get_cart_store),
):
    svc = get_service(db, cart_store)
    try:
        return svc.update_quantity(supermarket_id, buyer.id, product_id, payload.quantity)
    except StorefrontError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)


@router.delete("/items/{product_id}", response_model=CartOut)
def remove_item(
    supermarket_id: str,
    product_id: str,
    buyer: Buyer = Depends(get_current_buyer),
    db: Session = Depends(get_db),
    cart_store: CartStore = Depends(get_cart_store),
):
    svc = get_service(db, cart_store)
    return svc.remove_product(supermarket_id, buyer.id, product_id)


@router.delete("", response_model=CartOut)
def clear_cart(
    supermarket_id: str,
    buyer: Buyer = Depends(get_current_buyer),
    db: Session = Depends(get_db),
    cart_store: CartStore = Depends(get_cart_store),
):
    svc = get_service(db, cart_store)
    return svc.clear(supermarket_id, buyer.id)
