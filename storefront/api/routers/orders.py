# storefront/api/routers/orders.py
from typing import List

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from storefront.api.deps import get_current_buyer
from storefront.data.database import get_db
from storefront.domain.errors import StorefrontError
from storefront.domain.schemas import Buyer, ClearOrdersOut, OrderOut
from storefront.services.order_service import OrderService

router = APIRouter(tags=["orders"])


def get_service(db: Session):
    return OrderService(db)


@router.get("/supermarkets/{supermarket_id}/orders", response_model=List[OrderOut])
def list_orders(
    supermarket_id: str,
    buyer: Buyer = Depends(get_current_buyer),
    db: Session = Depends(get_db),
):
    """
    Newest first. Admins get every order of the supermarket.
    """
    return get_service(db).list_orders(supermarket_id, buyer)


@router.delete("/supermarkets/{supermarket_id}/orders", response_model=ClearOrdersOut)
def clear_orders(
    supermarket_id: str,
    buyer: Buyer = Depends(get_current_buyer),
    db: Session = Depends(get_db),
):
    return {"deleted": get_service(db).clear_orders(supermarket_id, buyer)}


@router.get("/orders/{order_id}", response_model=OrderOut)
def get_order(
    order_id: str,
    buyer: Buyer = Depends(get_current_buyer),
    db: Session = Depends(get_db),
):
    try:
        return get_service(db).get_order(order_id, buyer)
    except StorefrontError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)
