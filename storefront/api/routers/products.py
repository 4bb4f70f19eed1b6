# storefront/api/routers/products.py
from typing import List

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from storefront.api.deps import get_current_buyer
from storefront.data.database import get_db
from storefront.domain.errors import StorefrontError
from storefront.domain.schemas import (
    Buyer,
    ProductOut,
    ProductRequestIn,
    ProductRequestOut,
    SortOption,
)
from storefront.services.catalog_service import CatalogService

router = APIRouter(prefix="/supermarkets/{supermarket_id}", tags=["products"])


@router.get("/products", response_model=List[ProductOut])
def list_products(
    supermarket_id: str,
    search: str | None = Query(None, max_length=100),
    category: str | None = Query(None),
    sort: SortOption = Query("priceAsc"),
    db: Session = Depends(get_db),
):
    try:
        return CatalogService(db).list_products(supermarket_id, search=search, category=category, sort=sort)
    except StorefrontError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)


@router.post("/product-requests", response_model=ProductRequestOut, status_code=201)
def request_product(
    supermarket_id: str,
    payload: ProductRequestIn,
    buyer: Buyer = Depends(get_current_buyer),
    db: Session = Depends(get_db),
):
    """
    Ask the supermarket to stock something it does not carry.
    """
    try:
        return CatalogService(db).request_product(supermarket_id, buyer, payload.request)
    except StorefrontError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)
