from sqlalchemy.orm import Session
from storefront.data.models.product_request import ProductRequestModel


class ProductRequestRepo:
    def __init__(self, db: Session):
        self.db = db

    def create_request(self, request: ProductRequestModel) -> ProductRequestModel:
        self.db.add(request)
        self.db.commit()
        self.db.refresh(request)
        return request
