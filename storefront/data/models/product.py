# storefront/data/models/product.py
from sqlalchemy import Column, Integer, ForeignKey, String, Numeric, Text, CheckConstraint
from sqlalchemy.orm import relationship

from storefront.data.database import Base
from storefront.data.models._ids import new_id


class ProductModel(Base):
    __tablename__ = "products"

    id = Column(String(36), primary_key=True, default=new_id)
    supermarket_id = Column(String(36), ForeignKey("supermarkets.id"), nullable=False, index=True)

    name = Column(String, nullable=False)
    price = Column(Numeric(10, 2), nullable=False)
    stock = Column(Integer, nullable=False, default=0)
    image_url = Column(String, nullable=True)
    description = Column(Text, nullable=True)
    category = Column(String, nullable=True)

    supermarket = relationship("SupermarketModel", back_populates="products")

    __table_args__ = (CheckConstraint("stock >= 0", name="ck_products_stock_non_negative"),)
