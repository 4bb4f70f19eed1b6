from sqlalchemy import Column, String
from sqlalchemy.orm import relationship

from storefront.data.database import Base
from storefront.data.models._ids import new_id


class SupermarketModel(Base):
    __tablename__ = "supermarkets"

    id = Column(String(36), primary_key=True, default=new_id)
    name = Column(String, nullable=False)
    # external product feed pulled by the catalog sync job
    api_url = Column(String, nullable=True)

    products = relationship("ProductModel", back_populates="supermarket")
