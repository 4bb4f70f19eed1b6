from sqlalchemy import Column, Integer, ForeignKey, String, DateTime, Text
from datetime import datetime, timezone

from storefront.data.database import Base


class ProductRequestModel(Base):
    __tablename__ = "product_requests"

    id = Column(Integer, primary_key=True)
    supermarket_id = Column(String(36), ForeignKey("supermarkets.id"), nullable=False, index=True)
    user_id = Column(String(36), nullable=True)
    request = Column(Text, nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc))
