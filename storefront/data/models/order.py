from sqlalchemy import Column, ForeignKey, String, DateTime, Numeric
from sqlalchemy.orm import relationship
from datetime import datetime, timezone

from storefront.data.database import Base
from storefront.data.models._ids import new_id

ORDER_PENDING = "pending"
ORDER_PAID = "paid"
ORDER_FAILED = "failed"


class OrderModel(Base):
    __tablename__ = "orders"

    # id doubles as the payment reference
    id = Column(String(36), primary_key=True, default=new_id)
    supermarket_id = Column(String(36), ForeignKey("supermarkets.id"), nullable=False, index=True)
    user_id = Column(String(36), nullable=True, index=True)

    status = Column(String(20), nullable=False, default=ORDER_PENDING)  # pending, paid, failed
    total_amount = Column(Numeric(10, 2), nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc))

    items = relationship(
        "OrderItemModel",
        back_populates="order",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )
