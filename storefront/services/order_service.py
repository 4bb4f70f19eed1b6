# storefront/services/order_service.py
from typing import List

from sqlalchemy.orm import Session

from storefront.data.models.order import OrderModel
from storefront.domain.errors import OrderNotFound, PermissionDenied
from storefront.domain.schemas import Buyer
from storefront.repos.order_repo import OrderRepo
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


class OrderService:
    """
    Order history. Admins see every order of a supermarket,
    everybody else only their own.
    """

    def __init__(self, db: Session):
        self.repo = OrderRepo(db)

    def list_orders(self, supermarket_id: str, buyer: Buyer) -> List[OrderModel]:
        return self.repo.list_orders(
            supermarket_id,
            user_id=None if buyer.is_admin else buyer.id,
        )

    def get_order(self, order_id: str, buyer: Buyer) -> OrderModel:
        order = self.repo.get_order(order_id)

        if not order:
            raise OrderNotFound(order_id)

        if not buyer.is_admin and order.user_id != buyer.id:
            raise PermissionDenied("No access to this order")

        return order

    def clear_orders(self, supermarket_id: str, buyer: Buyer) -> int:
        deleted = self.repo.delete_orders(
            supermarket_id,
            user_id=None if buyer.is_admin else buyer.id,
        )
        logger.info(f"User {buyer.id} cleared {deleted} orders in {supermarket_id}")
        return deleted
