# storefront/repos/order_repo.py
from typing import Iterable, List

from sqlalchemy import delete, select, update
from sqlalchemy.orm import Session, selectinload

from storefront.data.models.order import OrderModel
from storefront.data.models.order_item import OrderItemModel


class OrderRepo:
    def __init__(self, db: Session):
        self.db = db

    def add_order(self, order: OrderModel) -> OrderModel:
        #flush only, the caller owns the transaction
        self.db.add(order)
        self.db.flush()
        return order

    def add_order_items(self, items: Iterable[OrderItemModel]) -> None:
        self.db.add_all(list(items))
        self.db.flush()

    def get_order(self, order_id: str) -> OrderModel | None:
        return self.db.execute(
            select(OrderModel)
            .options(selectinload(OrderModel.items))
            .where(OrderModel.id == order_id)
        ).scalar_one_or_none()

    def list_orders(self, supermarket_id: str, user_id: str | None = None) -> List[OrderModel]:
        stmt = (
            select(OrderModel)
            .options(selectinload(OrderModel.items))
            .where(OrderModel.supermarket_id == supermarket_id)
            .order_by(OrderModel.created_at.desc())
        )
        if user_id is not None:
            stmt = stmt.where(OrderModel.user_id == user_id)
        return list(self.db.execute(stmt).scalars())

    def delete_orders(self, supermarket_id: str, user_id: str | None = None) -> int:
        ids = select(OrderModel.id).where(OrderModel.supermarket_id == supermarket_id)
        if user_id is not None:
            ids = ids.where(OrderModel.user_id == user_id)
        order_ids = list(self.db.execute(ids).scalars())
        if not order_ids:
            return 0
        self.db.execute(delete(OrderItemModel).where(OrderItemModel.order_id.in_(order_ids)))
        result = self.db.execute(delete(OrderModel).where(OrderModel.id.in_(order_ids)))
        self.db.commit()
        return result.rowcount

    def update_order_status(self, order_id: str, status: str) -> int:
        """
        Single-statement targeted update, last write wins. Rows already in
        `status` are left alone, so a replay reports 0 rows affected.
        """
        result = self.db.execute(
            update(OrderModel)
            .where(OrderModel.id == order_id, OrderModel.status != status)
            .values(status=status)
            .execution_options(synchronize_session=False)
        )
        self.db.commit()
        return result.rowcount

    def commit(self):
        self.db.commit()

    def rollback(self):
        self.db.rollback()
