# storefront/services/checkout_service.py
from decimal import Decimal
from typing import Dict, Any, List, Sequence

from redis.exceptions import RedisError
from requests import RequestException
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from storefront.data.models.order import OrderModel, ORDER_PENDING
from storefront.data.models.order_item import OrderItemModel
from storefront.data.models.product import ProductModel
from storefront.domain.errors import (
    AuthenticationRequired,
    CartStoreUnavailable,
    CheckoutInProgress,
    GatewayUnavailable,
    InsufficientStock,
    NotFound,
    OrderPersistenceFailed,
    ProductNotFound,
    ValidationError,
)
from storefront.domain.schemas import Buyer, CartLine
from storefront.repos.order_repo import OrderRepo
from storefront.repos.product_repo import ProductRepo
from storefront.services.cart_store import CartStore
from storefront.services.lock_service import LockService
from storefront.services.payment_client import PaymentClient, PaymentGatewayError, authorization_url
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


def merge_lines(lines: Sequence[CartLine]) -> List[CartLine]:
    """Collapse repeated products into one line, keeping first-seen order."""
    merged: Dict[str, int] = {}
    for line in lines:
        merged[line.product_id] = merged.get(line.product_id, 0) + line.quantity
    return [CartLine(product_id=pid, quantity=qty) for pid, qty in merged.items()]


class CheckoutService:
    """
    Turns a buyer's cart into a pending order and hands off to the payment gateway.

    1. batched re-read of every product in the cart
    2. all-or-nothing stock check (first failing line wins)
    3. total from live prices, never from the cart
    4-6. order + items + conditional stock decrements in one transaction
    7. clear the stored cart
    8. initialize payment, return the redirect url

    Anything after the commit in step 6 leaves the order pending; the
    webhook (or a retry by the buyer) settles it later.
    """

    def __init__(
        self,
        db: Session,
        payment_client: PaymentClient,
        cart_store: CartStore,
        lock_service: LockService,
    ):
        self.db = db
        self.products = ProductRepo(db)
        self.orders = OrderRepo(db)
        self.payment_client = payment_client
        self.cart_store = cart_store
        self.lock_service = lock_service

    def checkout(
        self,
        supermarket_id: str,
        buyer: Buyer | None,
        cart: Sequence[CartLine] | None = None,
    ) -> Dict[str, Any]:
        if buyer is None:
            raise AuthenticationRequired()
        if not buyer.email:
            raise ValidationError("An email address is required to pay")
        if self.products.get_supermarket(supermarket_id) is None:
            raise NotFound(f"Supermarket {supermarket_id} not found")

        #one checkout per buyer and supermarket at a time (double submit)
        key = LockService.checkout_key(supermarket_id, buyer.id)
        try:
            token = self.lock_service.acquire(key)
        except RedisError as e:
            logger.error(f"Checkout lock {key} unavailable: {e}")
            raise CartStoreUnavailable() from e
        if not token:
            raise CheckoutInProgress()

        try:
            return self._checkout(supermarket_id, buyer, cart)
        finally:
            try:
                self.lock_service.release(key, token)
            except RedisError as e:
                logger.warning(f"Failed to release checkout lock {key}: {e}")

    def _checkout(self, supermarket_id: str, buyer: Buyer, cart: Sequence[CartLine] | None) -> Dict[str, Any]:
        if cart is None:
            try:
                stored = self.cart_store.get_items(supermarket_id, buyer.id)
            except RedisError as e:
                logger.error(f"Cart for user {buyer.id} could not be read: {e}")
                raise CartStoreUnavailable() from e
            cart = [CartLine(product_id=i.product.id, quantity=i.quantity) for i in stored]

        lines = merge_lines(cart)
        if not lines:
            raise ValidationError("Cart is empty")

        products = self._validate(supermarket_id, lines)

        total = sum(
            (products[l.product_id].price * l.quantity for l in lines),
            Decimal("0.00"),
        ).quantize(Decimal("0.01"))

        order_id = self._place_order(supermarket_id, buyer, lines, products, total)

        try:
            self.cart_store.clear(supermarket_id, buyer.id)
        except RedisError as e:
            #order is already committed, a stale cart must not fail the checkout
            logger.error(f"Order {order_id} placed but cart was not cleared: {e}")

        redirect_url = self._start_payment(order_id, buyer.email, total)

        return {
            "order_id": order_id,
            "total_amount": total,
            "status": ORDER_PENDING,
            "redirect_url": redirect_url,
        }

    def _validate(self, supermarket_id: str, lines: List[CartLine]) -> Dict[str, ProductModel]:
        found = self.products.get_products_by_ids(supermarket_id, [l.product_id for l in lines])
        products = {p.id: p for p in found}

        for line in lines:
            product = products.get(line.product_id)
            if product is None:
                raise ProductNotFound(line.product_id)
            if product.stock < line.quantity:
                logger.info(
                    f"Checkout rejected: {product.name} has {product.stock}, "
                    f"requested {line.quantity}"
                )
                raise InsufficientStock(product.name)

        return products

    def _place_order(
        self,
        supermarket_id: str,
        buyer: Buyer,
        lines: List[CartLine],
        products: Dict[str, ProductModel],
        total: Decimal,
    ) -> str:
        try:
            order = self.orders.add_order(
                OrderModel(
                    supermarket_id=supermarket_id,
                    user_id=buyer.id,
                    total_amount=total,
                    status=ORDER_PENDING,
                )
            )
            order_id = order.id

            self.orders.add_order_items(
                OrderItemModel(
                    order_id=order_id,
                    product_id=l.product_id,
                    quantity=l.quantity,
                    price=products[l.product_id].price,
                )
                for l in lines
            )

            # conditional decrement; 0 rows means another checkout took the stock
            for line in lines:
                if self.products.decrement_stock(line.product_id, line.quantity) == 0:
                    raise InsufficientStock(products[line.product_id].name)

            self.db.commit()

        except InsufficientStock:
            self.db.rollback()
            logger.warning("Stock changed during checkout, order rolled back")
            raise
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.exception(f"Order persistence failed for supermarket {supermarket_id}: {e}")
            raise OrderPersistenceFailed() from e

        logger.info(f"Order {order_id} created for user {buyer.id}, total {total}")
        return order_id

    def _start_payment(self, order_id: str, email: str, total: Decimal) -> str:
        try:
            body = self.payment_client.initialize_transaction(email=email, amount=total, reference=order_id)
        except PaymentGatewayError as e:
            logger.error(f"Gateway rejected payment for order {order_id}: {e.body}")
            raise GatewayUnavailable(order_id) from e
        except RequestException as e:
            logger.error(f"Gateway unreachable for order {order_id}: {e}")
            raise GatewayUnavailable(order_id) from e

        url = authorization_url(body)
        if not url:
            logger.error(f"Gateway response for order {order_id} has no authorization url: {body}")
            raise GatewayUnavailable(order_id)

        logger.info(f"Payment started for order {order_id}")
        return url
