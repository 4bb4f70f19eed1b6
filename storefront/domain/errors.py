# storefront/domain/errors.py
"""
Domain exceptions. Each one carries the HTTP status the API answers with,
so routers only have to translate, never decide.
"""


class StorefrontError(Exception):
    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(StorefrontError):
    status_code = 400


class AuthenticationRequired(StorefrontError):
    status_code = 401

    def __init__(self, message: str = "Authentication required"):
        super().__init__(message)


class PermissionDenied(StorefrontError):
    status_code = 403


class NotFound(StorefrontError):
    status_code = 404


class ProductNotFound(NotFound):
    def __init__(self, product_id: str):
        super().__init__(f"Product {product_id} not found")
        self.product_id = product_id


class OrderNotFound(NotFound):
    def __init__(self, order_id: str):
        super().__init__(f"Order {order_id} not found")
        self.order_id = order_id


class InsufficientStock(StorefrontError):
    status_code = 409

    def __init__(self, product_name: str):
        super().__init__(f"Not enough stock for {product_name}")
        self.product_name = product_name


class CheckoutInProgress(StorefrontError):
    status_code = 409

    def __init__(self):
        super().__init__("A checkout for this cart is already in progress")


class InvalidSignature(StorefrontError):
    status_code = 401

    def __init__(self):
        super().__init__("Invalid signature")


class MalformedPayload(StorefrontError):
    status_code = 500


class OrderPersistenceFailed(StorefrontError):
    status_code = 500

    def __init__(self):
        super().__init__("Could not create the order, nothing was charged")


class UpstreamFailure(StorefrontError):
    status_code = 502


class GatewayUnavailable(UpstreamFailure):
    def __init__(self, order_id: str):
        super().__init__("Payment could not be started, your order is saved as pending")
        self.order_id = order_id


class IdentityUnavailable(UpstreamFailure):
    def __init__(self):
        super().__init__("Identity provider unavailable")


class CartStoreUnavailable(UpstreamFailure):
    def __init__(self):
        super().__init__("Cart service unavailable, please retry")
