#import every model so SQLAlchemy registers it in Base.metadata

from storefront.data.models.supermarket import SupermarketModel
from storefront.data.models.product import ProductModel
from storefront.data.models.order import OrderModel
from storefront.data.models.order_item import OrderItemModel
from storefront.data.models.profile import ProfileModel
from storefront.data.models.product_request import ProductRequestModel

__all__ = [
    "SupermarketModel",
    "ProductModel",
    "OrderModel",
    "OrderItemModel",
    "ProfileModel",
    "ProductRequestModel",
]
