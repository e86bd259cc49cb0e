from .crud import CrudService, FilterableCrudService, PageRequest, paginate
from .order_service import OrderService, order_service
from .pickup_location_service import PickupLocationService, pickup_location_service
from .product_service import ProductService, product_service
from .user_service import UserService, user_service

__all__ = [
    "CrudService",
    "FilterableCrudService",
    "PageRequest",
    "paginate",
    "OrderService",
    "order_service",
    "PickupLocationService",
    "pickup_location_service",
    "ProductService",
    "product_service",
    "UserService",
    "user_service",
]
