"""SQLAlchemy models."""

from storefront.models.base import Base
from storefront.models.notification import Notification, NotificationType
from storefront.models.order import ACTIVE_STATUSES, Order
from storefront.models.product import Product
from storefront.models.promo import EARLY_ACCESS_PROMO_ID, PromoConfig
from storefront.models.store import Store, StoreName
from storefront.models.user import UserProfile

__all__ = [
    # Base
    "Base",
    # Stores & slug registry
    "Store",
    "StoreName",
    "UserProfile",
    # Catalogue
    "Product",
    # Orders
    "Order",
    "ACTIVE_STATUSES",
    # Notifications
    "Notification",
    "NotificationType",
    # Promotions
    "PromoConfig",
    "EARLY_ACCESS_PROMO_ID",
]
