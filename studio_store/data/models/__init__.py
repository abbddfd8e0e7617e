#import de todos los modelos para registrarlos en Base.metadata

from studio_store.data.models.profile import ProfileModel
from studio_store.data.models.auth_session import AuthSessionModel
from studio_store.data.models.order import OrderModel
from studio_store.data.models.order_item import OrderItemModel

__all__ = ["ProfileModel", "AuthSessionModel", "OrderModel", "OrderItemModel"]
