# studio_store/services/storefront.py
import threading

import redis

from studio_store.backend.base import Backend
from studio_store.domain.state import AppState
from studio_store.services.admin_service import AdminService
from studio_store.services.cart_service import CartService
from studio_store.services.catalog_service import CatalogService
from studio_store.services.checkout_service import CheckoutService
from studio_store.services.custom_request_service import CustomRequestService
from studio_store.services.device_storage import COOKIE_CONSENT_KEY, DeviceStorage
from studio_store.services.notification_service import NotificationService
from studio_store.services.order_service import OrderService
from studio_store.services.session_service import SessionService
from studio_store.utils.logging import get_logger

logger = get_logger(__name__)


class Storefront:
    """
    Estado de un dispositivo cliente mas las acciones que lo modifican.
    Todos los servicios comparten el mismo AppState.
    """

    def __init__(
        self,
        client_id: str,
        backend: Backend,
        redis_client: redis.Redis,
        notifier: NotificationService | None = None,
    ):
        self.state = AppState(client_id=client_id)
        self.storage = DeviceStorage(client_id, redis_client)
        self.backend = backend
        #una accion por dispositivo a la vez; lo toman las rutas
        self.lock = threading.Lock()
        notifier = notifier or NotificationService()

        self.catalog = CatalogService(self.state, self.storage)
        self.cart = CartService(self.state, self.storage)
        self.session = SessionService(self.state, self.storage, backend)
        self.orders = OrderService(self.state, backend, notifier)
        self.checkout = CheckoutService(self.state, backend, self.cart, self.orders)
        self.custom_request = CustomRequestService(self.state, self.orders)
        self.admin = AdminService(self.state, backend, notifier)

    @classmethod
    def open(cls, client_id: str, backend: Backend, redis_client: redis.Redis, **kwargs) -> "Storefront":
        """Crea el estado del dispositivo y lo rehidrata desde su almacenamiento."""
        storefront = cls(client_id, backend, redis_client, **kwargs)
        storefront.catalog.load()
        storefront.cart.load()
        storefront.session.restore()
        logger.info(f"Opened storefront for device {client_id}")
        return storefront

    #cookies
    def cookie_consent(self) -> bool:
        return bool(self.storage.get_json(COOKIE_CONSENT_KEY, default=False))

    def accept_cookies(self, accepted: bool = True) -> bool:
        self.storage.set_json(COOKIE_CONSENT_KEY, accepted)
        return accepted
