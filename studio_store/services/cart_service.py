# studio_store/services/cart_service.py
from decimal import Decimal
from typing import List

from pydantic import ValidationError

from studio_store.domain.schemas import CartItem, CartOut, Service
from studio_store.domain.state import AppState, NotificationType
from studio_store.services.device_storage import CART_KEY, DeviceStorage
from studio_store.utils.logging import get_logger

logger = get_logger(__name__)


class CartService:
    """
    Carrito local del cliente.
    Cada comando (add, remove, set_quantity, clear) vuelve a persistir
    la lista completa en el almacenamiento del dispositivo.
    """

    def __init__(self, state: AppState, storage: DeviceStorage):
        self.state = state
        self.storage = storage

    #query
    def get_cart(self) -> CartOut:
        return CartOut(items=list(self.state.cart), count=self.count(), total=self.total())

    def total(self) -> Decimal:
        return sum((i.price * i.quantity for i in self.state.cart), Decimal("0.00"))

    def count(self) -> int:
        return len(self.state.cart)

    def load(self) -> List[CartItem]:
        stored = self.storage.get_json(CART_KEY, default=[])
        try:
            self.state.cart = [CartItem.model_validate(i) for i in stored]
        except (TypeError, ValidationError) as e:
            #dato corrupto -> carrito vacio
            logger.warning(f"Stored cart for {self.state.client_id} is malformed: {e}")
            self.state.cart = []
        return self.state.cart

    def _persist(self) -> None:
        self.storage.set_json(CART_KEY, [i.model_dump(mode="json") for i in self.state.cart])

    #commands
    def add(self, service: Service, variations: str | None = None) -> CartOut:
        if not service.active:
            raise ValueError(f"El servicio {service.name} no está disponible")

        existing = next((i for i in self.state.cart if i.service_id == service.id), None)

        if existing:
            logger.info(
                f"Servicio {service.id} ya en el carrito, cantidad "
                f"{existing.quantity} -> {existing.quantity + 1}"
            )
            existing.quantity += 1
            if variations:
                existing.variations = variations
        else:
            self.state.cart.append(
                CartItem(
                    service_id=service.id,
                    service_name=service.name,
                    price=service.price,
                    quantity=1,
                    variations=variations,
                )
            )

        self._persist()
        self.state.notify(f"{service.name} agregado al carrito", NotificationType.SUCCESS)
        return self.get_cart()

    def remove(self, service_id: str) -> CartOut:
        self.state.cart = [i for i in self.state.cart if i.service_id != service_id]
        self._persist()
        return self.get_cart()

    def set_quantity(self, service_id: str, quantity: int) -> CartOut:
        if quantity <= 0:
            return self.remove(service_id)

        for item in self.state.cart:
            if item.service_id == service_id:
                item.quantity = quantity
                break

        self._persist()
        return self.get_cart()

    def clear(self) -> None:
        self.state.cart = []
        self._persist()
