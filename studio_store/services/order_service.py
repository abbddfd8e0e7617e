# studio_store/services/order_service.py
from decimal import Decimal
from typing import List

from studio_store.backend.base import Backend, Row
from studio_store.domain.errors import AuthRequiredError, BackendError
from studio_store.domain.schemas import Order
from studio_store.domain.state import AppState, NotificationType
from studio_store.services.notification_service import NotificationService
from studio_store.utils.logging import get_logger

logger = get_logger(__name__)


def order_total(item_rows: List[Row]) -> Decimal:
    return sum(
        (Decimal(str(r["price"])) * r["quantity"] for r in item_rows),
        Decimal("0.00"),
    )


class OrderService:
    """
    Escritura de pedidos (orders + order_items) e historial del cliente.
    Compartido por el checkout y la solicitud personalizada.
    """

    def __init__(self, state: AppState, backend: Backend, notifier: NotificationService | None = None):
        self.state = state
        self.backend = backend
        self.notifier = notifier or NotificationService()

    def _token(self) -> str | None:
        return self.state.session.access_token if self.state.session else None

    def create_order(self, row: Row, item_rows: List[Row]) -> Order:
        """
        Use Case: crear pedido con sus lineas.

        1. inserta la fila en `orders`
        2. inserta una fila en `order_items` por linea
        3. si falla el paso 2 borra el pedido huerfano (compensacion)

        No toca el estado local; eso lo decide quien llama.
        """
        if Decimal(str(row["total"])) != order_total(item_rows):
            raise ValueError("El total del pedido no coincide con sus líneas")

        token = self._token()
        order_row = self.backend.insert_order(row, access_token=token)
        order_id = order_row["id"]
        logger.info(f"Order {order_id} inserted for user {row['user_id']}")

        try:
            created_items = self.backend.insert_order_items(
                [dict(r, order_id=order_id) for r in item_rows],
                access_token=token,
            )
        except BackendError:
            self._discard_orphan(order_id)
            raise

        logger.info(f"Order {order_id}: {len(created_items)} items inserted")
        return Order.from_row(dict(order_row, order_items=created_items))

    def _discard_orphan(self, order_id: str) -> None:
        logger.warning(f"Order items insert failed, deleting orphan order {order_id}")
        try:
            self.backend.delete_order(order_id, access_token=self._token())
        except BackendError as e:
            logger.error(f"Orphan order {order_id} could not be deleted: {e.message}")

    def record(self, order: Order) -> None:
        """Refleja un pedido recien creado en el estado local y avisa al staff."""
        self.state.orders.append(order)
        self.notifier.send_order_notification(order.user_id, order.id)

    #query
    def load_my_orders(self) -> List[Order]:
        user = self.state.user
        if user is None:
            raise AuthRequiredError("Debes iniciar sesión para ver tus pedidos")

        try:
            rows = self.backend.select_orders(user_id=user.id, access_token=self._token())
        except BackendError as e:
            logger.error(f"Error fetching orders for {user.id}: {e.message}")
            self.state.notify(f"Error al cargar tus pedidos: {e.message}", NotificationType.ERROR)
            raise

        self.state.orders = [Order.from_row(r) for r in rows]
        return self.state.orders
