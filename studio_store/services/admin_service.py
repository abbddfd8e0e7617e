# studio_store/services/admin_service.py
from decimal import Decimal
from typing import List

from studio_store.backend.base import Backend
from studio_store.domain.errors import AuthRequiredError, BackendError, NotFoundError
from studio_store.domain.schemas import DashboardStats, Order, OrderStatus, User
from studio_store.domain.state import AppState, NotificationType, View
from studio_store.services.notification_service import NotificationService
from studio_store.utils.logging import get_logger

logger = get_logger(__name__)

#solo hacia adelante; completed y cancelled son finales
ALLOWED_TRANSITIONS = {
    OrderStatus.PENDING: {OrderStatus.IN_PROGRESS, OrderStatus.COMPLETED, OrderStatus.CANCELLED},
    OrderStatus.IN_PROGRESS: {OrderStatus.COMPLETED, OrderStatus.CANCELLED},
    OrderStatus.COMPLETED: set(),
    OrderStatus.CANCELLED: set(),
}


def validate_transition(current: OrderStatus, new: OrderStatus) -> None:
    if current != new and new not in ALLOWED_TRANSITIONS[current]:
        raise ValueError(f"Transición no permitida: {current.value} -> {new.value}")


class AdminService:
    """
    Panel de administracion: lectura de todos los pedidos y cambio de estado.
    Sin rol admin no se hace ninguna llamada al backend.
    """

    def __init__(self, state: AppState, backend: Backend, notifier: NotificationService | None = None):
        self.state = state
        self.backend = backend
        self.notifier = notifier or NotificationService()

    def _require_admin(self) -> User:
        user = self.state.user
        if user is None:
            raise AuthRequiredError("Acceso denegado")
        if not user.is_admin:
            raise PermissionError("Acceso denegado")
        return user

    def _token(self) -> str | None:
        return self.state.session.access_token if self.state.session else None

    def open_dashboard(self) -> List[Order]:
        """Navega a la vista ADMIN y carga los pedidos."""
        self.state.navigate(View.ADMIN)
        self._require_admin()
        return self.load_orders()

    def load_orders(self) -> List[Order]:
        self._require_admin()

        try:
            rows = self.backend.select_orders(access_token=self._token())
        except BackendError as e:
            logger.error(f"Error fetching orders: {e.message}")
            self.state.notify(f"Error al cargar los pedidos: {e.message}", NotificationType.ERROR)
            raise

        self.state.orders = [Order.from_row(r) for r in rows]
        logger.info(f"Admin loaded {len(self.state.orders)} orders")
        return self.state.orders

    def _find(self, order_id: str) -> Order | None:
        return next((o for o in self.state.orders if o.id == order_id), None)

    def _update_if_unchanged(self, order: Order, status: OrderStatus) -> bool:
        try:
            row = self.backend.update_order_status(
                order.id,
                status.value,
                access_token=self._token(),
                expected_status=order.status.value,
            )
        except BackendError as e:
            logger.error(f"Error updating order {order.id} status: {e.message}")
            self.state.notify(f"Error al actualizar el pedido: {e.message}", NotificationType.ERROR)
            raise
        return row is not None

    def set_status(self, order_id: str, status: OrderStatus) -> Order:
        """
        Use Case: cambio de estado desde el panel.

        La actualizacion solo se aplica si el estado guardado sigue siendo el
        que muestra el panel. Si otro dispositivo lo cambio, se recargan los
        pedidos y la transicion se valida contra el estado real.
        """
        self._require_admin()

        order = self._find(order_id)
        if order is None:
            #panel aun sin cargar
            self.load_orders()
            order = self._find(order_id)

        for _ in range(2):
            if order is None:
                raise NotFoundError(f"Pedido {order_id} no encontrado")

            validate_transition(order.status, status)
            if order.status == status:
                return order

            if self._update_if_unchanged(order, status):
                break

            logger.warning(f"Order {order_id} changed since it was loaded, reloading")
            self.load_orders()
            order = self._find(order_id)
        else:
            self.state.notify("El pedido cambió mientras se actualizaba", NotificationType.ERROR)
            raise BackendError(f"El pedido {order_id} cambió mientras se actualizaba", code="conflict")

        order.status = status
        logger.info(f"Order {order_id} status -> {status.value}")
        self.notifier.send_status_notification(order_id, status.value)
        return order

    def stats(self) -> DashboardStats:
        self._require_admin()
        orders = self.state.orders

        return DashboardStats(
            total_orders=len(orders),
            pending_orders=sum(1 for o in orders if o.status == OrderStatus.PENDING),
            revenue=sum(
                (o.total for o in orders if o.status == OrderStatus.COMPLETED),
                Decimal("0.00"),
            ),
            clients=len({o.user_id for o in orders}),
        )
