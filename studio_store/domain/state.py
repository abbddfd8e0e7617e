# studio_store/domain/state.py
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional

from studio_store.domain.schemas import AuthSession, CartItem, Order, Service, User


class View(str, Enum):
    HOME = "HOME"
    SERVICES = "SERVICES"
    PORTFOLIO = "PORTFOLIO"
    CART = "CART"
    PROFILE = "PROFILE"
    ADMIN = "ADMIN"
    CHECKOUT = "CHECKOUT"


class NotificationType(str, Enum):
    SUCCESS = "success"
    ERROR = "error"
    INFO = "info"


@dataclass
class Notification:
    message: str
    type: NotificationType = NotificationType.INFO


@dataclass
class CustomRequestWizard:
    """Estado del asistente de solicitud personalizada (pasos 1 a 3)."""

    step: int = 1
    style: str = ""
    description: str = ""
    order_id: Optional[str] = None


@dataclass
class AppState:
    """
    Estado de la aplicacion para un dispositivo cliente.
    Solo se modifica a traves de las acciones de los servicios.
    """

    client_id: str
    view: View = View.HOME
    user: Optional[User] = None
    session: Optional[AuthSession] = None
    services: List[Service] = field(default_factory=list)
    cart: List[CartItem] = field(default_factory=list)
    orders: List[Order] = field(default_factory=list)
    notifications: List[Notification] = field(default_factory=list)
    custom_request: CustomRequestWizard = field(default_factory=CustomRequestWizard)
    login_requested: bool = False

    def notify(self, message: str, type: NotificationType = NotificationType.INFO) -> None:
        self.notifications.append(Notification(message=message, type=type))

    def drain_notifications(self) -> List[Notification]:
        drained, self.notifications = self.notifications, []
        return drained

    def navigate(self, view: View) -> None:
        self.view = view
