# studio_store/services/checkout_service.py
import time
import uuid
from typing import List, Sequence

from studio_store.backend.base import Backend
from studio_store.domain.errors import AuthRequiredError, BackendError
from studio_store.domain.schemas import Attachment, CheckoutForm, Order, OrderPriority, OrderStatus, Specifications, User
from studio_store.domain.state import AppState, NotificationType, View
from studio_store.services.cart_service import CartService
from studio_store.services.order_service import OrderService, order_total
from studio_store.utils.logging import get_logger
from studio_store.utils.settings import MAX_ATTACHMENTS

logger = get_logger(__name__)


class CheckoutService:
    """
    Flujo de envio de pedido desde el carrito.
    Si algo falla contra el backend, el carrito y la lista local de pedidos
    quedan intactos.
    """

    def __init__(
        self,
        state: AppState,
        backend: Backend,
        cart: CartService,
        orders: OrderService,
        max_attachments: int = MAX_ATTACHMENTS,
    ):
        self.state = state
        self.backend = backend
        self.cart = cart
        self.orders = orders
        self.max_attachments = max_attachments

    def _validate(self) -> User:
        user = self.state.user

        if user is None:
            self.state.login_requested = True
            self.state.notify("Debes iniciar sesión para completar el pedido", NotificationType.ERROR)
            raise AuthRequiredError("Debes iniciar sesión para completar el pedido")

        if not self.state.cart:
            self.state.notify(
                "Tu carrito está vacío. Añade servicios antes de procesar el pago.",
                NotificationType.ERROR,
            )
            self.state.navigate(View.SERVICES)
            raise ValueError("El carrito está vacío")

        return user

    def _upload_attachments(self, user: User, order_token: str, attachments: Sequence[Attachment]) -> List[str]:
        urls = []
        token = self.state.session.access_token if self.state.session else None

        for n, attachment in enumerate(attachments, start=1):
            ext = attachment.filename.rsplit(".", 1)[-1] if "." in attachment.filename else "bin"
            path = f"{user.id}/{order_token}/{int(time.time() * 1000)}-{n}.{ext}"

            try:
                self.backend.upload(path, attachment.content, attachment.content_type, access_token=token)
            except BackendError as e:
                raise BackendError(
                    f"no se pudo subir {attachment.filename}: {e.message}", code=e.code
                ) from e

            urls.append(self.backend.public_url(path))
            logger.info(f"Uploaded attachment {path}")

        return urls

    def submit_order(self, form: CheckoutForm, attachments: Sequence[Attachment] = ()) -> Order:
        """
        Use Case: checkout.

        0. validacion local (sesion, carrito no vacio) antes de tocar el backend
        1. sube hasta MAX_ATTACHMENTS adjuntos bajo <user_id>/<token de pedido>/
        2-3. crea el pedido y sus lineas (OrderService)
        4. vacia el carrito y registra el pedido en el estado local
        """
        user = self._validate()

        if len(attachments) > self.max_attachments:
            logger.info(f"Ignoring {len(attachments) - self.max_attachments} extra attachments")
            attachments = list(attachments)[: self.max_attachments]

        lines = list(self.state.cart)
        item_rows = [
            {
                "service_id": i.service_id,
                "service_name": i.service_name,
                "price": str(i.price),
                "quantity": i.quantity,
                "variations": i.variations,
            }
            for i in lines
        ]
        order_token = f"ORD-{uuid.uuid4().hex[:12]}"

        try:
            files = self._upload_attachments(user, order_token, attachments)

            specifications = Specifications(
                style=form.style,
                software=form.software,
                description=form.specs,
                budget_range=form.budget,
                files=files,
            )
            order = self.orders.create_order(
                {
                    "user_id": user.id,
                    "user_email": form.email or user.email,
                    "user_name": form.name or user.display_name,
                    "total": str(order_total(item_rows)),
                    "status": OrderStatus.PENDING.value,
                    "priority": OrderPriority.NORMAL.value,
                    "payment_method": form.payment_method.value,
                    "specifications": specifications.model_dump(by_alias=True),
                    "notes": form.notes,
                },
                item_rows,
            )
        except BackendError as e:
            logger.error(f"Checkout failed for user {user.id}: {e.message}")
            self.state.notify(f"Error al crear el pedido: {e.message}", NotificationType.ERROR)
            raise
        except Exception as e:
            logger.exception(f"Unexpected error during checkout for user {user.id}")
            self.state.notify(f"Ocurrió un error inesperado: {e}", NotificationType.ERROR)
            raise BackendError(str(e)) from e

        self.orders.record(order)
        self.cart.clear()
        self.state.notify("¡Pedido enviado con éxito!", NotificationType.SUCCESS)
        self.state.navigate(View.PROFILE)

        logger.info(f"Order {order.id} submitted, total {order.total}")
        return order
