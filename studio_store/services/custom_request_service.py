# studio_store/services/custom_request_service.py
from decimal import Decimal

from studio_store.data.catalog import CUSTOM_STYLES
from studio_store.domain.errors import AuthRequiredError, BackendError
from studio_store.domain.schemas import CardDetails, Order, OrderPriority, OrderStatus, PaymentMethod, Specifications
from studio_store.domain.state import AppState, CustomRequestWizard, NotificationType
from studio_store.services.order_service import OrderService
from studio_store.utils.logging import get_logger
from studio_store.utils.settings import DEPOSIT_AMOUNT

logger = get_logger(__name__)

DEPOSIT_SERVICE_ID = "custom-deposit"
CUSTOM_BUDGET_RANGE = "Custom Quote"
CUSTOM_NOTES = "Solicitud de servicio personalizado - Depósito inicial"


class CustomRequestService:
    """
    Asistente de solicitud personalizada:
    1 detalles del proyecto -> 2 pago -> 3 confirmacion.

    Al confirmar el pago se crea un pedido con una unica linea de deposito.
    Los datos de tarjeta solo se validan por presencia, nunca se envian.
    """

    def __init__(self, state: AppState, orders: OrderService, deposit: Decimal = DEPOSIT_AMOUNT):
        self.state = state
        self.orders = orders
        self.deposit = deposit

    @property
    def wizard(self) -> CustomRequestWizard:
        return self.state.custom_request

    def submit_details(self, style: str, description: str) -> CustomRequestWizard:
        if not style or not description.strip():
            self.state.notify("Por favor completa todos los campos del proyecto", NotificationType.ERROR)
            raise ValueError("Estilo y descripción son obligatorios")

        if style not in CUSTOM_STYLES:
            self.state.notify(f"Estilo no disponible: {style}", NotificationType.ERROR)
            raise ValueError(f"Estilo no disponible: {style}")

        self.wizard.style = style
        self.wizard.description = description.strip()
        self.wizard.step = 2
        return self.wizard

    def submit_payment(self, payment_method: str = "card", card: CardDetails | None = None) -> Order:
        """
        Use Case: confirmar pago del deposito (paso 2 -> 3).
        """
        if self.wizard.step != 2:
            raise ValueError("Completa primero los detalles del proyecto")

        user = self.state.user
        if user is None:
            self.state.login_requested = True
            self.state.notify(
                "Debes iniciar sesión para enviar una solicitud personalizada",
                NotificationType.ERROR,
            )
            raise AuthRequiredError("Debes iniciar sesión para enviar una solicitud personalizada")

        if payment_method == "card" and (card is None or not card.number or not card.cvc):
            self.state.notify("Por favor completa los datos de la tarjeta", NotificationType.ERROR)
            raise ValueError("Datos de tarjeta incompletos")

        method = PaymentMethod.CREDIT_CARD if payment_method == "card" else PaymentMethod.PAYPAL
        deposit = self.deposit.quantize(Decimal("0.01"))

        try:
            order = self.orders.create_order(
                {
                    "user_id": user.id,
                    "user_email": user.email,
                    "user_name": user.first_name or user.email,
                    "total": str(deposit),
                    "status": OrderStatus.PENDING.value,
                    "priority": OrderPriority.URGENT.value,
                    "payment_method": method.value,
                    "specifications": Specifications(
                        style=self.wizard.style,
                        description=self.wizard.description,
                        budget_range=CUSTOM_BUDGET_RANGE,
                    ).model_dump(by_alias=True),
                    "notes": CUSTOM_NOTES,
                },
                [
                    {
                        "service_id": DEPOSIT_SERVICE_ID,
                        "service_name": f"Depósito: {self.wizard.style}",
                        "price": str(deposit),
                        "quantity": 1,
                        "variations": "Depósito inicial",
                    }
                ],
            )
        except BackendError as e:
            logger.error(f"Custom request failed for user {user.id}: {e.message}")
            self.state.notify(
                f"Error al crear la solicitud personalizada: {e.message}", NotificationType.ERROR
            )
            raise
        except Exception as e:
            logger.exception(f"Unexpected error during custom request for user {user.id}")
            self.state.notify(f"Ocurrió un error inesperado: {e}", NotificationType.ERROR)
            raise BackendError(str(e)) from e

        self.orders.record(order)
        self.wizard.order_id = order.id
        self.wizard.step = 3
        self.state.notify("¡Solicitud personalizada enviada con éxito!", NotificationType.SUCCESS)

        logger.info(f"Custom request {order.id} created with deposit {deposit}")
        return order

    def reset(self) -> CustomRequestWizard:
        self.state.custom_request = CustomRequestWizard()
        return self.state.custom_request
