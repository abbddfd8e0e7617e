# studio_store/services/notification_service.py
from studio_store.celery_worker import celery_app
from studio_store.utils.logging import get_logger

logger = get_logger(__name__)


class NotificationService:
    """
    Avisos asincronos al staff y al cliente mediante Celery.
    Un fallo al encolar nunca debe romper la accion del usuario.
    """

    @staticmethod
    def send_order_notification(user_id: str, order_id: str) -> None:
        try:
            send_order_notification_task.delay(user_id, order_id)
        except Exception as e:
            logger.warning(f"Could not enqueue order notification for {order_id}: {e}")

    @staticmethod
    def send_status_notification(order_id: str, status: str) -> None:
        try:
            send_status_notification_task.delay(order_id, status)
        except Exception as e:
            logger.warning(f"Could not enqueue status notification for {order_id}: {e}")


@celery_app.task(name="studio_store.services.notification_service.send_order_notification_task")
def send_order_notification_task(user_id: str, order_id: str):
    """Nuevo pedido: por ahora solo se registra en el log del worker."""
    logger.info(f"[NOTIFICATION] User {user_id}: order {order_id} received")
    return {"user_id": user_id, "order_id": order_id, "status": "sent"}


@celery_app.task(name="studio_store.services.notification_service.send_status_notification_task")
def send_status_notification_task(order_id: str, status: str):
    logger.info(f"[NOTIFICATION] Order {order_id} is now {status}")
    return {"order_id": order_id, "order_status": status, "status": "sent"}
