# storefront/services/notification_service.py
from typing import Any, Dict

from pydantic import ValidationError

from storefront.celery_worker import celery_app
from storefront.domain.schemas import OrderEmailIn
from storefront.services.mailer import Mailer
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


class NotificationService:
    """
    Serwis do wysylania powiadomien.
    Uzywa Celery do asynchronicznego przetwarzania.
    """

    @staticmethod
    def send_order_confirmation(order: Dict[str, Any], customer_email: str):
        """
        Kolejkuje mail z potwierdzeniem zamowienia.
        Blad brokera leci do wywolujacego (OrderService loguje go jako ostrzezenie).
        """
        send_order_confirmation_task.delay(order, customer_email)
        logger.info(f"[NOTIFICATION] Confirmation for order {order['id']} queued")


@celery_app.task(name="storefront.services.notification_service.send_order_confirmation_task")
def send_order_confirmation_task(order: Dict[str, Any], customer_email: str):
    """
    Celery task - wysyla mail z potwierdzeniem.
    Bez retry: nieudana wysylka jest logowana, zamowienie zostaje.
    """
    try:
        message_id = Mailer().send_order_confirmation(OrderEmailIn.model_validate(order), customer_email)
    except ValidationError as e:
        logger.error(f"[NOTIFICATION] Order {order.get('id')}: invalid payload: {e}")
        return {"order_id": order.get("id"), "status": "failed", "error": str(e)}
    except Exception as e:
        logger.error(f"[NOTIFICATION] Order {order['id']}: email to {customer_email} failed: {e}")
        return {"order_id": order["id"], "status": "failed", "error": str(e)}

    logger.info(f"[NOTIFICATION] Order {order['id']}: email sent ({message_id})")
    return {"order_id": order["id"], "status": "sent", "message_id": message_id}
