# storefront/api/routers/notifications.py
import smtplib

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from storefront.api.deps import get_mailer
from storefront.domain.schemas import SendOrderEmailIn
from storefront.services.mailer import Mailer
from storefront.utils.logging import get_logger

logger = get_logger(__name__)

router = APIRouter(prefix="/api", tags=["notifications"])


@router.post("/send-order-email")
def send_order_email(payload: SendOrderEmailIn, mailer: Mailer = Depends(get_mailer)):
    """
    Synchroniczna wysylka potwierdzenia: {order, customerEmail} -> {success, messageId}.
    Zle typy pol zamowienia odrzuca walidacja (422).
    """
    if not payload.order or not payload.customer_email:
        return JSONResponse(status_code=400, content={"error": "Missing required fields"})

    if not payload.order.items:
        return JSONResponse(status_code=400, content={"error": "Cart items are missing or empty"})

    try:
        message_id = mailer.send_order_confirmation(payload.order, payload.customer_email)
    except (smtplib.SMTPException, OSError) as e:
        logger.error(f"Email sending error: {e}")
        return JSONResponse(status_code=500, content={"error": "Failed to send email", "details": str(e)})

    return {"success": True, "messageId": message_id}
