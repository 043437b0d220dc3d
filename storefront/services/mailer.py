# storefront/services/mailer.py
import smtplib
import ssl
from decimal import Decimal
from email.message import EmailMessage
from email.utils import formataddr, make_msgid
from html import escape

from storefront.domain.schemas import OrderEmailIn
from storefront.utils import settings
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


def _money(value: Decimal) -> str:
    return f"₪{value:.2f}"


def render_order_email(order: OrderEmailIn, site_url: str = settings.SITE_URL) -> str:
    """HTML potwierdzenia zamowienia. Wiersz rabatu tylko gdy rabat > 0."""
    items_html = "".join(
        "<div style=\"border-bottom: 1px solid #eee; padding: 10px 0;\">"
        f"<img src=\"{escape(item.image or '')}\" alt=\"{escape(item.name)}\" width=\"50\" height=\"50\" />"
        f"<p><strong>{escape(item.name)}</strong></p>"
        f"<p>Quantity: {item.quantity}"
        f"{' | Color: ' + escape(item.color) if item.color else ''}"
        f"{' | Size: ' + escape(item.size) if item.size else ''}</p>"
        f"<p>{_money(item.price * item.quantity)}</p>"
        "</div>"
        for item in order.items
    )

    discount_row = ""
    if order.discount > 0:
        discount_row = f"<p style=\"color: #22c55e;\">Discount: -{_money(order.discount)}</p>"

    tracking_url = f"{site_url}/orders/{order.id}"

    return (
        "<div style=\"font-family: Arial, sans-serif; max-width: 600px; margin: 0 auto;\">"
        f"<h1>Order confirmation #{escape(order.id)}</h1>"
        "<h2>Order information</h2>"
        f"<p><strong>Name:</strong> {escape(order.full_name)}</p>"
        f"<p><strong>Email:</strong> {escape(order.email)}</p>"
        f"<p><strong>Phone:</strong> {escape(order.phone_number)}</p>"
        f"<p><strong>Shipping address:</strong> {escape(order.shipping_address)}</p>"
        f"<h2>Items</h2>{items_html}"
        "<h2>Summary</h2>"
        f"<p>Subtotal: {_money(order.subtotal)}</p>"
        f"<p>Delivery: {_money(order.delivery_fee)}</p>"
        f"{discount_row}"
        f"<p><strong>Total: {_money(order.total)}</strong></p>"
        f"<p>Tracking number: {escape(order.tracking_number or '')}</p>"
        f"<p><a href=\"{escape(tracking_url)}\">Track your order</a></p>"
        f"<p>Thank you for ordering from {escape(settings.MAIL_FROM_NAME)}.</p>"
        "</div>"
    )


class Mailer:
    """Wysylka maili przez relay SMTP (STARTTLS), nadawca staly z konfiguracji."""

    def __init__(
        self,
        host: str = settings.MAIL_HOST,
        port: int = settings.MAIL_PORT,
        username: str = settings.MAIL_USERNAME,
        password: str = settings.MAIL_PASSWORD,
        from_name: str = settings.MAIL_FROM_NAME,
        timeout: int = 10,
    ):
        self.host = host
        self.port = port
        self.username = username
        self.password = password
        self.from_name = from_name
        self.timeout = timeout

    def send_order_confirmation(self, order: OrderEmailIn, customer_email: str) -> str:
        msg = EmailMessage()
        msg["Subject"] = f"Order confirmation #{order.id}"
        msg["From"] = formataddr((self.from_name, self.username))
        msg["To"] = customer_email
        msg["Message-ID"] = make_msgid()
        msg.set_content(f"Your order {order.id} has been received.")
        msg.add_alternative(render_order_email(order), subtype="html")

        logger.info(f"SMTP {self.host}:{self.port} -> {customer_email} (order {order.id})")

        with smtplib.SMTP(self.host, self.port, timeout=self.timeout) as smtp:
            smtp.starttls(context=ssl.create_default_context())
            if self.username:
                smtp.login(self.username, self.password)
            smtp.send_message(msg)

        return msg["Message-ID"]
