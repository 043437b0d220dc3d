# storefront/domain/schemas.py
from pydantic import AliasChoices, BaseModel, Field, ConfigDict, BeforeValidator
from typing import Annotated, List, Optional, Tuple
from decimal import Decimal
from datetime import datetime

from storefront.domain.order_status import OrderStatus
from storefront.domain.pricing import DeliveryZone, PriceSummary


CartKey = Tuple[str, str, Optional[str]]


def _blank_to_none(value):
    if isinstance(value, str) and not value.strip():
        return None
    return value


# "" i None oznaczaja produkt bez rozmiarow
Size = Annotated[Optional[str], BeforeValidator(_blank_to_none)]


class CartLine(BaseModel):
    """
    Jedna pozycja koszyka: wariant produktu (kolor + rozmiar) i ilosc.
    Serializowana w calosci do magazynu koszyka.
    """

    product_id: str
    name: str
    price: Decimal = Field(..., ge=0)
    sale_price: Optional[Decimal] = Field(None, ge=0)
    color: str
    color_image_url: Optional[str] = None
    size: Size = None
    quantity: int = Field(1, ge=1)

    @property
    def key(self) -> CartKey:
        return (self.product_id, self.color, self.size)

    @property
    def image_url(self) -> Optional[str]:
        # wybrany obrazek wynika z wybranego koloru
        return self.color_image_url

    @property
    def unit_price(self) -> Decimal:
        return self.sale_price if self.sale_price is not None else self.price


class CartKeyIn(BaseModel):
    product_id: str
    color: str
    size: Size = None

    def as_key(self) -> CartKey:
        return (self.product_id, self.color, self.size)


class AddToCartIn(BaseModel):
    """Wybor z karty produktu."""

    product_id: int = Field(..., gt=0)
    color: Optional[str] = None
    size: Optional[str] = None
    quantity: int = Field(1, gt=0)


class QuantityChangeIn(CartKeyIn):
    delta: int


class CartLineOut(BaseModel):
    product_id: str
    name: str
    price: Decimal
    sale_price: Optional[Decimal] = None
    color: str
    size: Optional[str] = None
    quantity: int
    image_url: Optional[str] = None
    line_total: Decimal


class CartOut(BaseModel):
    session_id: str
    items: List[CartLineOut]
    summary: PriceSummary


class DiscountOut(BaseModel):
    code: str
    percent: int


class ShippingInfo(BaseModel):
    """Dane do wysylki z formularza checkout. Walidacja tresci w OrderService."""

    full_name: str = Field("", max_length=200)
    email: str = Field("", max_length=254)
    address: str = Field("", max_length=500)
    phone: str = Field("", max_length=40)


class CheckoutIn(BaseModel):
    shipping: ShippingInfo
    zone: Optional[DeliveryZone] = None
    discount_code: Optional[str] = None
    idempotency_key: Optional[str] = Field(None, max_length=64)


class CheckoutOut(BaseModel):
    order_id: str
    tracking_number: str
    notification_queued: bool
    replayed: bool = False


class OrderItemOut(BaseModel):
    product_id: str
    name: str
    price: Decimal
    quantity: int
    color: Optional[str] = None
    size: Optional[str] = None
    image: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)


class OrderOut(BaseModel):
    id: str
    full_name: str
    email: str
    shipping_address: str
    phone_number: str
    payment_method: str
    items: List[OrderItemOut]
    subtotal: Decimal
    delivery_fee: Decimal
    discount: Decimal
    total: Decimal
    created_at: datetime
    status: OrderStatus
    expected_arrival: str
    tracking_number: str

    model_config = ConfigDict(from_attributes=True, frozen=True)


class TrackingStageOut(BaseModel):
    key: str
    title: str
    completed: bool


class OrderTrackingOut(BaseModel):
    order: OrderOut
    stages: List[TrackingStageOut]
    progress: int
    cancelled: bool


class StatusUpdateIn(BaseModel):
    status: OrderStatus


class AdminOrdersOut(BaseModel):
    orders: List[OrderOut]
    next_page_token: Optional[str] = None
    delivered_count: int
    shipped_count: int


class OrderEmailItemIn(BaseModel):
    name: str
    price: Decimal = Field(ge=0)
    quantity: int = Field(ge=1)
    color: Optional[str] = None
    size: Optional[str] = None
    image: Optional[str] = None


class OrderEmailIn(BaseModel):
    """
    Zamowienie do maila potwierdzajacego.
    Przyjmuje nazwy z API (snake_case) i z dokumentu zamowienia (camelCase).
    """

    id: str
    full_name: str = Field(validation_alias=AliasChoices("full_name", "fullName"))
    email: str
    phone_number: str = Field(validation_alias=AliasChoices("phone_number", "phoneNumber"))
    shipping_address: str = Field(validation_alias=AliasChoices("shipping_address", "shippingAddress"))
    items: List[OrderEmailItemIn] = Field(default_factory=list, validation_alias=AliasChoices("items", "cartItems"))
    subtotal: Decimal = Field(ge=0)
    delivery_fee: Decimal = Field(ge=0, validation_alias=AliasChoices("delivery_fee", "deliveryFee"))
    discount: Decimal = Field(Decimal("0"), ge=0)
    total: Decimal = Field(ge=0)
    tracking_number: Optional[str] = Field(None, validation_alias=AliasChoices("tracking_number", "trackingNumber"))


class SendOrderEmailIn(BaseModel):
    """Payload endpointu mailowego: {order, customerEmail}."""

    order: Optional[OrderEmailIn] = None
    customer_email: Optional[str] = Field(None, alias="customerEmail")

    model_config = ConfigDict(populate_by_name=True)


class ColorOut(BaseModel):
    name: str
    image_url: Optional[str] = None


class ProductOut(BaseModel):
    id: int
    name: str
    description: str
    sku: Optional[str] = None
    price: Decimal
    sale_price: Optional[Decimal] = None
    colors: List[ColorOut]
    sizes: List[str]
    categories: List[int]
    quantity: int
    rating: float
    is_top_seller: bool

    model_config = ConfigDict(from_attributes=True)


class CategoryOut(BaseModel):
    id: int
    name: str
    image_url: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)


class HeroSlideOut(BaseModel):
    id: int
    title: str
    description: str
    image_url: str
    link_url: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)


class HomeOut(BaseModel):
    hero_slides: List[HeroSlideOut]
    categories: List[CategoryOut]
    top_sellers: List[ProductOut]


class CategoryPageOut(BaseModel):
    category: CategoryOut
    products: List[ProductOut]
