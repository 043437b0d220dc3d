from typing import Dict, Any, Optional

from storefront.domain import pricing
from storefront.domain.errors import InvalidCartSelection
from storefront.domain.schemas import CartKey, CartLine
from storefront.services.cart_store import CartStore
from storefront.services.catalog_service import CatalogService
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


class CartService:
    """
    Use case'y koszyka nad CartStore.
    commands (add, update, remove, clear) modyfikuja stan
    query (get) tylko odczyt + wyliczone ceny
    """

    def __init__(self, store: CartStore, catalog: CatalogService):
        self.store = store
        self.catalog = catalog

    #query - odczyt
    def get_cart(
        self,
        session_id: str,
        zone: Optional[pricing.DeliveryZone] = None,
        discount_percent: int = 0,
    ) -> Dict[str, Any]:
        return self._to_dict(session_id, self.store.get(session_id), zone, discount_percent)

    #commands
    def add_product(
        self,
        session_id: str,
        product_id: int,
        color: Optional[str],
        size: Optional[str],
        quantity: int,
    ) -> Dict[str, Any]:

        # Walidacje
        if quantity <= 0:
            raise ValueError("Ilosc musi byc wieksza niz 0")

        product = self.catalog.get_product(product_id)

        if not color:
            raise InvalidCartSelection("Wybierz kolor")

        # obrazek pozycji bierzemy z wybranego koloru
        chosen = next((c for c in product.colors or [] if c["name"] == color), None)
        if chosen is None:
            raise InvalidCartSelection(f"Produkt nie ma koloru {color}")

        sizes = product.sizes or []
        if sizes:
            if not size:
                raise InvalidCartSelection("Wybierz rozmiar")
            if size not in sizes:
                raise InvalidCartSelection(f"Produkt nie ma rozmiaru {size}")
        else:
            size = None

        line = CartLine(
            product_id=str(product.id),
            name=product.name,
            price=product.price,
            sale_price=product.sale_price,
            color=color,
            color_image_url=chosen.get("image_url"),
            size=size,
            quantity=quantity,
        )

        lines = self.store.add(session_id, line)
        return self._to_dict(session_id, lines)

    def update_quantity(self, session_id: str, key: CartKey, delta: int) -> Dict[str, Any]:
        return self._to_dict(session_id, self.store.update_quantity(session_id, key, delta))

    def remove(self, session_id: str, key: CartKey) -> Dict[str, Any]:
        return self._to_dict(session_id, self.store.remove(session_id, key))

    def clear(self, session_id: str) -> None:
        self.store.clear(session_id)

    @staticmethod
    def _to_dict(session_id, lines, zone=None, discount_percent=0) -> Dict[str, Any]:
        #dict przeksztalcany w jsona
        return {
            "session_id": session_id,
            "items": [
                {
                    "product_id": line.product_id,
                    "name": line.name,
                    "price": line.price,
                    "sale_price": line.sale_price,
                    "color": line.color,
                    "size": line.size,
                    "quantity": line.quantity,
                    "image_url": line.image_url,
                    "line_total": pricing.line_total(line),
                }
                for line in lines
            ],
            "summary": pricing.summarize(lines, zone, discount_percent),
        }
