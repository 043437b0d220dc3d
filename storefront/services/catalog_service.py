# storefront/services/catalog_service.py
from decimal import Decimal
from typing import List, Optional, Sequence

from sqlalchemy.orm import Session

from storefront.data.models.product import ProductModel
from storefront.domain.errors import CategoryNotFound, ProductNotFound
from storefront.domain.filters import filter_products
from storefront.repos.catalog_repo import CatalogRepo

RELATED_LIMIT = 8
TOP_RATED_LIMIT = 8


class CatalogService:
    """Zapytania sklepu: strona glowna, kategorie, karta produktu."""

    def __init__(self, db: Session):
        self.repo = CatalogRepo(db)

    def home(self):
        return {
            "hero_slides": self.repo.list_hero_slides(),
            "categories": self.repo.list_categories(),
            "top_sellers": [p for p in self.repo.list_visible_products() if p.is_top_seller],
        }

    def list_categories(self):
        return self.repo.list_categories()

    def get_category(self, category_id: int):
        category = self.repo.get_category(category_id)
        if not category:
            raise CategoryNotFound("Kategoria nie istnieje")
        return category

    def category_products(
        self,
        category_id: int,
        search_term: str = "",
        min_price: Optional[Decimal] = None,
        max_price: Optional[Decimal] = None,
        sizes: Sequence[str] = (),
        colors: Sequence[str] = (),
    ):
        category = self.get_category(category_id)
        products = filter_products(
            self.repo.list_products_in_category(category.id),
            search_term=search_term,
            min_price=min_price,
            max_price=max_price,
            sizes=sizes,
            colors=colors,
        )
        return {"category": category, "products": products}

    def get_product(self, product_id: int) -> ProductModel:
        product = self.repo.get_product(product_id)
        if not product or not product.is_visible:
            raise ProductNotFound("Produkt nie istnieje")
        return product

    def related_products(self, product_id: int) -> List[ProductModel]:
        product = self.get_product(product_id)
        shared = set(product.categories or [])
        return [
            p for p in self.repo.list_visible_products()
            if p.id != product.id and shared.intersection(p.categories or [])
        ][:RELATED_LIMIT]

    def top_rated(self, limit: int = TOP_RATED_LIMIT) -> List[ProductModel]:
        return self.repo.list_top_rated(limit)
