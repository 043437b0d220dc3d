# storefront/repos/catalog_repo.py
from typing import List

from sqlalchemy import select
from sqlalchemy.orm import Session

from storefront.data.models.category import CategoryModel
from storefront.data.models.hero_slide import HeroSlideModel
from storefront.data.models.product import ProductModel


class CatalogRepo:
    """Tylko odczyt produktow, kategorii i slajdow."""

    def __init__(self, db: Session):
        self.db = db

    def get_product(self, product_id: int) -> ProductModel | None:
        return self.db.get(ProductModel, product_id)

    def get_category(self, category_id: int) -> CategoryModel | None:
        return self.db.get(CategoryModel, category_id)

    def list_categories(self) -> List[CategoryModel]:
        return list(self.db.execute(select(CategoryModel).order_by(CategoryModel.id)).scalars().all())

    def list_hero_slides(self) -> List[HeroSlideModel]:
        stmt = select(HeroSlideModel).order_by(HeroSlideModel.position, HeroSlideModel.id)
        return list(self.db.execute(stmt).scalars().all())

    def list_visible_products(self) -> List[ProductModel]:
        stmt = select(ProductModel).where(ProductModel.is_visible.is_(True)).order_by(ProductModel.id)
        return list(self.db.execute(stmt).scalars().all())

    def list_top_rated(self, limit: int) -> List[ProductModel]:
        stmt = (
            select(ProductModel)
            .where(ProductModel.is_visible.is_(True))
            .order_by(ProductModel.rating.desc(), ProductModel.id)
            .limit(limit)
        )
        return list(self.db.execute(stmt).scalars().all())

    def list_products_in_category(self, category_id: int) -> List[ProductModel]:
        # categories to kolumna JSON, wiec "array-contains" filtrujemy w pythonie
        return [p for p in self.list_visible_products() if category_id in (p.categories or [])]
