# storefront/data/seed.py
from decimal import Decimal

from storefront.data.database import Base, SessionLocal, engine
from storefront.data.models import CategoryModel, HeroSlideModel, ProductModel
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


def seed(db=None):
    """Demo katalog dla dev; nic nie robi, jesli produkty juz sa."""
    own_session = db is None
    db = db or SessionLocal()
    try:
        # not forcing: only seed if empty
        if db.query(ProductModel).first():
            return

        rings = CategoryModel(name="Rings", image_url="/images/categories/rings.jpg")
        necklaces = CategoryModel(name="Necklaces", image_url="/images/categories/necklaces.jpg")
        db.add_all([rings, necklaces])
        db.flush()

        db.add_all([
            ProductModel(
                name="Silver ring",
                description="Sterling silver ring",
                sku="RNG-001",
                price=Decimal("100.00"),
                sale_price=Decimal("80.00"),
                colors=[
                    {"name": "silver", "image_url": "/images/products/ring-silver.jpg"},
                    {"name": "gold", "image_url": "/images/products/ring-gold.jpg"},
                ],
                sizes=["S", "M", "L"],
                categories=[rings.id],
                quantity=12,
                rating=4.8,
                is_top_seller=True,
            ),
            ProductModel(
                name="Pearl necklace",
                description="Freshwater pearls",
                sku="NCK-001",
                price=Decimal("150.00"),
                colors=[{"name": "white", "image_url": "/images/products/pearl-white.jpg"}],
                sizes=[],
                categories=[necklaces.id],
                quantity=4,
                rating=4.5,
            ),
        ])
        db.add(HeroSlideModel(
            title="New collection",
            description="Handmade jewelry",
            image_url="/images/hero/collection.jpg",
            link_url="/categories/1",
            position=0,
        ))
        db.commit()
        logger.info("Demo catalog seeded")
    finally:
        if own_session:
            db.close()


if __name__ == "__main__":
    Base.metadata.create_all(bind=engine)
    seed()
