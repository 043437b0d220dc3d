from sqlalchemy import Column, Integer, String

from storefront.data.database import Base


class HeroSlideModel(Base):
    __tablename__ = "hero_slides"
    id = Column(Integer, primary_key=True)
    title = Column(String, nullable=False)
    description = Column(String, nullable=False, default="")
    image_url = Column(String, nullable=False)
    link_url = Column(String, nullable=True)
    position = Column(Integer, nullable=False, default=0)
