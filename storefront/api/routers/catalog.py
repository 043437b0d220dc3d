# storefront/api/routers/catalog.py
from decimal import Decimal
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query

from storefront.api.deps import get_catalog
from storefront.domain.errors import NotFound
from storefront.domain.schemas import CategoryOut, CategoryPageOut, HomeOut, ProductOut
from storefront.services.catalog_service import CatalogService

router = APIRouter(prefix="/catalog", tags=["catalog"])


@router.get("/home", response_model=HomeOut)
def home(svc: CatalogService = Depends(get_catalog)):
    return svc.home()


@router.get("/categories", response_model=List[CategoryOut])
def list_categories(svc: CatalogService = Depends(get_catalog)):
    return svc.list_categories()


@router.get("/categories/{category_id}", response_model=CategoryOut)
def get_category(category_id: int, svc: CatalogService = Depends(get_catalog)):
    try:
        return svc.get_category(category_id)
    except NotFound as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.get("/categories/{category_id}/products", response_model=CategoryPageOut)
def category_products(
    category_id: int,
    q: str = "",
    min_price: Optional[Decimal] = Query(None, ge=0),
    max_price: Optional[Decimal] = Query(None, ge=0),
    sizes: List[str] = Query(default=[]),
    colors: List[str] = Query(default=[]),
    svc: CatalogService = Depends(get_catalog),
):
    try:
        return svc.category_products(
            category_id,
            search_term=q,
            min_price=min_price,
            max_price=max_price,
            sizes=sizes,
            colors=colors,
        )
    except NotFound as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.get("/products/top-rated", response_model=List[ProductOut])
def top_rated(limit: int = Query(8, gt=0, le=50), svc: CatalogService = Depends(get_catalog)):
    return svc.top_rated(limit)


@router.get("/products/{product_id}", response_model=ProductOut)
def get_product(product_id: int, svc: CatalogService = Depends(get_catalog)):
    try:
        return svc.get_product(product_id)
    except NotFound as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.get("/products/{product_id}/related", response_model=List[ProductOut])
def related_products(product_id: int, svc: CatalogService = Depends(get_catalog)):
    try:
        return svc.related_products(product_id)
    except NotFound as e:
        raise HTTPException(status_code=404, detail=str(e))
