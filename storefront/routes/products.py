"""Product API routes"""

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query

from ..core.config import Settings, get_settings
from ..database.products import ProductDatabase
from ..models.product import Product, ProductCategory, ProductSearchResponse
from .deps import get_catalog

router = APIRouter(prefix="/api/products", tags=["Products"])


@router.get("", response_model=ProductSearchResponse)
async def search_products(
    search: Optional[str] = Query(None, description="Search in name and description"),
    category: Optional[ProductCategory] = Query(None, description="Filter by category"),
    min_price: Optional[float] = Query(None, ge=0, description="Minimum price"),
    max_price: Optional[float] = Query(None, ge=0, description="Maximum price"),
    in_stock_only: bool = Query(False, description="Only show in-stock items"),
    page: int = Query(1, ge=1, description="Page number"),
    limit: Optional[int] = Query(None, ge=1, description="Results per page"),
    catalog: ProductDatabase = Depends(get_catalog),
    settings: Settings = Depends(get_settings),
):
    """Search products in the catalog, one page at a time"""
    limit = min(limit or settings.default_page_size, settings.max_page_size)

    products, total = catalog.search_products(
        query=search,
        category=category,
        min_price=min_price,
        max_price=max_price,
        in_stock_only=in_stock_only,
        limit=limit,
        page=page,
    )

    return ProductSearchResponse(
        products=products,
        total=total,
        page=page,
        limit=limit,
        total_pages=catalog.page_count(total, limit),
    )


@router.get("/categories", response_model=list[str])
async def list_categories(catalog: ProductDatabase = Depends(get_catalog)):
    """List all product categories"""
    return catalog.list_categories()


@router.get("/{product_id}", response_model=Product)
async def get_product(product_id: str, catalog: ProductDatabase = Depends(get_catalog)):
    """Get a single product"""
    product = catalog.get_product(product_id)
    if not product:
        raise HTTPException(status_code=404, detail="Product not found")
    return product
