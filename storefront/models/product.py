"""Product models for the storefront catalog"""

from pydantic import BaseModel, ConfigDict, Field, computed_field
from enum import Enum


DEFAULT_PRODUCT_IMAGE = "/images/default-product.jpg"


class ProductCategory(str, Enum):
    THEMES = "Themes"
    PLUGINS = "Plugins"
    TEMPLATES = "Templates"
    WEB_DESIGN = "Web Design"
    DEVELOPMENT = "Development"
    MARKETING = "Marketing"


class Product(BaseModel):
    """Product in the catalog"""
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    description: str = ""
    price: float = Field(ge=0)
    currency: str = "USD"
    category: ProductCategory
    image: str = DEFAULT_PRODUCT_IMAGE
    stock_quantity: int = Field(ge=0, default=10)
    featured: bool = False

    @computed_field
    @property
    def in_stock(self) -> bool:
        return self.stock_quantity > 0


class ProductSearchResponse(BaseModel):
    """Response from product search"""
    products: list[Product]
    total: int
    page: int
    limit: int
    total_pages: int
