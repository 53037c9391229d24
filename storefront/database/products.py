"""In-memory product catalog"""

import math
from typing import Iterable, Optional

from ..models.product import Product, ProductCategory
from ..models.checkout import OrderItem
from .errors import InsufficientStock

# Sample catalog
PRODUCTS: dict[str, Product] = {
    "prod-001": Product(
        id="prod-001",
        name="BeBuilder Pro Theme",
        description="Professional WordPress theme for builders and contractors",
        price=49.99,
        category=ProductCategory.THEMES,
        image="/images/theme-pro.jpg",
        stock_quantity=100,
        featured=True,
    ),
    "prod-002": Product(
        id="prod-002",
        name="Construction Plugin Bundle",
        description="Essential plugins for construction company websites",
        price=29.99,
        category=ProductCategory.PLUGINS,
        image="/images/plugin-bundle.jpg",
        stock_quantity=50,
    ),
    "prod-003": Product(
        id="prod-003",
        name="Builder Portfolio Template",
        description="Showcase your construction projects beautifully",
        price=39.99,
        category=ProductCategory.TEMPLATES,
        image="/images/portfolio-template.jpg",
        stock_quantity=75,
    ),
    "prod-004": Product(
        id="prod-004",
        name="Estimate Calculator Plugin",
        description="Generate professional estimates for construction projects",
        price=19.99,
        category=ProductCategory.PLUGINS,
        image="/images/calculator-plugin.jpg",
        stock_quantity=30,
    ),
    "prod-005": Product(
        id="prod-005",
        name="Contractor Business Theme",
        description="Complete solution for contractor business websites",
        price=59.99,
        category=ProductCategory.THEMES,
        image="/images/business-theme.jpg",
        stock_quantity=60,
        featured=True,
    ),
    "prod-006": Product(
        id="prod-006",
        name="Landing Page Design",
        description="Custom landing page designed around a single campaign goal",
        price=299.00,
        category=ProductCategory.WEB_DESIGN,
        stock_quantity=10,
    ),
    "prod-007": Product(
        id="prod-007",
        name="Store Setup Package",
        description="Product import, payment setup and launch checklist for a new shop",
        price=499.00,
        category=ProductCategory.DEVELOPMENT,
        stock_quantity=5,
    ),
    "prod-008": Product(
        id="prod-008",
        name="SEO Starter Audit",
        description="Keyword review and on-page fixes for up to twenty pages",
        price=149.00,
        category=ProductCategory.MARKETING,
        stock_quantity=0,
    ),
}


class ProductDatabase:
    """In-memory product catalog"""

    def __init__(self, products: Optional[Iterable[Product]] = None):
        if products is None:
            products = PRODUCTS.values()
        self.products: dict[str, Product] = {p.id: p.model_copy() for p in products}

    def get_product(self, product_id: str) -> Optional[Product]:
        """Get a product by ID"""
        return self.products.get(product_id)

    async def find_by_id(self, product_id: str) -> Optional[Product]:
        """Catalog lookup used by reconciliation"""
        return self.get_product(product_id)

    async def check_stock(self, product_id: str, quantity: int) -> bool:
        """True if the product exists and has at least `quantity` units"""
        product = self.get_product(product_id)
        return product is not None and product.stock_quantity >= quantity

    def search_products(
        self,
        query: Optional[str] = None,
        category: Optional[ProductCategory] = None,
        min_price: Optional[float] = None,
        max_price: Optional[float] = None,
        in_stock_only: bool = False,
        limit: int = 12,
        page: int = 1,
    ) -> tuple[list[Product], int]:
        """
        Search products with filters.

        Matches `query` case-insensitively against name and description.

        Returns:
            Tuple of (products on the requested page, total matching count)
        """
        results = list(self.products.values())

        if query:
            query_lower = query.lower()
            results = [
                p for p in results
                if query_lower in p.name.lower() or query_lower in p.description.lower()
            ]

        if category:
            results = [p for p in results if p.category == category]

        if min_price is not None:
            results = [p for p in results if p.price >= min_price]
        if max_price is not None:
            results = [p for p in results if p.price <= max_price]

        if in_stock_only:
            results = [p for p in results if p.in_stock]

        total = len(results)

        offset = (page - 1) * limit
        return results[offset : offset + limit], total

    @staticmethod
    def page_count(total: int, limit: int) -> int:
        return math.ceil(total / limit) if limit else 0

    def list_categories(self) -> list[str]:
        return [c.value for c in ProductCategory]

    def add_product(self, product: Product) -> Product:
        self.products[product.id] = product
        return product

    def update_price(self, product_id: str, price: float) -> Optional[Product]:
        """Change a product's price"""
        product = self.products.get(product_id)
        if not product:
            return None
        updated = product.model_copy(update={"price": price})
        self.products[product_id] = updated
        return updated

    def update_stock(self, product_id: str, quantity_change: int) -> bool:
        """
        Update product stock.

        Args:
            product_id: Product to update
            quantity_change: Positive to add, negative to remove

        Returns:
            True if successful
        """
        product = self.products.get(product_id)
        if not product:
            return False

        new_quantity = product.stock_quantity + quantity_change
        if new_quantity < 0:
            return False

        self.products[product_id] = product.model_copy(update={"stock_quantity": new_quantity})
        return True

    def delete_product(self, product_id: str) -> bool:
        return self.products.pop(product_id, None) is not None

    def reserve_stock(self, items: Iterable[OrderItem]) -> None:
        """
        Decrement stock for every item, or for none of them.

        Raises:
            InsufficientStock: if any product is missing or short
        """
        items = list(items)
        for item in items:
            product = self.products.get(item.product_id)
            available = product.stock_quantity if product else 0
            if available < item.quantity:
                raise InsufficientStock(item.product_id, item.quantity, available)

        for item in items:
            self.update_stock(item.product_id, -item.quantity)


# Singleton instance
product_db = ProductDatabase()
