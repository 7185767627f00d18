from __future__ import annotations

import dataclasses
from typing import List, Optional

import api.crud as crud
from api.models import Product
from utils.forms import FormField
from utils.pure import format_date
from views.modal_form import EntityFormModal
from views.scr_categories import CategoryLookupMixin
from views.scr_resource_list import ResourceListScreen

# stock at or below this is flagged in the table
LOW_STOCK = 5


class ProductsScreen(CategoryLookupMixin, ResourceListScreen):
    """
    Catalog products, searchable by title, SKU and category. The form edits
    the base record; variants stay as the backend has them.
    """

    LABEL = "products"
    COLUMNS = ("Title", "SKU", "Category", "Price", "Stock", "Status", "Created")
    SEARCH_FIELDS = ("title", "base_sku", "category")
    SEARCH_PLACEHOLDER = "Search products by title, SKU or category..."

    async def fetch_items(self) -> List[Product]:
        products = await crud.get_products(self.client)
        await self.refresh_categories()
        return [
            p if p.category else dataclasses.replace(p, category=self.category_name(p.category_id))
            for p in products
        ]

    def row_for(self, p: Product):
        stock = f"{p.stock} (low)" if p.stock <= LOW_STOCK else str(p.stock)
        return (
            p.title,
            p.base_sku or "-",
            p.category or "-",
            self.app.state.format_price(p.base_price),
            stock,
            "Active" if p.is_active else "Inactive",
            format_date(p.created_at),
        )

    def detail_rows(self, p: Product):
        rows = super().detail_rows(p)
        rows.append(["Description", p.description or "-"])
        rows.extend([f"Image {i + 1}", url] for i, url in enumerate(p.images))
        return rows

    def detail_title(self, p: Product) -> str:
        return p.title

    def describe(self, p: Product) -> str:
        return f'product "{p.title}"'

    def product_fields(self) -> List[FormField]:
        return [
            FormField("title", "Title", required=True),
            FormField("basePrice", "Base Price", kind="number", required=True),
            FormField("baseSku", "Base SKU", required=True, transform=str.upper),
            self.category_field(),
            FormField("description", "Description"),
            FormField("isActive", "Active", kind="bool"),
        ]

    def build_form(self, p: Optional[Product]) -> EntityFormModal:
        if p is None:
            return EntityFormModal(
                "Add New Product",
                self.product_fields(),
                lambda data: crud.create_product(self.client, data),
                defaults={"isActive": True},
                success_message="Product created successfully",
                failure_message="Failed to create product",
            )
        return EntityFormModal(
            "Edit Product",
            self.product_fields(),
            lambda data: crud.update_product(self.client, p.id, data),
            entity=p.to_json(),
            success_message="Product updated successfully",
            failure_message="Failed to update product",
        )

    async def delete_item(self, p: Product) -> None:
        await crud.delete_product(self.client, p.id)
