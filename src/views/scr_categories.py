from __future__ import annotations

from typing import List, Optional

import api.crud as crud
from api.client import ApiError
from api.models import Category
from utils.forms import FormField
from utils.logger import get_logger
from views.modal_form import EntityFormModal
from views.scr_resource_list import ResourceListScreen

_logger = get_logger(__name__)

CATEGORY_FIELDS = [
    FormField("name", "Name", required=True),
    FormField("description", "Description"),
    FormField("isActive", "Active", kind="bool"),
]


class CategoryLookupMixin:
    """
    For screens whose rows point at a parent category: keeps the category
    list around for display names and for the category select of forms.
    """

    categories: List[Category] = []

    async def refresh_categories(self) -> None:
        # a stale list only costs names in the table, the rows still load
        try:
            self.categories = await crud.get_categories(self.client)
        except ApiError as e:
            _logger.warning(f"Failed to fetch categories: {e.message}")

    def category_name(self, category_id: str) -> str:
        for c in self.categories:
            if c.id == category_id:
                return c.name
        return ""

    def category_field(self, label: str = "Category") -> FormField:
        if not self.categories:
            return FormField("category", f"{label} (id)", required=True)
        return FormField(
            "category",
            label,
            kind="select",
            required=True,
            options=[(c.name, c.id) for c in self.categories],
        )


class CategoriesScreen(ResourceListScreen):
    LABEL = "categories"
    COLUMNS = ("Name", "Description", "Status")
    SEARCH_FIELDS = ("name", "description")
    SEARCH_PLACEHOLDER = "Search categories..."

    async def fetch_items(self) -> List[Category]:
        return await crud.get_categories(self.client)

    def row_for(self, c: Category):
        return (c.name, c.description or "-", "Active" if c.is_active else "Inactive")

    def describe(self, c: Category) -> str:
        return f'category "{c.name}"'

    def build_form(self, c: Optional[Category]) -> EntityFormModal:
        if c is None:
            return EntityFormModal(
                "Add Category",
                CATEGORY_FIELDS,
                lambda data: crud.create_category(self.client, data),
                defaults={"isActive": True},
                success_message="Category created successfully",
                failure_message="Failed to create category",
            )
        return EntityFormModal(
            "Edit Category",
            CATEGORY_FIELDS,
            lambda data: crud.update_category(self.client, c.id, data),
            entity=c.to_json(),
            success_message="Category updated successfully",
            failure_message="Failed to update category",
        )

    async def delete_item(self, c: Category) -> None:
        await crud.delete_category(self.client, c.id)
