from __future__ import annotations

import dataclasses
from typing import List, Optional

import api.crud as crud
from api.models import SubCategory
from utils.forms import FormField
from views.modal_form import EntityFormModal
from views.scr_categories import CategoryLookupMixin
from views.scr_resource_list import ResourceListScreen


class SubCategoriesScreen(CategoryLookupMixin, ResourceListScreen):
    LABEL = "sub-categories"
    COLUMNS = ("Name", "Category")
    SEARCH_FIELDS = ("name", "category")
    SEARCH_PLACEHOLDER = "Search sub-categories..."

    async def fetch_items(self) -> List[SubCategory]:
        subs = await crud.get_sub_categories(self.client)
        await self.refresh_categories()
        return [
            s if s.category else dataclasses.replace(s, category=self.category_name(s.category_id))
            for s in subs
        ]

    def row_for(self, s: SubCategory):
        return (s.name, s.category or s.category_id or "-")

    def describe(self, s: SubCategory) -> str:
        return f'sub-category "{s.name}"'

    def sub_category_fields(self) -> List[FormField]:
        return [
            FormField("name", "Name", required=True),
            self.category_field("Parent Category"),
        ]

    def build_form(self, s: Optional[SubCategory]) -> EntityFormModal:
        if s is None:
            return EntityFormModal(
                "Add Sub-Category",
                self.sub_category_fields(),
                lambda data: crud.create_sub_category(self.client, data),
                success_message="Sub-category created successfully",
                failure_message="Failed to create sub-category",
            )
        return EntityFormModal(
            "Edit Sub-Category",
            self.sub_category_fields(),
            lambda data: crud.update_sub_category(self.client, s.id, data),
            entity=s.to_json(),
            success_message="Sub-category updated successfully",
            failure_message="Failed to update sub-category",
        )

    async def delete_item(self, s: SubCategory) -> None:
        await crud.delete_sub_category(self.client, s.id)
