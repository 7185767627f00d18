from __future__ import annotations

from typing import List, Optional

import api.crud as crud
from api.models import COUPON_TYPES, Coupon
from utils.forms import FormField
from utils.pure import format_date
from views.modal_form import EntityFormModal
from views.scr_resource_list import ResourceListScreen

COUPON_FIELDS = [
    FormField("code", "Coupon Code", required=True, transform=str.upper,
              placeholder="Enter coupon code"),
    FormField("type", "Discount Type", kind="select", required=True,
              options=[(t.capitalize(), t) for t in COUPON_TYPES]),
    FormField("value", "Discount Value", kind="number", required=True),
    FormField("minAmount", "Minimum Order Amount", kind="number"),
    FormField("maxDiscount", "Maximum Discount", kind="number"),
    FormField("usageLimit", "Usage Limit", kind="integer"),
    FormField("expiresAt", "Expiry Date", kind="date"),
    FormField("isStackable", "Stackable", kind="bool"),
    FormField("isActive", "Active", kind="bool"),
]

COUPON_DEFAULTS = {"type": "percentage", "value": 0, "isStackable": False, "isActive": True}


class CouponsScreen(ResourceListScreen):
    """
    Coupons, searchable by code.
    """

    LABEL = "coupons"
    COLUMNS = ("Code", "Type", "Value", "Used", "Expires", "Stackable", "Status")
    SEARCH_FIELDS = ("code",)
    SEARCH_PLACEHOLDER = "Search coupons by code..."

    async def fetch_items(self) -> List[Coupon]:
        return await crud.get_coupons(self.client)

    def _value_text(self, c: Coupon) -> str:
        if c.type == "percentage":
            return f"{c.value:g}%"
        return self.app.state.format_price(c.value)

    def row_for(self, c: Coupon):
        used = f"{c.used_count}/{c.usage_limit}" if c.usage_limit else str(c.used_count)
        return (
            c.code,
            c.type,
            self._value_text(c),
            used,
            format_date(c.expires_at),
            "yes" if c.is_stackable else "no",
            "Active" if c.is_active else "Inactive",
        )

    def detail_rows(self, c: Coupon):
        fmt = self.app.state.format_price
        rows = super().detail_rows(c)
        if c.min_amount is not None:
            rows.append(["Minimum Amount", fmt(c.min_amount)])
        if c.max_discount is not None:
            rows.append(["Max Discount", fmt(c.max_discount)])
        return rows

    def detail_title(self, c: Coupon) -> str:
        return f"Coupon {c.code}"

    def describe(self, c: Coupon) -> str:
        return f'coupon "{c.code}"'

    def build_form(self, c: Optional[Coupon]) -> EntityFormModal:
        if c is None:
            return EntityFormModal(
                "Add New Coupon",
                COUPON_FIELDS,
                lambda data: crud.create_coupon(self.client, data),
                defaults=COUPON_DEFAULTS,
                success_message="Coupon created successfully",
                failure_message="Failed to create coupon",
            )
        return EntityFormModal(
            "Edit Coupon",
            COUPON_FIELDS,
            lambda data: crud.update_coupon(self.client, c.id, data),
            entity=c.to_json(),
            defaults=COUPON_DEFAULTS,
            success_message="Coupon updated successfully",
            failure_message="Failed to update coupon",
        )

    async def delete_item(self, c: Coupon) -> None:
        await crud.delete_coupon(self.client, c.id)
