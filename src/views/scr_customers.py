from __future__ import annotations

from typing import List, Optional

from textual import work
from textual.binding import Binding

import api.crud as crud
from api.models import Customer
from utils.forms import FormField
from utils.pure import format_date
from views.modal_dialog import ConfirmBanModal
from views.modal_form import EntityFormModal
from views.scr_resource_list import ResourceListScreen

NOTES_FIELDS = [FormField("notes", "Admin Notes", placeholder="Internal notes")]


class CustomersScreen(ResourceListScreen):
    """
    Customers, searchable by name and email. Aggregates (orders, spent) are
    owned by the backend and shown read-only; admins can ban, unban, annotate
    and delete.
    """

    BINDINGS = [
        Binding("b", "toggle_ban", "Ban/Unban", show=True),
    ]

    LABEL = "customers"
    COLUMNS = ("Name", "Email", "Orders", "Spent", "Status", "Joined")
    SEARCH_FIELDS = ("name", "email")
    SEARCH_PLACEHOLDER = "Search customers by name or email..."

    async def fetch_items(self) -> List[Customer]:
        return await crud.get_customers(self.client)

    def row_for(self, c: Customer):
        return (
            c.name or "-",
            c.email,
            c.total_orders,
            self.app.state.format_price(c.total_spent),
            "Banned" if c.is_banned else "Active",
            format_date(c.created_at),
        )

    def detail_rows(self, c: Customer):
        return super().detail_rows(c) + [["Notes", c.notes or "-"]]

    def detail_title(self, c: Customer) -> str:
        return c.name or c.email

    def describe(self, c: Customer) -> str:
        return f"customer {c.email}"

    def build_form(self, c: Optional[Customer]) -> Optional[EntityFormModal]:
        # customers sign up on the storefront, only notes are edited here
        if c is None:
            return None
        return EntityFormModal(
            f"Notes for {c.name or c.email}",
            NOTES_FIELDS,
            lambda data: crud.update_customer(
                self.client, c.id, {"notes": data.get("notes", "")}
            ),
            entity=c.to_json(),
            success_message="Customer updated successfully",
            failure_message="Failed to update customer",
        )

    async def delete_item(self, c: Customer) -> None:
        await crud.delete_customer(self.client, c.id)

    @work(exclusive=True, group="mutation")
    async def action_toggle_ban(self) -> None:
        c = self.selected_item()
        if c is None:
            self.notify("Select a customer first.", severity="warning")
            return

        if c.is_banned:
            await self.run_mutation(
                crud.unban_customer(self.client, c.id),
                "Customer unbanned successfully",
                "Failed to unban customer",
            )
            return

        if not await self.app.push_screen_wait(ConfirmBanModal(c.email)):
            return
        await self.run_mutation(
            crud.ban_customer(self.client, c.id),
            "Customer banned successfully",
            "Failed to ban customer",
        )
