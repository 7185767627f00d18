from __future__ import annotations

import os
from datetime import date
from typing import List, Optional

from textual import work
from textual.binding import Binding

import api.crud as crud
from api.models import ORDER_STATUSES, Order
from utils.forms import FormField
from utils.logger import get_logger
from utils.pure import format_date, orders_to_csv
from views.modal_form import EntityFormModal
from views.scr_resource_list import ResourceListScreen

_logger = get_logger(__name__)

STATUS_OPTIONS = [(s.capitalize(), s) for s in ORDER_STATUSES]

STATUS_FIELDS = [
    FormField("status", "Status", kind="select", required=True, options=STATUS_OPTIONS),
]

TRACKING_FIELDS = [
    FormField("trackingNumber", "Tracking Number", required=True),
    FormField("carrier", "Carrier", required=True, placeholder="UPS, USPS, DHL..."),
]


class OrdersScreen(ResourceListScreen):
    """
    Orders, searchable by order number and customer name/email, filterable by
    status. Status changes and tracking are saved through dialogs; the visible
    list can be exported to CSV.
    """

    BINDINGS = [
        Binding("s", "change_status", "Status", show=True),
        Binding("t", "assign_tracking", "Tracking", show=True),
        Binding("x", "export", "Export CSV", show=True),
    ]

    LABEL = "orders"
    COLUMNS = ("Order", "Customer", "Email", "Items", "Total", "Status", "Tracking", "Date")
    SEARCH_FIELDS = ("order_number", "customer_name", "customer_email")
    SEARCH_PLACEHOLDER = "Search by order number, customer name or email..."
    STATUS_FILTER = STATUS_OPTIONS

    async def fetch_items(self) -> List[Order]:
        return await crud.get_orders(self.client)

    def row_for(self, o: Order):
        tracking = f"{o.carrier or ''} {o.tracking_number}".strip() if o.tracking_number else "-"
        return (
            o.order_number,
            o.customer_name or "-",
            o.customer_email or "-",
            sum(i.quantity for i in o.items),
            self.app.state.format_price(o.total),
            o.status,
            tracking,
            format_date(o.created_at),
        )

    def detail_rows(self, o: Order):
        fmt = self.app.state.format_price
        rows = super().detail_rows(o)
        for item in o.items:
            rows.append(
                [f"{item.quantity} x {item.product_title or 'Item'}", fmt(item.price * item.quantity)]
            )
        return rows

    def detail_title(self, o: Order) -> str:
        return f"Order #{o.order_number}"

    def build_form(self, o: Optional[Order]) -> Optional[EntityFormModal]:
        # orders come from checkout, editing here means changing the status
        if o is None:
            return None
        return self._status_form(o)

    def _status_form(self, o: Order) -> EntityFormModal:
        return EntityFormModal(
            f"Order #{o.order_number} status",
            STATUS_FIELDS,
            lambda data: crud.update_order_status(self.client, o.id, data["status"]),
            entity={"status": o.status},
            success_message="Order status updated successfully",
            failure_message="Failed to update order status",
        )

    @work()
    async def action_change_status(self) -> None:
        o = self.selected_item()
        if o is None:
            self.notify("Select an order first.", severity="warning")
            return
        await self.open_form(self._status_form(o))

    @work()
    async def action_assign_tracking(self) -> None:
        o = self.selected_item()
        if o is None:
            self.notify("Select an order first.", severity="warning")
            return
        await self.open_form(
            EntityFormModal(
                f"Tracking for order #{o.order_number}",
                TRACKING_FIELDS,
                lambda data: crud.assign_tracking(
                    self.client, o.id, data["trackingNumber"], data["carrier"]
                ),
                entity={"trackingNumber": o.tracking_number, "carrier": o.carrier},
                success_message="Tracking information assigned successfully",
                failure_message="Failed to assign tracking",
            )
        )

    def action_export(self) -> None:
        orders = self.controller.visible
        if not orders:
            self.notify("There are no orders matching your selection.", severity="warning")
            return

        path = os.path.abspath(f"orders-{date.today().isoformat()}.csv")
        try:
            with open(path, "w", newline="") as f:
                f.write(orders_to_csv(orders))
        except OSError as e:
            _logger.warning(f"Export failed: {e}")
            self.notify(f"Export failed: {e}", severity="error")
            return
        self.notify(f"{len(orders)} orders exported to {path}")
