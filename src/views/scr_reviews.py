from __future__ import annotations

from typing import List, Optional

from textual import work
from textual.binding import Binding

import api.crud as crud
from api.models import REVIEW_STATUSES, Review
from utils.forms import FormField
from views.modal_form import EntityFormModal
from views.scr_resource_list import ResourceListScreen

RESPONSE_FIELDS = [
    FormField("adminResponse", "Response", required=True,
              placeholder="Write a public reply to this review"),
]


class ReviewsScreen(ResourceListScreen):
    """
    Product reviews: moderate (approve / reject) and reply.
    """

    BINDINGS = [
        Binding("a", "set_status('approved')", "Approve", show=True),
        Binding("r", "set_status('rejected')", "Reject", show=True),
    ]

    LABEL = "reviews"
    COLUMNS = ("Product", "Customer", "Rating", "Comment", "Status", "Replied")
    SEARCH_FIELDS = ("product_title", "customer_name", "comment")
    SEARCH_PLACEHOLDER = "Search by product, customer or comment..."
    STATUS_FILTER = [(s.capitalize(), s) for s in REVIEW_STATUSES]

    async def fetch_items(self) -> List[Review]:
        return await crud.get_reviews(self.client)

    def row_for(self, r: Review):
        comment = r.comment if len(r.comment) <= 40 else r.comment[:37] + "..."
        return (
            r.product_title or "-",
            r.customer_name or "-",
            "★" * r.rating,
            comment,
            r.status,
            "yes" if r.admin_response else "no",
        )

    def detail_rows(self, r: Review):
        return [
            ["Product", r.product_title or "-"],
            ["Customer", r.customer_name or "-"],
            ["Rating", f"{r.rating}/5"],
            ["Status", r.status],
            ["Comment", r.comment or "-"],
            ["Response", r.admin_response or "-"],
        ]

    def detail_title(self, r: Review) -> str:
        return f"Review of {r.product_title or 'product'}"

    def build_form(self, r: Optional[Review]) -> Optional[EntityFormModal]:
        # reviews are written by customers, the admin only replies
        if r is None:
            return None
        return EntityFormModal(
            "Respond to Review",
            RESPONSE_FIELDS,
            lambda data: crud.respond_to_review(self.client, r.id, data["adminResponse"]),
            entity={"adminResponse": r.admin_response},
            success_message="Response submitted successfully",
            failure_message="Failed to submit response",
        )

    @work(exclusive=True, group="mutation")
    async def action_set_status(self, status: str) -> None:
        r = self.selected_item()
        if r is None:
            self.notify("Select a review first.", severity="warning")
            return
        if r.status == status:
            self.notify(f"Review already {status}.", severity="warning")
            return
        await self.run_mutation(
            crud.set_review_status(self.client, r.id, status),
            f"Review {status} successfully",
            "Failed to update review status",
        )
