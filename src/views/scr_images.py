from __future__ import annotations

from typing import Any, Dict, List, Optional

from textual import work
from textual.binding import Binding

import api.crud as crud
from api.client import ApiClient
from api.models import CarouselImage
from utils.config import MAX_CAROUSEL_IMAGE_BYTES
from utils.forms import FormField
from utils.pure import move_item
from views.modal_form import EntityFormModal
from views.scr_resource_list import ResourceListScreen

IMAGE_FIELDS = [
    FormField("title", "Title"),
    FormField("imageUrl", "Image URL", placeholder="https://... (or pick a file below)"),
    FormField("file", "Upload from file", placeholder="/path/to/image.jpg, max 5MB"),
    FormField("order", "Display Order", kind="integer"),
    FormField("isActive", "Active", kind="bool"),
]


class CarouselImageFormModal(EntityFormModal):
    """
    Image dialog: a local file, when given, is uploaded first and its url
    replaces the Image URL field.
    """

    def __init__(self, client: ApiClient, *args, **kwargs) -> None:
        super().__init__(*args, **kwargs)
        self.client = client

    async def before_submit(self, values: Dict[str, Any]) -> Dict[str, Any]:
        path = values.pop("file", None)
        if path:
            self.notify("Uploading image...")
            result = await crud.upload_file(self.client, path, MAX_CAROUSEL_IMAGE_BYTES)
            values["imageUrl"] = result.url
            self.query_one("#field-imageUrl").value = result.url
            self.query_one("#field-file").value = ""
        if not values.get("imageUrl"):
            raise crud.ValidationError("Please provide an image URL or upload an image")
        return values


class CarouselImagesScreen(ResourceListScreen):
    """
    Homepage carousel. Rows are shown in display order; moving a row persists
    the order of every image.
    """

    BINDINGS = [
        Binding("left_square_bracket", "move(-1)", "Move Up", show=True),
        Binding("right_square_bracket", "move(1)", "Move Down", show=True),
        Binding("t", "toggle_status", "Show/Hide", show=True),
    ]

    LABEL = "images"
    COLUMNS = ("#", "Title", "Image URL", "Status")
    SEARCH_FIELDS = ("title", "image_url")
    SEARCH_PLACEHOLDER = "Search images by title or url..."

    async def fetch_items(self) -> List[CarouselImage]:
        return await crud.get_carousel_images(self.client)

    def row_for(self, img: CarouselImage):
        return (img.order, img.title or "-", img.image_url, "Visible" if img.is_active else "Hidden")

    def detail_title(self, img: CarouselImage) -> str:
        return img.title or "Carousel image"

    def describe(self, img: CarouselImage) -> str:
        return f'image "{img.title}"' if img.title else "this image"

    def build_form(self, img: Optional[CarouselImage]) -> EntityFormModal:
        if img is None:
            return CarouselImageFormModal(
                self.client,
                "Add Carousel Image",
                IMAGE_FIELDS,
                lambda data: crud.create_carousel_image(self.client, data),
                defaults={"order": len(self.controller.items), "isActive": True},
                success_message="Image added successfully",
                failure_message="Failed to add image",
            )
        return CarouselImageFormModal(
            self.client,
            "Edit Carousel Image",
            IMAGE_FIELDS,
            lambda data: crud.update_carousel_image(self.client, img.id, data),
            entity=img.to_json(),
            success_message="Image updated successfully",
            failure_message="Failed to update image",
        )

    async def delete_item(self, img: CarouselImage) -> None:
        await crud.delete_carousel_image(self.client, img.id)

    @work(exclusive=True, group="mutation")
    async def action_toggle_status(self) -> None:
        img = self.selected_item()
        if img is None:
            self.notify("Select an image first.", severity="warning")
            return
        await self.run_mutation(
            crud.toggle_carousel_image_status(self.client, img.id),
            "Image status updated successfully",
            "Failed to update image status",
        )

    @work(exclusive=True, group="mutation")
    async def action_move(self, offset: int) -> None:
        img = self.selected_item()
        if img is None:
            self.notify("Select an image first.", severity="warning")
            return
        if self.controller.query:
            self.notify("Clear the search before reordering.", severity="warning")
            return

        images = self.controller.items
        reordered = move_item(images, images.index(img), offset)
        if reordered is None:
            return

        # partial sequences are resynced with the backend, see PartialReorderError
        await self.run_mutation(
            crud.reorder_carousel_images(self.client, reordered),
            "Image order updated successfully",
            "Failed to update image order",
            refresh_on_error=True,
        )
