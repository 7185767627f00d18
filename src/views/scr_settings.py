from __future__ import annotations

import dataclasses
from typing import Dict, Optional

from textual import on, work
from textual.app import ComposeResult
from textual.binding import Binding
from textual.containers import Horizontal, VerticalScroll
from textual.events import ScreenResume
from textual.widgets import Button, Input, Label, LoadingIndicator, Select

import api.crud as crud
from api.client import ApiError, ValidationError
from api.models import SETTINGS_IMAGE_FIELDS, SETTINGS_VIDEO_FIELD, Settings
from utils.config import (
    CURRENCIES,
    MAX_SETTINGS_IMAGE_BYTES,
    MAX_SETTINGS_VIDEO_BYTES,
)
from utils.logger import get_logger
from views.base_screen import BaseScreen

_logger = get_logger(__name__)

IMAGE_LABELS = {
    "homepageImage1": "Homepage Hero (image or video)",
    "homepageImage2": "Homepage Image 2",
    "homepageImage3": "Homepage Image 3",
    "salesImage1": "Sales Banner 1",
    "salesImage2": "Sales Banner 2",
}


class SettingsScreen(BaseScreen):
    """
    Store settings: name, display currency and the homepage / sales images.

    Images are uploaded as soon as a file is picked; nothing reaches the
    backend settings until Save is pressed.
    """

    BINDINGS = [
        Binding("ctrl+s", "save", "Save", show=True),
        Binding("ctrl+r", "reload", "Reload", show=True),
    ]

    def __init__(self) -> None:
        super().__init__()
        self.settings: Optional[Settings] = None
        self.images: Dict[str, str] = {}
        self.homepage_image1_type: Optional[str] = None

    def compose(self) -> ComposeResult:
        yield from super().compose()
        yield LoadingIndicator(id="loading-settings")
        with VerticalScroll(id="div-settings"):
            yield Label("Store Name", classes="form-label")
            yield Input(id="input-store-name", placeholder="My Store")
            yield Label("Currency", classes="form-label")
            yield Select(
                [(c, c) for c in CURRENCIES],
                value=CURRENCIES[0],
                allow_blank=False,
                id="select-currency",
            )
            for key in SETTINGS_IMAGE_FIELDS:
                yield Label(IMAGE_LABELS.get(key, key), classes="form-label")
                yield Label("-", id=f"label-current-{key}", classes="current-image")
                with Horizontal(classes="hort-upload"):
                    yield Input(
                        id=f"input-path-{key}",
                        placeholder="/path/to/file to upload",
                    )
                    yield Button("Upload", name=key, classes="btn-upload")
                    yield Button("Remove", name=key, classes="btn-remove", variant="error")
            with Horizontal(id="hort-settings-btns"):
                yield Button("Save Settings", id="btn-save", variant="primary")

    @property
    def client(self):
        return self.app.state.client

    # ---------- loading ----------

    @on(ScreenResume)
    def handle_resume(self) -> None:
        self.handle_load()

    def action_reload(self) -> None:
        self.handle_load()

    @work(exclusive=True, group="load")
    async def handle_load(self) -> None:
        self.query_one("#loading-settings").display = True
        try:
            settings = await crud.get_settings(self.client)
        except ApiError as e:
            _logger.warning(f"Failed to load settings: {e.message}")
            self.notify(f"Failed to load settings: {e.message}", severity="error")
            return
        finally:
            self.query_one("#loading-settings").display = False

        self.settings = settings
        self.images = dict(settings.images)
        self.homepage_image1_type = settings.homepage_image1_type
        self.query_one("#input-store-name", Input).value = settings.store_name
        if settings.currency in CURRENCIES:
            self.query_one("#select-currency", Select).value = settings.currency
        self.render_images()

    def render_images(self) -> None:
        for key in SETTINGS_IMAGE_FIELDS:
            url = self.images.get(key)
            if url and key == SETTINGS_VIDEO_FIELD and self.homepage_image1_type == "video":
                url = f"{url} (video)"
            self.query_one(f"#label-current-{key}", Label).update(url or "-")

    # ---------- images ----------

    @on(Button.Pressed, ".btn-upload")
    @work(exclusive=True, group="upload")
    async def handle_upload(self, event: Button.Pressed) -> None:
        key = event.button.name
        path_input = self.query_one(f"#input-path-{key}", Input)
        path = path_input.value.strip()
        if not path:
            self.notify("Enter the path of the file to upload.", severity="warning")
            path_input.focus()
            return

        is_video_field = key == SETTINGS_VIDEO_FIELD
        max_bytes = MAX_SETTINGS_VIDEO_BYTES if is_video_field else MAX_SETTINGS_IMAGE_BYTES

        event.button.disabled = True
        self.notify("Uploading...")
        try:
            result = await crud.upload_file(
                self.client, path, max_bytes, allow_video=is_video_field
            )
        except (ApiError, ValidationError) as e:
            message = e.message if isinstance(e, ApiError) else str(e)
            _logger.warning(f"Upload for {key} failed: {message}")
            self.notify(f"Failed to upload: {message}", severity="error")
            return
        finally:
            event.button.disabled = False

        self.images[key] = result.url
        if is_video_field:
            self.homepage_image1_type = result.file_type
        path_input.value = ""
        self.render_images()
        kind = "Video" if result.file_type == "video" else "Image"
        self.notify(f"{kind} uploaded. Save settings to apply.")

    @on(Button.Pressed, ".btn-remove")
    def handle_remove(self, event: Button.Pressed) -> None:
        key = event.button.name
        self.images.pop(key, None)
        if key == SETTINGS_VIDEO_FIELD:
            self.homepage_image1_type = None
        self.render_images()

    # ---------- save ----------

    def collect(self) -> Settings:
        """Settings as currently shown on screen."""
        currency = self.query_one("#select-currency", Select).value
        return dataclasses.replace(
            self.settings or Settings(),
            store_name=self.query_one("#input-store-name", Input).value.strip(),
            currency=currency if currency in CURRENCIES else CURRENCIES[0],
            images=dict(self.images),
            homepage_image1_type=self.homepage_image1_type,
        )

    def action_save(self) -> None:
        self.handle_save()

    @on(Button.Pressed, "#btn-save")
    @work(exclusive=True, group="save")
    async def handle_save(self) -> None:
        save_btn = self.query_one("#btn-save", Button)
        save_btn.disabled = True
        try:
            saved = await crud.update_settings(self.client, self.collect().to_json())
        except ApiError as e:
            _logger.warning(f"Failed to save settings: {e.message}")
            self.notify(f"Failed to save settings: {e.message}", severity="error")
            return
        finally:
            save_btn.disabled = False

        self.settings = saved
        await self.app.state.set_currency(saved.currency)
        _logger.info(f"Settings saved, currency {saved.currency}")
        self.notify("Settings saved successfully")
