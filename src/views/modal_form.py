from __future__ import annotations

from typing import Any, Awaitable, Callable, Dict, Optional, Sequence

from textual import on, work
from textual.app import ComposeResult
from textual.binding import Binding
from textual.containers import Horizontal, Vertical, VerticalScroll
from textual.screen import ModalScreen
from textual.widgets import Button, Input, Label, Select, Switch

from api.client import ApiError, ValidationError
from utils.forms import (
    FormField,
    FormValueError,
    coerce_values,
    initial_values,
    missing_required,
)
from utils.logger import get_logger

_logger = get_logger(__name__)

Submit = Callable[[Dict[str, Any]], Awaitable[Any]]


class EntityFormModal(ModalScreen[bool]):
    """
    Create / edit dialog for a single entity.

    Fields are filled from ``entity`` (edit) or ``defaults`` (create). On save
    only required fields are checked, then ``submit`` is awaited with the json
    payload. Dismisses True on success so the caller refetches; on failure the
    dialog stays open with an error toast.
    """

    BINDINGS = [Binding("escape", "cancel", "Cancel", show=True)]

    def __init__(
        self,
        title: str,
        fields: Sequence[FormField],
        submit: Submit,
        entity: Optional[Dict[str, Any]] = None,
        defaults: Optional[Dict[str, Any]] = None,
        success_message: str = "Saved successfully.",
        failure_message: str = "Failed to save",
    ) -> None:
        super().__init__()
        self.form_title = title
        self.fields = list(fields)
        self._submit = submit
        self._values = initial_values(self.fields, entity, defaults or {})
        self.success_message = success_message
        self.failure_message = failure_message
        self.saving = False

    def compose(self) -> ComposeResult:
        with Vertical(id="div-form"):
            yield Label(self.form_title, id="label-form-title")
            with VerticalScroll(id="vertscroll-fields"):
                for f in self.fields:
                    caption = f"{f.label} *" if f.required else f.label
                    yield Label(caption, classes="form-label")
                    yield self._widget_for(f)
            with Horizontal(id="hort-form-btns"):
                yield Button("Cancel", id="btn-cancel")
                yield Button("Save", id="btn-submit", variant="primary")

    def _widget_for(self, f: FormField):
        widget_id = f"field-{f.name}"
        value = self._values.get(f.name)
        if f.kind == "bool":
            return Switch(value=bool(value), id=widget_id)
        if f.kind == "select":
            return Select(
                [(label, val) for label, val in f.options],
                value=value if value in [v for _, v in f.options] else Select.BLANK,
                allow_blank=not f.required,
                id=widget_id,
            )
        input_type = {"number": "number", "integer": "integer"}.get(f.kind, "text")
        return Input(
            value="" if value is None else str(value),
            placeholder=f.placeholder or ("YYYY-MM-DD" if f.kind == "date" else ""),
            password=f.kind == "password",
            type=input_type,
            id=widget_id,
        )

    def on_mount(self) -> None:
        if self.fields:
            self.query_one(f"#field-{self.fields[0].name}").focus()

    def raw_values(self) -> Dict[str, Any]:
        """Current widget values keyed by field name."""
        raw: Dict[str, Any] = {}
        for f in self.fields:
            widget = self.query_one(f"#field-{f.name}")
            if isinstance(widget, Select):
                raw[f.name] = None if widget.value == Select.BLANK else widget.value
            else:
                raw[f.name] = widget.value
        return raw

    def _mark_invalid(self, f: FormField, message: str) -> None:
        widget = self.query_one(f"#field-{f.name}")
        widget.add_class("-invalid")
        widget.focus()
        self.notify(message, severity="error")

    async def before_submit(self, values: Dict[str, Any]) -> Dict[str, Any]:
        """Hook for dialogs that need extra work (uploads) before saving."""
        return values

    @on(Button.Pressed, "#btn-submit")
    @work(exclusive=True)
    async def handle_submit(self) -> None:
        if self.saving:
            return
        # marks from the previous attempt, fields are checked again below
        for f in self.fields:
            self.query_one(f"#field-{f.name}").remove_class("-invalid")
        raw = self.raw_values()

        missing = missing_required(self.fields, raw)
        if missing:
            self._mark_invalid(missing[0], f"{missing[0].label} is required.")
            return
        try:
            values = coerce_values(self.fields, raw)
        except FormValueError as e:
            self._mark_invalid(e.field, str(e))
            return

        self.saving = True
        self.query_one("#btn-submit", Button).disabled = True
        try:
            values = await self.before_submit(values)
            await self._submit(values)
        except (ApiError, ValidationError) as e:
            message = e.message if isinstance(e, ApiError) else str(e)
            _logger.warning(f"{self.failure_message}: {message}")
            self.notify(f"{self.failure_message}: {message}", severity="error")
            return
        finally:
            self.saving = False
            self.query_one("#btn-submit", Button).disabled = False

        self.notify(self.success_message)
        self.dismiss(True)

    @on(Button.Pressed, "#btn-cancel")
    def handle_cancel(self) -> None:
        self.dismiss(False)

    def action_cancel(self) -> None:
        self.dismiss(False)
