from __future__ import annotations

from typing import Any, List, Optional, Sequence, Tuple

from textual import on, work
from textual.app import ComposeResult
from textual.binding import Binding
from textual.containers import Horizontal, Vertical
from textual.events import ScreenResume
from textual.widgets import DataTable, Input, Label, LoadingIndicator, Markdown, Select
from textual.widgets.data_table import CellDoesNotExist

from api.client import ApiClient
from utils.pure import SearchField, generate_markdown_table
from utils.resource_list import ResourceListController
from views.base_screen import BaseScreen
from views.modal_dialog import ConfirmDeleteModal
from views.modal_form import EntityFormModal


class ResourceListScreen(BaseScreen):
    """
    Search box + table + detail pane over one backend collection.

    Subclasses provide the fetch call, columns, row rendering and, when the
    resource supports them, the form / delete hooks. Data is refetched each
    time the screen is shown and after every successful mutation.
    """

    BINDINGS = [
        Binding("ctrl+r", "refresh", "Refresh", show=True),
        Binding("n", "create", "New", show=True),
        Binding("e", "edit", "Edit", show=True),
        Binding("delete", "delete", "Delete", show=True),
    ]

    LABEL = "items"
    COLUMNS: Sequence[str] = ()
    SEARCH_FIELDS: Sequence[SearchField] = ()
    SEARCH_PLACEHOLDER = "Type to search..."
    # (label, value) choices of the optional status filter, "all" is prepended
    STATUS_FILTER: Sequence[Tuple[str, str]] = ()

    def __init__(self) -> None:
        super().__init__()
        self.controller: ResourceListController = ResourceListController(
            fetch=self.fetch_items,
            search_fields=self.SEARCH_FIELDS,
            notify=self._toast,
            label=self.LABEL,
        )

    # ---------- hooks ----------

    @property
    def client(self) -> ApiClient:
        return self.app.state.client

    async def fetch_items(self) -> List[Any]:
        raise NotImplementedError

    def row_for(self, item: Any) -> Sequence[Any]:
        raise NotImplementedError

    def detail_rows(self, item: Any) -> List[List[Any]]:
        return [[col, val] for col, val in zip(self.COLUMNS, self.row_for(item))]

    def detail_title(self, item: Any) -> str:
        return self.LABEL.capitalize()

    def build_form(self, item: Optional[Any]) -> Optional[EntityFormModal]:
        """Dialog for creating (item is None) or editing, None if unsupported."""
        return None

    async def delete_item(self, item: Any) -> None:
        raise NotImplementedError

    def describe(self, item: Any) -> str:
        return f"this {self.LABEL.rstrip('s')}"

    # ---------- layout ----------

    def compose(self) -> ComposeResult:
        yield from super().compose()
        with Vertical(id="div-resource"):
            with Horizontal(id="hort-search"):
                yield Input(id="input-search", placeholder=self.SEARCH_PLACEHOLDER)
                if self.STATUS_FILTER:
                    yield Select(
                        [("All", "all"), *self.STATUS_FILTER],
                        value="all",
                        allow_blank=False,
                        id="select-status",
                    )
            yield LoadingIndicator(id="loading-items")
            yield DataTable(id="table-items")
            yield Label("", id="label-count")
            yield Markdown("", id="md-detail")

    def on_mount(self) -> None:
        table = self.query_one(DataTable)
        table.cursor_type = "row"
        table.zebra_stripes = True
        table.add_columns(*self.COLUMNS)

    def _toast(self, message: str, severity: str) -> None:
        self.notify(message, severity=severity)

    # ---------- refresh cycle ----------

    @on(ScreenResume)
    def handle_resume(self) -> None:
        self.handle_refresh()

    def action_refresh(self) -> None:
        self.handle_refresh()

    @work(exclusive=True, group="refresh")
    async def handle_refresh(self) -> None:
        self.query_one("#loading-items").display = True
        await self.controller.refresh()
        self.query_one("#loading-items").display = False
        self.render_table()

    def render_table(self) -> None:
        table = self.query_one(DataTable)
        selected = self.selected_item()
        table.clear()
        visible = self.controller.visible
        for item in visible:
            table.add_row(*[str(v) for v in self.row_for(item)], key=item.id)

        self.query_one("#label-count", Label).update(
            f"{len(visible)} of {len(self.controller.items)} {self.LABEL}"
        )
        # keep the cursor on the same entity across refetches
        if selected is not None:
            for idx, item in enumerate(visible):
                if item.id == selected.id:
                    table.move_cursor(row=idx)
                    break
        self.render_detail()

    def render_detail(self) -> None:
        item = self.selected_item()
        md = self.query_one("#md-detail", Markdown)
        if item is None:
            md.update("")
            return
        table_md = generate_markdown_table(
            ["Field", "Value"], self.detail_rows(item), ["l", "l"]
        )
        md.update(f"### {self.detail_title(item)}\n\n{table_md}")

    def selected_item(self) -> Optional[Any]:
        table = self.query_one(DataTable)
        if table.row_count == 0:
            return None
        try:
            row_key, _ = table.coordinate_to_cell_key(table.cursor_coordinate)
        except CellDoesNotExist:
            return None
        return self.controller.find(row_key.value)

    @on(DataTable.RowHighlighted)
    def handle_row_highlight(self) -> None:
        self.render_detail()

    @on(Input.Changed, "#input-search")
    def handle_search(self, message: Input.Changed) -> None:
        self.controller.set_query(message.value)
        self.render_table()

    @on(Select.Changed, "#select-status")
    def handle_status_filter(self, message: Select.Changed) -> None:
        status = message.value
        if status in (None, "all", Select.BLANK):
            self.controller.set_filter(None)
        else:
            self.controller.set_filter(lambda item: getattr(item, "status", None) == status)
        self.render_table()

    # ---------- mutations ----------

    async def open_form(self, form: Optional[EntityFormModal]) -> None:
        if form is None:
            self.notify(f"{self.LABEL.capitalize()} cannot be edited here.", severity="warning")
            return
        if await self.app.push_screen_wait(form):
            self.handle_refresh()

    @work()
    async def action_create(self) -> None:
        await self.open_form(self.build_form(None))

    @work()
    async def action_edit(self) -> None:
        item = self.selected_item()
        if item is None:
            self.notify("Select a row first.", severity="warning")
            return
        await self.open_form(self.build_form(item))

    @work()
    async def action_delete(self) -> None:
        item = self.selected_item()
        if item is None:
            self.notify("Select a row first.", severity="warning")
            return
        if type(self).delete_item is ResourceListScreen.delete_item:
            self.notify(f"{self.LABEL.capitalize()} cannot be deleted.", severity="warning")
            return
        if not await self.app.push_screen_wait(ConfirmDeleteModal(self.describe(item))):
            return
        await self.run_mutation(
            self.delete_item(item),
            f"Deleted {self.describe(item)}.",
            f"Failed to delete {self.describe(item)}",
        )

    async def run_mutation(
        self,
        action,
        success_message: str,
        failure_message: str,
        refresh_on_error: bool = False,
    ) -> bool:
        """Await an inline action (ban, approve, toggle...) and re-render."""
        ok = await self.controller.mutate(
            action, success_message, failure_message, refresh_on_error
        )
        self.render_table()
        return ok
