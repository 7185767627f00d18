from textual import on, work
from textual.app import ComposeResult
from textual.binding import Binding
from textual.containers import Vertical
from textual.events import ScreenResume
from textual.widgets import LoadingIndicator, MarkdownViewer

import api.crud as crud
from api.client import ApiError
from api.models import DashboardStats
from utils.pure import format_date, generate_markdown_table
from views.base_screen import BaseScreen


class DashboardScreen(BaseScreen):
    """
    Store overview: totals, revenue of the month and the latest orders.
    """

    BINDINGS = [Binding("ctrl+r", "reload", "Refresh", show=True)]

    def compose(self) -> ComposeResult:
        yield from super().compose()
        with Vertical():
            yield LoadingIndicator(id="loading-stats")
            yield MarkdownViewer(id="md-stats", show_table_of_contents=False)

    def action_reload(self) -> None:
        self.handle_reload()

    @on(ScreenResume)
    @work(exclusive=True)
    async def handle_reload(self) -> None:
        self.query_one("#loading-stats").display = True
        try:
            stats = await crud.get_dashboard_stats(self.app.state.client)
        except ApiError as e:
            self.notify(f"Failed to fetch dashboard stats: {e.message}", severity="error")
            return
        finally:
            self.query_one("#loading-stats").display = False

        await self.query_one("#md-stats", MarkdownViewer).document.update(
            self.render_stats(stats)
        )

    def render_stats(self, stats: DashboardStats) -> str:
        fmt = self.app.state.format_price

        overview = generate_markdown_table(
            ["Metric", "Value"],
            [
                ["Total Products", stats.total_products],
                ["Total Orders", stats.total_orders],
                ["Total Customers", stats.total_customers],
                ["Units in Stock", stats.total_stock],
                ["Revenue this Month", fmt(stats.monthly_revenue)],
                ["Low Stock Products", stats.low_stock_count],
            ],
            ["l", "r"],
        )

        if stats.recent_orders:
            recent = generate_markdown_table(
                ["Order", "Customer", "Total", "Status", "Date"],
                [
                    [
                        o.order_number,
                        o.customer_name or "-",
                        fmt(o.total),
                        o.status,
                        format_date(o.created_at),
                    ]
                    for o in stats.recent_orders
                ],
                ["l", "l", "r", "c", "l"],
            )
        else:
            recent = "_No orders yet._"

        md = "### Overview\n\n" + overview + "\n\n### Recent Orders\n\n" + recent + "\n"
        if stats.low_stock_count:
            md += f"\n> {stats.low_stock_count} product(s) are running low on stock.\n"
        return md
