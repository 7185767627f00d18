from textual import on, work
from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.widgets import LoadingIndicator

from utils.config import APP_TITLE
from utils.logger import get_logger
from utils.messages import (
    ModeSwitchedMessage,
    QuitRequestedMessage,
    SessionExpiredMessage,
    UserLogoutMessage,
)
from utils.state import GlobalState
from views.scr_categories import CategoriesScreen
from views.scr_coupons import CouponsScreen
from views.scr_customers import CustomersScreen
from views.scr_dashboard import DashboardScreen
from views.scr_images import CarouselImagesScreen
from views.scr_login import LoginScreen
from views.scr_orders import OrdersScreen
from views.scr_products import ProductsScreen
from views.scr_reviews import ReviewsScreen
from views.scr_settings import SettingsScreen
from views.scr_sub_categories import SubCategoriesScreen
from views.scr_users import UsersScreen

_logger = get_logger(__name__)


class ShopAdminApp(App):
    TITLE = APP_TITLE

    BINDINGS = [
        Binding("ctrl+t", "switch_light", "Toggle Theme", show=True),
    ]

    MODES = {
        "dashboard": DashboardScreen,
        "products": ProductsScreen,
        "categories": CategoriesScreen,
        "orders": OrdersScreen,
        "customers": CustomersScreen,
        "reviews": ReviewsScreen,
        "coupons": CouponsScreen,
        "images": CarouselImagesScreen,
        "sub_categories": SubCategoriesScreen,
        "users": UsersScreen,
        "settings": SettingsScreen,
    }

    # sidebar menu, in display order
    ADMIN_MODES = {
        "dashboard": "Dashboard",
        "products": "Products",
        "categories": "Categories",
        "orders": "Orders",
        "customers": "Customers",
        "reviews": "Reviews",
        "coupons": "Coupons",
        "images": "Carousel Images",
        "sub_categories": "Sub-Categories",
        "users": "Users",
        "settings": "Settings",
    }

    CSS_PATH = [
        "views/styles/index.tcss",
        "views/styles/login.tcss",
        "views/styles/resource.tcss",
        "views/styles/settings.tcss",
    ]

    state: GlobalState

    def __init__(self):
        super().__init__()
        self.state = GlobalState()
        self.state.client.on_unauthorized = self.handle_unauthorized

    def compose(self) -> ComposeResult:
        yield LoadingIndicator()

    async def on_mount(self) -> None:
        self.main_flow()

    def action_switch_light(self):
        if self.theme == "textual-dark":
            self.theme = "solarized-light"
        else:
            self.theme = "textual-dark"
        self.notify(f"Theme changed to {self.theme}")

    def handle_unauthorized(self) -> None:
        # called from inside a request, the message is handled once it returns
        self.post_message(SessionExpiredMessage())

    @on(UserLogoutMessage)
    @work
    async def handle_user_logout(self):
        await self.state.logout()
        self.notify("Logout successful.")
        self.main_flow()

    @on(SessionExpiredMessage)
    @work
    async def handle_session_expired(self):
        if self.state.user is None:
            return
        _logger.info("Session expired, asking for login again")
        await self.state.logout()
        self.notify("Your session has expired. Please log in again.", severity="warning")
        self.main_flow()

    @on(ModeSwitchedMessage)
    def handle_mode_switched(self, message: ModeSwitchedMessage) -> None:
        _logger.debug(f"Mode {message.old_mode} -> {message.new_mode}")

    @on(QuitRequestedMessage)
    @work
    async def handle_quit(self):
        await self.state.client.aclose()
        self.exit()

    @work(exclusive=True, group="main")
    async def main_flow(self):
        if not await self.state.restore_session():
            await self.push_screen_wait(LoginScreen())
        self.post_message(ModeSwitchedMessage(self.current_mode, "dashboard"))
        await self.switch_mode("dashboard")


def main() -> None:
    app = ShopAdminApp()
    app.run()


if __name__ == "__main__":
    main()
