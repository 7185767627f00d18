from textual import on, work
from textual.app import ComposeResult
from textual.containers import Horizontal, Vertical
from textual.events import Key
from textual.widgets import Button, Input, Label

from api.client import ApiError
from utils.logger import get_logger
from utils.messages import UserLoginMessage
from views.base_screen import BaseScreen
from views.modal_dialog import QuitDialogModal

_logger = get_logger(__name__)


class LoginScreen(BaseScreen):
    """
    Admin sign in. Dismissed once the backend accepts the credentials and the
    session has been stored.
    """

    def __init__(self):
        super().__init__()
        self.configure(header_sub_title="Login", show_sidebar=False)

    def compose(self) -> ComposeResult:
        yield from super().compose()
        with Vertical(id="div-login"):
            yield Label("Admin Login", id="label-login-title")
            yield Label("Email")
            yield Input(placeholder="admin@example.com", id="input-login-email")
            yield Label("Password")
            yield Input(placeholder="*********", password=True, id="input-login-pwd")
            with Horizontal(id="div-login-btns"):
                yield Button("Quit", id="btn-quit")
                yield Button("Login", id="btn-login", variant="primary")

    def on_mount(self):
        self.query_one("#input-login-email").focus()

    def on_key(self, event: Key) -> None:
        if event.key == "enter" and self.focused == self.query_one("#input-login-pwd"):
            self.handle_login_submit()

    @on(Button.Pressed, "#btn-login")
    @work(exclusive=True)
    async def handle_login_submit(self) -> None:
        email = self.query_one("#input-login-email", Input).value.strip()
        pwd_input = self.query_one("#input-login-pwd", Input)
        pwd = pwd_input.value

        if not email or not pwd:
            self.notify("Email or password cannot be empty!", severity="error")
            return

        login_btn = self.query_one("#btn-login", Button)
        login_btn.disabled = True
        try:
            user = await self.app.state.login(email, pwd)
        except ApiError as e:
            _logger.info(f"Login failed for {email}: {e.message}")
            self.notify(e.message or "Invalid email or password", severity="error")
            pwd_input.value = ""
            pwd_input.focus()
            pwd_input.add_class("-invalid")
            return
        finally:
            login_btn.disabled = False

        self.notify(f"Welcome back, {user.name or user.email}!")
        self.app.post_message(UserLoginMessage())
        self.dismiss()

    @on(Button.Pressed, "#btn-quit")
    def handle_quit_(self) -> None:
        self.app.push_screen(QuitDialogModal())
