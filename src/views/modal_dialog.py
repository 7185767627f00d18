from typing import Dict, Literal, Tuple, override

from textual.app import ComposeResult
from textual.binding import Binding
from textual.containers import Container, Horizontal
from textual.screen import ModalScreen
from textual.widgets import Button, Label

from utils.messages import QuitRequestedMessage

Tone = Literal["default", "positive", "warning", "error"]


class DialogModal(ModalScreen[bool]):
    """
    Yes/no confirmation, dismisses with True for the primary button.
    Escape counts as the secondary answer.
    """

    BINDINGS = [Binding("escape", "cancel", "Cancel", show=False)]

    # tone -> (primary variant, secondary variant)
    VARIANT_MAP: Dict[
        str, Tuple[Literal["primary", "default", "success", "warning", "error"], ...]
    ] = {
        "default": ("primary", "default"),
        "positive": ("success", "default"),
        "warning": ("warning", "default"),
        "error": ("error", "primary"),
    }

    def __init__(
        self,
        caption: str,
        primary_text: str = "OK",
        secondary_text: str = "",
        tone: Tone = "default",
        detail: str = "",
    ):
        super().__init__()
        self.caption = caption
        self.detail = detail
        self.primary_text = primary_text
        self.secondary_text = secondary_text
        self.tone = tone

    def compose(self) -> ComposeResult:
        primary_variant, secondary_variant = self.VARIANT_MAP[self.tone]
        with Container(id="div-dialog"):
            yield Label(self.caption, id="caption")
            if self.detail:
                yield Label(self.detail, id="label-detail")
            with Horizontal(id="dialog"):
                if self.secondary_text:
                    yield Button(
                        self.secondary_text, variant=secondary_variant, id="btn-secondary"
                    )
                yield Button(self.primary_text, variant=primary_variant, id="btn-primary")

    def on_mount(self):
        # destructive prompts start on the safe button
        if self.secondary_text and self.tone in ("error", "warning"):
            self.query_one("#btn-secondary").focus()
        else:
            self.query_one("#btn-primary").focus()

    def on_button_pressed(self, event: Button.Pressed) -> None:
        self.dismiss(event.button.id == "btn-primary")

    def action_cancel(self) -> None:
        self.dismiss(False)


class ConfirmDeleteModal(DialogModal):
    def __init__(self, what: str):
        super().__init__(
            f"Are you sure you want to delete {what}?",
            "Delete",
            "Cancel",
            "error",
            detail="This action cannot be undone.",
        )


class ConfirmBanModal(DialogModal):
    def __init__(self, who: str):
        super().__init__(
            f"Are you sure you want to ban {who}?",
            "Ban",
            "Cancel",
            "error",
            detail="Banned customers cannot sign in or place orders until unbanned.",
        )


class LogoutDialogModal(DialogModal):
    def __init__(self):
        super().__init__("Are you sure you want to log out?", "Yes", "No", "warning")


class QuitDialogModal(DialogModal):
    def __init__(self):
        super().__init__("Are you sure you want to quit?", "Yes", "No", "error")

    @override
    def on_button_pressed(self, event: Button.Pressed) -> None:
        if event.button.id == "btn-primary":
            self.post_message(QuitRequestedMessage())
        super().on_button_pressed(event)
