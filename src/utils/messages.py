from textual.message import Message


class QuitRequestedMessage(Message):
    """
    broadcasted when the app is about to quit
    """

    bubble = True


class UserLogoutMessage(Message):
    """
    broadcasted when the admin logs out
    """

    bubble = True


class UserLoginMessage(Message):
    """
    Fired when admin logged in, so the sidebar can refresh
    """

    bubble = True


class SessionExpiredMessage(Message):
    """
    Fired by the api client hook on a 401 while a token was held.
    Handled at App level: session is dropped and login is shown again.
    """

    bubble = True


class ModeSwitchedMessage(Message):
    """
    fired whenever switch_mode is called
    must be fired from app level
    """

    bubble = True

    def __init__(self, old_mode: str, new_mode: str) -> None:
        super().__init__()
        self.old_mode = old_mode
        self.new_mode = new_mode
