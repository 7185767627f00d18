from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

import api.crud as crud
import store.session as session_store
from api.client import ApiClient, ApiError
from api.models import User
from utils.logger import get_logger
from utils.pure import format_price

_logger = get_logger(__name__)


@dataclass
class GlobalState:
    """
    Centralized application state shared by screens.

    Fields:
      - client: api context every crud call goes through, holds the token
      - user: logged-in admin profile, None before login
      - currency: "USD" | "AED", synced from backend settings
    """

    client: ApiClient = field(default_factory=ApiClient)
    user: Optional[User] = None
    currency: str = "USD"

    @property
    def logged_in(self) -> bool:
        return self.user is not None and self.client.token is not None

    async def restore_session(self) -> bool:
        """Pick up token/profile saved by a previous run. True if found."""
        saved = await session_store.load_session()
        if not saved:
            return False
        token, user = saved
        self.client.token = token
        self.user = user
        self.currency = await session_store.load_currency() or self.currency
        _logger.info(f"Restored session for {user.email}")
        return True

    async def login(self, email: str, password: str) -> User:
        """Log in against the backend and persist the session. Raises ApiError."""
        token, user = await crud.login(self.client, email, password)
        self.client.token = token
        self.user = user
        await session_store.save_session(token, user)
        await self.sync_currency()
        return user

    async def sync_currency(self) -> str:
        """Take the currency from backend settings, keep the local one on failure."""
        try:
            settings = await crud.get_settings(self.client)
        except ApiError as e:
            _logger.warning(f"Failed to sync currency with admin settings: {e.message}")
            return self.currency
        await self.set_currency(settings.currency)
        return self.currency

    async def set_currency(self, currency: str) -> None:
        self.currency = currency
        await session_store.save_currency(currency)

    async def logout(self) -> None:
        """
        Drop token and profile, both in memory and in the session store.
        This is called upon logging out and on session expiry
        """
        self.client.token = None
        self.user = None
        await session_store.clear_session()

    def format_price(self, amount: float) -> str:
        return format_price(amount, self.currency)
