# persisted client state: auth token, admin profile, preferred currency
from __future__ import annotations

import json
from typing import Optional, Tuple

from api.models import User
from store.database import connect

TOKEN_KEY = "authToken"
USER_KEY = "userData"
CURRENCY_KEY = "admin_currency"


async def get_value(key: str) -> Optional[str]:
    async with connect() as conn:
        cur = await conn.execute("SELECT value FROM kv WHERE key = ?;", (key,))
        row = await cur.fetchone()
        await cur.close()
    return row[0] if row else None


async def set_value(key: str, value: str) -> None:
    async with connect() as conn:
        await conn.execute(
            """
            INSERT INTO kv(key, value, updated_at) VALUES (?, ?, datetime('now'))
            ON CONFLICT(key) DO UPDATE SET value = excluded.value,
                                           updated_at = excluded.updated_at;
            """,
            (key, value),
        )
        await conn.commit()


async def delete_values(*keys: str) -> None:
    async with connect() as conn:
        await conn.executemany("DELETE FROM kv WHERE key = ?;", [(k,) for k in keys])
        await conn.commit()


async def save_session(token: str, user: User) -> None:
    await set_value(TOKEN_KEY, token)
    await set_value(USER_KEY, json.dumps(user.to_json()))


async def load_session() -> Optional[Tuple[str, User]]:
    """Return (token, user) saved by the last login, or None."""
    token = await get_value(TOKEN_KEY)
    user_json = await get_value(USER_KEY)
    if not token or not user_json:
        return None
    try:
        user = User.from_json(json.loads(user_json))
    except (ValueError, TypeError):
        return None
    return token, user


async def clear_session() -> None:
    """Forget token and profile, called on logout or expiry."""
    await delete_values(TOKEN_KEY, USER_KEY)


async def save_currency(currency: str) -> None:
    await set_value(CURRENCY_KEY, currency)


async def load_currency() -> Optional[str]:
    return await get_value(CURRENCY_KEY)
