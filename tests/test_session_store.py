import os
import sys
import tempfile
import unittest

import httpx

# Ensure project src/ is on sys.path for imports
ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), os.pardir))
src_path = os.path.join(ROOT, "src")
if src_path not in sys.path:
    sys.path.insert(0, src_path)

from api.client import ApiClient, ApiError  # noqa: E402
from api.models import User  # noqa: E402
from store import database as db_database  # noqa: E402
from store import session  # noqa: E402
from utils.state import GlobalState  # noqa: E402


class SessionStoreTestCase(unittest.IsolatedAsyncioTestCase):
    def setUp(self):
        # Point the DB to a temporary file and force re-initialization
        self.temp_dir = tempfile.TemporaryDirectory()
        self.db_path = os.path.join(self.temp_dir.name, "nested", "session.sqlite")
        db_database.DB_PATH = self.db_path
        db_database._initialized = False

    def tearDown(self):
        self.temp_dir.cleanup()

    async def test_table_created_on_first_connect(self):
        async with db_database.connect() as conn:
            cur = await conn.execute(
                "SELECT name FROM sqlite_master WHERE type='table';"
            )
            names = [row[0] for row in await cur.fetchall()]
            await cur.close()
        self.assertIn("kv", names)
        self.assertTrue(os.path.exists(self.db_path))

    async def test_set_value_overwrites(self):
        self.assertIsNone(await session.get_value("k"))
        await session.set_value("k", "one")
        await session.set_value("k", "two")
        self.assertEqual(await session.get_value("k"), "two")

    async def test_session_roundtrip_and_clear(self):
        user = User(id="u1", name="Ada", email="ada@shop.test", role="admin")
        self.assertIsNone(await session.load_session())

        await session.save_session("tok", user)
        await session.save_currency("AED")
        self.assertEqual(await session.load_session(), ("tok", user))

        await session.clear_session()
        self.assertIsNone(await session.load_session())
        # the currency preference outlives the session
        self.assertEqual(await session.load_currency(), "AED")

    async def test_corrupt_profile_is_ignored(self):
        await session.set_value(session.TOKEN_KEY, "tok")
        await session.set_value(session.USER_KEY, "{not json")
        self.assertIsNone(await session.load_session())


class GlobalStateTestCase(unittest.IsolatedAsyncioTestCase):
    def setUp(self):
        self.temp_dir = tempfile.TemporaryDirectory()
        db_database.DB_PATH = os.path.join(self.temp_dir.name, "session.sqlite")
        db_database._initialized = False

        self.settings_status = 200
        self.client = ApiClient(
            base_url="http://shop.test/api", transport=httpx.MockTransport(self.handler)
        )
        self.state = GlobalState(client=self.client)

    async def asyncTearDown(self):
        await self.client.aclose()

    def tearDown(self):
        self.temp_dir.cleanup()

    def handler(self, request: httpx.Request) -> httpx.Response:
        path = request.url.path
        if path == "/api/auth/login":
            body = request.content.decode()
            if "secret" not in body:
                return httpx.Response(401, json={"message": "Invalid email or password"})
            return httpx.Response(
                200,
                json={
                    "token": "jwt",
                    "user": {"_id": "u1", "name": "Ada", "email": "ada@shop.test", "role": "admin"},
                },
            )
        if path == "/api/settings":
            return httpx.Response(self.settings_status, json={"currency": "AED"})
        return httpx.Response(404)

    async def test_login_persists_session_and_currency(self):
        user = await self.state.login("ada@shop.test", "secret")
        self.assertEqual(user.name, "Ada")
        self.assertTrue(self.state.logged_in)
        self.assertEqual(self.client.token, "jwt")
        self.assertEqual(self.state.currency, "AED")
        self.assertEqual(self.state.format_price(10), "AED 10.00")

        # a fresh state picks the session up again
        restored = GlobalState(client=ApiClient(base_url="http://shop.test/api"))
        self.assertTrue(await restored.restore_session())
        self.assertEqual(restored.client.token, "jwt")
        self.assertEqual(restored.currency, "AED")
        await restored.client.aclose()

    async def test_bad_credentials(self):
        with self.assertRaises(ApiError) as ctx:
            await self.state.login("ada@shop.test", "wrong")
        self.assertEqual(ctx.exception.message, "Invalid email or password")
        self.assertFalse(self.state.logged_in)
        self.assertIsNone(await session.load_session())

    async def test_currency_kept_when_settings_fail(self):
        self.settings_status = 500
        await self.state.login("ada@shop.test", "secret")
        self.assertEqual(self.state.currency, "USD")

    async def test_logout_clears_everything(self):
        await self.state.login("ada@shop.test", "secret")
        await self.state.logout()
        self.assertFalse(self.state.logged_in)
        self.assertIsNone(self.client.token)
        self.assertFalse(await GlobalState(client=self.client).restore_session())


if __name__ == "__main__":
    unittest.main()
