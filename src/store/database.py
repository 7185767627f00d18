# manages the local sqlite file holding persisted client state
import asyncio
import os.path
from contextlib import asynccontextmanager
from sqlite3 import Row

import aiosqlite

from utils.config import SESSION_DB_PATH
from utils.logger import get_logger

_logger = get_logger(__name__)

DB_PATH = SESSION_DB_PATH

_SCHEMA = """
CREATE TABLE IF NOT EXISTS kv (
    key        TEXT PRIMARY KEY,
    value      TEXT NOT NULL,
    updated_at TEXT NOT NULL DEFAULT (datetime('now'))
);
"""

_initialized = False
_init_lock = asyncio.Lock()


@asynccontextmanager
async def connect() -> aiosqlite.Connection:
    """Async context manager yielding an aiosqlite connection to the session db.

    Creates the parent directory and the key/value table on first use.
    """
    global _initialized
    parent = os.path.dirname(DB_PATH)
    if parent:
        os.makedirs(parent, exist_ok=True)

    conn = await aiosqlite.connect(DB_PATH)
    conn.row_factory = Row

    if not _initialized:
        async with _init_lock:
            if not _initialized:
                _logger.info(f"Preparing session store at {DB_PATH}...")
                await conn.executescript(_SCHEMA)
                await conn.commit()
                _initialized = True
    try:
        yield conn
    finally:
        await conn.close()
