"""SQLite database connection and initialization using aiosqlite."""

import asyncio
import logging
from contextlib import asynccontextmanager
from contextvars import ContextVar
from typing import Any, AsyncIterator, List, Optional

import aiosqlite

logger = logging.getLogger(__name__)


SCHEMA = """
CREATE TABLE IF NOT EXISTS users (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    role TEXT NOT NULL CHECK(role IN ('buyer', 'developer', 'creator', 'admin')),
    full_name TEXT,
    email TEXT UNIQUE,
    phone TEXT,
    tier INTEGER CHECK(tier IS NULL OR (tier >= 1 AND tier <= 4)),
    tier_updated_at TEXT,
    created_at TEXT NOT NULL,
    updated_at TEXT NOT NULL
);

CREATE TABLE IF NOT EXISTS social_accounts (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    user_id INTEGER NOT NULL,
    platform TEXT NOT NULL,
    handle TEXT NOT NULL,
    created_at TEXT NOT NULL,
    FOREIGN KEY (user_id) REFERENCES users(id) ON DELETE CASCADE,
    UNIQUE(user_id, platform)
);

CREATE TABLE IF NOT EXISTS creator_tier_history (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    creator_id INTEGER NOT NULL,
    tier INTEGER NOT NULL CHECK(tier >= 0 AND tier <= 4),
    commission_percent TEXT NOT NULL,
    analytics_data TEXT NOT NULL DEFAULT '[]',
    created_at TEXT NOT NULL,
    FOREIGN KEY (creator_id) REFERENCES users(id) ON DELETE CASCADE
);

CREATE TABLE IF NOT EXISTS properties (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    developer_id INTEGER NOT NULL,
    title TEXT NOT NULL,
    listing_type TEXT NOT NULL DEFAULT 'sale' CHECK(listing_type IN ('sale', 'rent', 'short_let')),
    asking_price INTEGER NOT NULL DEFAULT 0,
    status TEXT NOT NULL DEFAULT 'available' CHECK(status IN ('available', 'sold', 'rented')),
    created_at TEXT NOT NULL,
    updated_at TEXT NOT NULL,
    FOREIGN KEY (developer_id) REFERENCES users(id)
);

CREATE TABLE IF NOT EXISTS leads (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    property_id INTEGER NOT NULL,
    buyer_id INTEGER NOT NULL,
    creator_id INTEGER,
    tracking_code TEXT,
    created_at TEXT NOT NULL,
    FOREIGN KEY (property_id) REFERENCES properties(id) ON DELETE CASCADE,
    FOREIGN KEY (buyer_id) REFERENCES users(id),
    FOREIGN KEY (creator_id) REFERENCES users(id)
);

CREATE TABLE IF NOT EXISTS escrow_transactions (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    property_id INTEGER NOT NULL,
    buyer_id INTEGER NOT NULL,
    developer_id INTEGER NOT NULL,
    creator_id INTEGER,
    amount INTEGER NOT NULL CHECK(amount > 0),
    developer_amount INTEGER NOT NULL,
    creator_amount INTEGER NOT NULL DEFAULT 0,
    reach_amount INTEGER NOT NULL DEFAULT 0,
    creator_tier INTEGER NOT NULL DEFAULT 0,
    creator_commission_percent TEXT NOT NULL DEFAULT '0',
    status TEXT NOT NULL DEFAULT 'held' CHECK(status IN ('held', 'released', 'refunded')),
    payment_reference TEXT NOT NULL UNIQUE,
    held_at TEXT NOT NULL,
    released_at TEXT,
    refunded_at TEXT,
    CHECK(developer_amount + creator_amount + reach_amount = amount),
    FOREIGN KEY (property_id) REFERENCES properties(id),
    FOREIGN KEY (buyer_id) REFERENCES users(id),
    FOREIGN KEY (developer_id) REFERENCES users(id),
    UNIQUE(property_id, buyer_id)
);

CREATE TABLE IF NOT EXISTS handovers (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    property_id INTEGER NOT NULL,
    escrow_id INTEGER NOT NULL UNIQUE,
    buyer_id INTEGER NOT NULL,
    developer_id INTEGER NOT NULL,
    creator_id INTEGER,
    type TEXT NOT NULL CHECK(type IN ('sale', 'long_term_rental', 'short_term_rental')),
    status TEXT NOT NULL DEFAULT 'payment_confirmed',
    documents TEXT NOT NULL DEFAULT '[]',
    payment_confirmed_at TEXT,
    documents_submitted_at TEXT,
    documents_verified_at TEXT,
    keys_released_at TEXT,
    reach_signed_at TEXT,
    buyer_signed_at TEXT,
    keys_delivered_at TEXT,
    developer_confirmed_at TEXT,
    buyer_confirmed_at TEXT,
    completed_at TEXT,
    created_at TEXT NOT NULL,
    updated_at TEXT NOT NULL,
    FOREIGN KEY (property_id) REFERENCES properties(id),
    FOREIGN KEY (escrow_id) REFERENCES escrow_transactions(id),
    UNIQUE(property_id, buyer_id)
);

CREATE TABLE IF NOT EXISTS handover_signatures (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    handover_id INTEGER NOT NULL,
    signer_id INTEGER NOT NULL,
    role TEXT NOT NULL CHECK(role IN ('reach', 'buyer')),
    signature TEXT NOT NULL,
    signed_at TEXT NOT NULL,
    FOREIGN KEY (handover_id) REFERENCES handovers(id) ON DELETE CASCADE,
    UNIQUE(handover_id, role)
);

CREATE TABLE IF NOT EXISTS contracts_of_sale (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    property_id INTEGER NOT NULL UNIQUE,
    developer_id INTEGER NOT NULL,
    terms TEXT NOT NULL,
    status TEXT NOT NULL DEFAULT 'pending_developer_signature'
        CHECK(status IN ('pending_developer_signature', 'signed_by_developer', 'executed')),
    developer_signature TEXT,
    developer_signed_at TEXT,
    developer_ip_address TEXT,
    reach_signature TEXT,
    reach_signed_at TEXT,
    reach_admin_id INTEGER,
    created_at TEXT NOT NULL,
    updated_at TEXT NOT NULL,
    FOREIGN KEY (property_id) REFERENCES properties(id),
    FOREIGN KEY (developer_id) REFERENCES users(id),
    FOREIGN KEY (reach_admin_id) REFERENCES users(id)
);

CREATE TABLE IF NOT EXISTS wallets (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    user_id INTEGER NOT NULL UNIQUE,
    user_type TEXT NOT NULL CHECK(user_type IN ('buyer', 'developer', 'creator', 'admin')),
    available_balance INTEGER NOT NULL DEFAULT 0 CHECK(available_balance >= 0),
    locked_balance INTEGER NOT NULL DEFAULT 0 CHECK(locked_balance >= 0),
    is_active INTEGER NOT NULL DEFAULT 1,
    created_at TEXT NOT NULL,
    updated_at TEXT NOT NULL,
    FOREIGN KEY (user_id) REFERENCES users(id) ON DELETE CASCADE
);

CREATE TABLE IF NOT EXISTS wallet_activity (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    wallet_id INTEGER NOT NULL,
    user_id INTEGER NOT NULL,
    action TEXT NOT NULL,
    balance_type TEXT NOT NULL CHECK(balance_type IN ('available', 'locked')),
    amount INTEGER NOT NULL,
    previous_balance INTEGER NOT NULL,
    new_balance INTEGER NOT NULL,
    reference TEXT,
    description TEXT,
    created_at TEXT NOT NULL,
    FOREIGN KEY (wallet_id) REFERENCES wallets(id) ON DELETE CASCADE
);

CREATE TABLE IF NOT EXISTS bank_accounts (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    wallet_id INTEGER NOT NULL,
    bank_name TEXT NOT NULL,
    account_number TEXT NOT NULL,
    account_name TEXT NOT NULL,
    bank_code TEXT NOT NULL,
    is_primary INTEGER NOT NULL DEFAULT 0,
    is_verified INTEGER NOT NULL DEFAULT 0,
    created_at TEXT NOT NULL,
    FOREIGN KEY (wallet_id) REFERENCES wallets(id) ON DELETE CASCADE,
    UNIQUE(wallet_id, account_number)
);

CREATE TABLE IF NOT EXISTS withdrawals (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    user_id INTEGER NOT NULL,
    wallet_id INTEGER NOT NULL,
    bank_account_id INTEGER NOT NULL,
    amount INTEGER NOT NULL CHECK(amount > 0),
    reference TEXT NOT NULL UNIQUE,
    status TEXT NOT NULL DEFAULT 'pending' CHECK(status IN ('pending', 'completed', 'rejected')),
    reason TEXT,
    reviewed_by INTEGER,
    created_at TEXT NOT NULL,
    processed_at TEXT,
    FOREIGN KEY (wallet_id) REFERENCES wallets(id),
    FOREIGN KEY (bank_account_id) REFERENCES bank_accounts(id)
);

CREATE TABLE IF NOT EXISTS notifications (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    user_id INTEGER NOT NULL,
    kind TEXT NOT NULL,
    title TEXT NOT NULL,
    message TEXT NOT NULL,
    data TEXT NOT NULL DEFAULT '{}',
    is_read INTEGER NOT NULL DEFAULT 0,
    created_at TEXT NOT NULL,
    FOREIGN KEY (user_id) REFERENCES users(id) ON DELETE CASCADE
);

CREATE INDEX IF NOT EXISTS idx_users_role ON users(role);
CREATE INDEX IF NOT EXISTS idx_social_accounts_user_id ON social_accounts(user_id);
CREATE INDEX IF NOT EXISTS idx_tier_history_creator ON creator_tier_history(creator_id);
CREATE INDEX IF NOT EXISTS idx_leads_property_buyer ON leads(property_id, buyer_id);
CREATE INDEX IF NOT EXISTS idx_escrow_status ON escrow_transactions(status);
CREATE INDEX IF NOT EXISTS idx_handovers_status ON handovers(status);
CREATE INDEX IF NOT EXISTS idx_wallet_activity_wallet ON wallet_activity(wallet_id);
CREATE INDEX IF NOT EXISTS idx_withdrawals_user_status ON withdrawals(user_id, status);
CREATE INDEX IF NOT EXISTS idx_notifications_user ON notifications(user_id, is_read);
"""


class Database:
    """Async SQLite database manager.

    A single connection is shared. Standalone statements and whole
    transactions are serialized with a lock; statements issued from
    inside ``transaction()`` run on that transaction.
    """

    def __init__(self, database_path: str):
        self.database_path = database_path
        self._connection: Optional[aiosqlite.Connection] = None
        self._lock = asyncio.Lock()
        self._in_transaction: ContextVar[bool] = ContextVar(
            f"reach_db_tx_{id(self)}", default=False
        )

    async def get_connection(self) -> aiosqlite.Connection:
        """Get the shared connection."""
        if self._connection is None:
            raise RuntimeError("Database not initialized. Call initialize() first.")
        return self._connection

    async def initialize(self) -> None:
        """Open the connection and create tables."""
        # Autocommit mode: transactions are opened explicitly
        self._connection = await aiosqlite.connect(self.database_path, isolation_level=None)
        self._connection.row_factory = aiosqlite.Row
        await self._connection.execute("PRAGMA foreign_keys = ON")
        if self.database_path != ":memory:":
            await self._connection.execute("PRAGMA journal_mode = WAL")
        logger.info("Database connection opened")

        await self._connection.executescript(SCHEMA)
        logger.info("Database tables initialized")

    async def close(self) -> None:
        """Close the connection."""
        if self._connection:
            await self._connection.close()
            self._connection = None

    @property
    def in_transaction(self) -> bool:
        return self._in_transaction.get()

    @asynccontextmanager
    async def _serialized(self) -> AsyncIterator[None]:
        if self._in_transaction.get():
            yield
        else:
            async with self._lock:
                yield

    @asynccontextmanager
    async def transaction(self) -> AsyncIterator["Database"]:
        """
        Run a block atomically (BEGIN IMMEDIATE ... COMMIT).

        Rolls back on any exception. Nested calls join the outer transaction.
        """
        if self._in_transaction.get():
            yield self
            return

        conn = await self.get_connection()
        async with self._lock:
            token = self._in_transaction.set(True)
            try:
                await conn.execute("BEGIN IMMEDIATE")
                try:
                    yield self
                except BaseException:
                    await conn.execute("ROLLBACK")
                    raise
                await conn.execute("COMMIT")
            finally:
                self._in_transaction.reset(token)

    async def execute(self, query: str, *args) -> aiosqlite.Cursor:
        """Execute a statement and return its cursor (rowcount, lastrowid)."""
        conn = await self.get_connection()
        async with self._serialized():
            return await conn.execute(query, args)

    async def fetch(self, query: str, *args) -> List[aiosqlite.Row]:
        """Execute a query and fetch all rows."""
        conn = await self.get_connection()
        async with self._serialized():
            async with conn.execute(query, args) as cursor:
                return list(await cursor.fetchall())

    async def fetchrow(self, query: str, *args) -> Optional[aiosqlite.Row]:
        """Execute a query and fetch a single row."""
        conn = await self.get_connection()
        async with self._serialized():
            async with conn.execute(query, args) as cursor:
                return await cursor.fetchone()

    async def fetchval(self, query: str, *args) -> Any:
        """Execute a query and fetch a single value."""
        row = await self.fetchrow(query, *args)
        if row is None:
            return None
        return row[0]
