"""
Database manager for the bot, handling all interactions with the SQLite database.
"""
import logging
from datetime import datetime, timezone

import aiosqlite

logger = logging.getLogger(__name__)


class DatabaseManager:
    """
    Manages the player balance store: users, their economy row and daily claims.
    """
    def __init__(self, db_path):
        self.db_path = db_path
        self.conn: aiosqlite.Connection | None = None
        self.log = logging.getLogger(__name__)

    async def initialize(self):
        """Initializes the database connection and creates tables if they don't exist."""
        if self.conn:
            return
        try:
            self.conn = await aiosqlite.connect(self.db_path)
            self.conn.row_factory = aiosqlite.Row

            await self._create_users_table()
            await self._create_economy_table()
            await self._create_daily_claims_table()

            self.log.info("Database initialized successfully.")
        except aiosqlite.Error as e:
            self.log.critical("Failed to initialize database: %s", e)
            # If the DB fails to init, the bot cannot hold balances.
            raise e

    async def _create_users_table(self):
        """Create the users table."""
        await self.conn.execute("""
            CREATE TABLE IF NOT EXISTS users (
                user_id INTEGER PRIMARY KEY,
                username TEXT NOT NULL,
                created_at TIMESTAMP NOT NULL,
                last_seen TIMESTAMP NOT NULL
            )
        """)
        await self.conn.commit()

    async def _create_economy_table(self):
        """Create the economy table."""
        await self.conn.execute("""
            CREATE TABLE IF NOT EXISTS economy (
                user_id INTEGER PRIMARY KEY,
                balance REAL NOT NULL DEFAULT 0,
                total_earned REAL NOT NULL DEFAULT 0,
                total_spent REAL NOT NULL DEFAULT 0,
                FOREIGN KEY (user_id) REFERENCES users (user_id) ON DELETE CASCADE
            )
        """)
        await self.conn.commit()

    async def _create_daily_claims_table(self):
        """Create the daily_claims table."""
        await self.conn.execute("""
            CREATE TABLE IF NOT EXISTS daily_claims (
                user_id INTEGER PRIMARY KEY,
                last_claim_date DATE NOT NULL,
                streak INTEGER NOT NULL DEFAULT 0,
                FOREIGN KEY (user_id) REFERENCES users (user_id) ON DELETE CASCADE
            )
        """)
        await self.conn.commit()

    async def close(self):
        """Close the database connection."""
        if self.conn:
            await self.conn.close()
            self.conn = None
            logger.info("Database connection closed.")

    async def add_or_update_user(self, user):
        """Add a new user or update an existing one."""
        query = """
            INSERT INTO users (user_id, username, created_at, last_seen)
            VALUES (?, ?, ?, ?)
            ON CONFLICT(user_id) DO UPDATE SET
                username = excluded.username,
                last_seen = excluded.last_seen
        """
        now = datetime.now(timezone.utc)
        created_at = getattr(user, "created_at", None) or now
        params = (user.id, user.name, created_at.isoformat(), now.isoformat())

        try:
            async with self.conn.cursor() as cursor:
                await cursor.execute(query, params)
                # Also ensure the user has an economy entry
                await cursor.execute("INSERT OR IGNORE INTO economy (user_id) VALUES (?)", (user.id,))
            await self.conn.commit()
            return True
        except aiosqlite.Error as e:
            logger.error("Error adding/updating user %d: %s", user.id, e)
            return False

    async def user_exists(self, user_id: int) -> bool:
        """Checks whether a user has an economy row."""
        try:
            async with self.conn.cursor() as cursor:
                await cursor.execute("SELECT 1 FROM economy WHERE user_id = ?", (user_id,))
                return await cursor.fetchone() is not None
        except aiosqlite.Error as e:
            logger.error("Error checking user %d: %s", user_id, e)
            return False

    async def get_user_balance(self, user_id: int) -> float:
        """Get the balance of a user."""
        try:
            async with self.conn.cursor() as cursor:
                await cursor.execute("SELECT balance FROM economy WHERE user_id = ?", (user_id,))
                result = await cursor.fetchone()
                return result[0] if result else 0.0
        except aiosqlite.Error as e:
            logger.error("Error getting balance for user %d: %s", user_id, e)
            return 0.0

    async def update_balance(self, user_id: int, amount: float) -> bool:
        """
        Updates a user's balance and tracks total earned/spent.
        A positive amount is considered earned, negative is spent.
        Refuses (returns False) when a debit would overdraw the balance.
        """
        if not await self.user_exists(user_id):
            logger.warning("Attempted to update balance for non-existent user %d", user_id)
            return False

        try:
            if amount > 0:
                # User earned money
                query = """
                    UPDATE economy SET balance = balance + ?, total_earned = total_earned + ?
                    WHERE user_id = ?
                """
                cursor = await self.conn.execute(query, (amount, amount, user_id))
            else:
                # User spent money, amount is negative
                query = """
                    UPDATE economy SET balance = balance + ?, total_spent = total_spent + ?
                    WHERE user_id = ? AND balance + ? >= 0
                """
                cursor = await self.conn.execute(query, (amount, abs(amount), user_id, amount))

            await self.conn.commit()
            if cursor.rowcount == 0:
                logger.warning("Refused to overdraw balance for user %d by %s", user_id, amount)
                return False
            return True
        except aiosqlite.Error as e:
            logger.error("Failed to update balance for user %d: %s", user_id, e)
            return False

    async def get_daily_claim_info(self, user_id: int):
        """Get daily claim info for a user."""
        try:
            async with self.conn.cursor() as cursor:
                await cursor.execute("SELECT last_claim_date, streak FROM daily_claims WHERE user_id = ?", (user_id,))
                return await cursor.fetchone()
        except aiosqlite.Error as e:
            logger.error(
                "Error getting daily claim info for user %d: %s", user_id, e
            )
            return None

    async def update_daily_claim(self, user_id: int, claim_date, new_streak: int):
        """Updates or creates a daily claim entry for a user."""
        query = """
            INSERT INTO daily_claims (user_id, last_claim_date, streak) VALUES (?, ?, ?)
            ON CONFLICT(user_id) DO UPDATE SET
                last_claim_date = excluded.last_claim_date,
                streak = excluded.streak
        """
        try:
            await self.conn.execute(query, (user_id, claim_date, new_streak))
            await self.conn.commit()
        except aiosqlite.Error as e:
            logger.error("Error updating daily claim for user %d: %s", user_id, e)
