"""SQLite data store for the trade journal.

Every row is scoped to an owner identity supplied by the caller.
"""

import json
import logging
import sqlite3
from pathlib import Path
from typing import Optional

from tradejournal.models import (
    PerformanceGoals,
    TradeChecklist,
    TradeDirection,
    TradeEntry,
    TradeImage,
    UserProfile,
)

logger = logging.getLogger(__name__)

TRADE_COLUMNS = (
    "id, owner, date, direction, asset, entry_price, exit_price, position_size, "
    "stop_loss, take_profit, risk_percentage, risk_reward_ratio, profit_loss, "
    "notes, tags, before_trade_image, after_trade_image, checklist, sequence"
)

# A replaced trade keeps its sequence; a new one gets the next value
INSERT_TRADE = (
    f"INSERT OR REPLACE INTO trades ({TRADE_COLUMNS}) "
    "VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, "
    "COALESCE((SELECT sequence FROM trades WHERE id = ?), "
    "(SELECT COALESCE(MAX(sequence), 0) + 1 FROM trades)))"
)


def _image_to_json(image: Optional[TradeImage]) -> Optional[str]:
    return image.model_dump_json() if image else None


def _image_from_json(value: Optional[str]) -> Optional[TradeImage]:
    return TradeImage.model_validate_json(value) if value else None


class JournalStore:
    """SQLite-based store for trades, profiles and tags."""

    REQUIRED_TABLES = [
        "trades",
        "profiles",
        "tags",
    ]

    def __init__(self, db_path: Path):
        """Initialize the store.

        Args:
            db_path: Path to the SQLite database file.
        """
        self.db_path = db_path
        self._ensure_db_dir()
        self._init_schema()

    def _ensure_db_dir(self) -> None:
        """Ensure the database directory exists."""
        self.db_path.parent.mkdir(parents=True, exist_ok=True)

    def _get_connection(self) -> sqlite3.Connection:
        """Get a database connection."""
        conn = sqlite3.connect(self.db_path)
        conn.row_factory = sqlite3.Row
        return conn

    def _init_schema(self) -> None:
        """Initialize database schema on first run."""
        conn = self._get_connection()
        try:
            cursor = conn.cursor()

            cursor.execute("""
                CREATE TABLE IF NOT EXISTS trades (
                    id TEXT PRIMARY KEY,
                    owner TEXT NOT NULL,
                    date INTEGER NOT NULL,
                    direction TEXT NOT NULL,
                    asset TEXT NOT NULL,
                    entry_price REAL NOT NULL,
                    exit_price REAL NOT NULL,
                    position_size REAL NOT NULL,
                    stop_loss REAL NOT NULL,
                    take_profit REAL NOT NULL,
                    risk_percentage REAL NOT NULL,
                    risk_reward_ratio REAL NOT NULL,
                    profit_loss REAL NOT NULL,
                    notes TEXT NOT NULL DEFAULT '',
                    tags TEXT NOT NULL DEFAULT '[]',
                    before_trade_image TEXT,
                    after_trade_image TEXT,
                    checklist TEXT NOT NULL,
                    sequence INTEGER NOT NULL
                )
            """)
            cursor.execute(
                "CREATE INDEX IF NOT EXISTS idx_trades_owner_date ON trades (owner, date)"
            )

            cursor.execute("""
                CREATE TABLE IF NOT EXISTS profiles (
                    owner TEXT PRIMARY KEY,
                    name TEXT NOT NULL,
                    account_balance REAL NOT NULL,
                    currency TEXT NOT NULL,
                    monthly_profit_goal REAL NOT NULL DEFAULT 0,
                    weekly_profit_target REAL NOT NULL DEFAULT 0,
                    max_drawdown_limit REAL NOT NULL DEFAULT 0
                )
            """)

            cursor.execute("""
                CREATE TABLE IF NOT EXISTS tags (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    owner TEXT NOT NULL,
                    name TEXT NOT NULL,
                    UNIQUE(owner, name)
                )
            """)

            conn.commit()
            logger.debug("Schema ready at %s", self.db_path)
        finally:
            conn.close()

    def get_tables(self) -> list[str]:
        """Get list of all tables in the database."""
        conn = self._get_connection()
        try:
            cursor = conn.cursor()
            cursor.execute(
                "SELECT name FROM sqlite_master WHERE type='table' AND name NOT LIKE 'sqlite_%'"
            )
            return [row["name"] for row in cursor.fetchall()]
        finally:
            conn.close()

    # ==================== Trades ====================

    @staticmethod
    def _trade_params(owner: str, trade: TradeEntry) -> tuple:
        return (
            trade.id,
            owner,
            trade.date,
            trade.direction.value,
            trade.asset,
            trade.entry_price,
            trade.exit_price,
            trade.position_size,
            trade.stop_loss,
            trade.take_profit,
            trade.risk_percentage,
            trade.risk_reward_ratio,
            trade.profit_loss,
            trade.notes,
            json.dumps(list(trade.tags)),
            _image_to_json(trade.before_trade_image),
            _image_to_json(trade.after_trade_image),
            trade.checklist.model_dump_json(),
            trade.id,
        )

    @staticmethod
    def _row_to_trade(row: sqlite3.Row) -> TradeEntry:
        return TradeEntry(
            id=row["id"],
            date=row["date"],
            direction=TradeDirection(row["direction"]),
            asset=row["asset"],
            entry_price=row["entry_price"],
            exit_price=row["exit_price"],
            position_size=row["position_size"],
            stop_loss=row["stop_loss"],
            take_profit=row["take_profit"],
            risk_percentage=row["risk_percentage"],
            risk_reward_ratio=row["risk_reward_ratio"],
            profit_loss=row["profit_loss"],
            notes=row["notes"],
            tags=json.loads(row["tags"]),
            before_trade_image=_image_from_json(row["before_trade_image"]),
            after_trade_image=_image_from_json(row["after_trade_image"]),
            checklist=TradeChecklist.model_validate_json(row["checklist"]),
            sequence=row["sequence"],
        )

    def save_trade(self, owner: str, trade: TradeEntry) -> None:
        """Insert or replace a trade.

        The stored sequence is assigned on first insert and kept on
        replace; the sequence field of trade is ignored.

        Args:
            owner: Caller identity.
            trade: Trade to save.
        """
        conn = self._get_connection()
        try:
            cursor = conn.cursor()
            cursor.execute(INSERT_TRADE, self._trade_params(owner, trade))
            conn.commit()
            logger.info("Saved trade %s for %s", trade.id, owner)
        finally:
            conn.close()

    def save_trades(self, owner: str, trades: list[TradeEntry]) -> None:
        """Insert or replace several trades in one transaction."""
        conn = self._get_connection()
        try:
            cursor = conn.cursor()
            cursor.executemany(
                INSERT_TRADE, [self._trade_params(owner, trade) for trade in trades]
            )
            conn.commit()
            logger.info("Saved %d trades for %s", len(trades), owner)
        finally:
            conn.close()

    def get_trade(self, owner: str, trade_id: str) -> Optional[TradeEntry]:
        """Get a trade by ID.

        Returns:
            TradeEntry if found for this owner, None otherwise.
        """
        conn = self._get_connection()
        try:
            cursor = conn.cursor()
            cursor.execute(
                f"SELECT {TRADE_COLUMNS} FROM trades WHERE owner = ? AND id = ?",
                (owner, trade_id),
            )
            row = cursor.fetchone()
            if row:
                return self._row_to_trade(row)
            return None
        finally:
            conn.close()

    def get_trades(self, owner: str) -> list[TradeEntry]:
        """Get every trade of an owner, oldest first."""
        conn = self._get_connection()
        try:
            cursor = conn.cursor()
            cursor.execute(
                f"SELECT {TRADE_COLUMNS} FROM trades WHERE owner = ? ORDER BY date, sequence",
                (owner,),
            )
            return [self._row_to_trade(row) for row in cursor.fetchall()]
        finally:
            conn.close()

    def get_trades_page(self, owner: str, page: int, page_size: int) -> list[TradeEntry]:
        """Get one page of trades, newest first.

        Args:
            owner: Caller identity.
            page: Zero-based page number.
            page_size: Trades per page.
        """
        if page < 0 or page_size <= 0:
            return []
        conn = self._get_connection()
        try:
            cursor = conn.cursor()
            cursor.execute(
                f"SELECT {TRADE_COLUMNS} FROM trades WHERE owner = ? "
                "ORDER BY date DESC, sequence DESC LIMIT ? OFFSET ?",
                (owner, page_size, page * page_size),
            )
            return [self._row_to_trade(row) for row in cursor.fetchall()]
        finally:
            conn.close()

    def delete_trade(self, owner: str, trade_id: str) -> bool:
        """Delete a trade.

        Returns:
            True if a trade was deleted.
        """
        conn = self._get_connection()
        try:
            cursor = conn.cursor()
            cursor.execute(
                "DELETE FROM trades WHERE owner = ? AND id = ?", (owner, trade_id)
            )
            conn.commit()
            deleted = cursor.rowcount > 0
            if deleted:
                logger.info("Deleted trade %s for %s", trade_id, owner)
            return deleted
        finally:
            conn.close()

    # ==================== Profiles ====================

    def save_profile(self, owner: str, profile: UserProfile) -> None:
        goals = profile.performance_goals
        conn = self._get_connection()
        try:
            cursor = conn.cursor()
            cursor.execute(
                """
                INSERT OR REPLACE INTO profiles
                (owner, name, account_balance, currency,
                 monthly_profit_goal, weekly_profit_target, max_drawdown_limit)
                VALUES (?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    owner,
                    profile.name,
                    profile.account_balance,
                    profile.currency,
                    goals.monthly_profit_goal,
                    goals.weekly_profit_target,
                    goals.max_drawdown_limit,
                ),
            )
            conn.commit()
            logger.info("Saved profile for %s", owner)
        finally:
            conn.close()

    def get_profile(self, owner: str) -> Optional[UserProfile]:
        conn = self._get_connection()
        try:
            cursor = conn.cursor()
            cursor.execute("SELECT * FROM profiles WHERE owner = ?", (owner,))
            row = cursor.fetchone()
            if row:
                return UserProfile(
                    name=row["name"],
                    account_balance=row["account_balance"],
                    currency=row["currency"],
                    performance_goals=PerformanceGoals(
                        monthly_profit_goal=row["monthly_profit_goal"],
                        weekly_profit_target=row["weekly_profit_target"],
                        max_drawdown_limit=row["max_drawdown_limit"],
                    ),
                )
            return None
        finally:
            conn.close()

    # ==================== Tags ====================

    def add_tag(self, owner: str, name: str) -> None:
        conn = self._get_connection()
        try:
            cursor = conn.cursor()
            cursor.execute(
                "INSERT OR IGNORE INTO tags (owner, name) VALUES (?, ?)", (owner, name)
            )
            conn.commit()
        finally:
            conn.close()

    def get_tags(self, owner: str) -> list[str]:
        conn = self._get_connection()
        try:
            cursor = conn.cursor()
            cursor.execute("SELECT name FROM tags WHERE owner = ? ORDER BY name", (owner,))
            return [row["name"] for row in cursor.fetchall()]
        finally:
            conn.close()

    # ==================== Stats ====================

    def get_stats(self, owner: str) -> dict:
        """Get record counts of one owner.

        Returns:
            Dictionary with per-table record counts.
        """
        conn = self._get_connection()
        try:
            cursor = conn.cursor()
            stats = {}
            for table in self.REQUIRED_TABLES:
                cursor.execute(
                    f"SELECT COUNT(*) as count FROM {table} WHERE owner = ?", (owner,)
                )
                stats[table] = cursor.fetchone()["count"]
            return stats
        finally:
            conn.close()
