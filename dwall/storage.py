"""SQLite record store for wallpaper rules."""

import logging
import sqlite3
from pathlib import Path
from typing import Iterable, List, Optional

from dwall.rules import Rule, RuleMode


logger = logging.getLogger(__name__)

DB_NAME = "dwall.db"
TABLE = "dwall"
C_POSITION = "position"
C_NAME = "name"
C_MODE = "mode"
C_INFO = "info"
C_FILENAME = "filename"

_COLUMNS = (C_POSITION, C_NAME, C_MODE, C_INFO, C_FILENAME)
_INSERT_SQL = (
    f"INSERT OR REPLACE INTO {TABLE} ({', '.join(_COLUMNS)}) "
    f"VALUES (?, ?, ?, ?, ?)"
)


class WallpaperStore:
    """Keeps one row per rule, keyed and ordered by position."""

    def __init__(self, db_path: Path):
        """
        Initialize the store.

        Args:
            db_path: Path to the SQLite database file
        """
        self.db_path = Path(db_path)

    def _connect(self) -> sqlite3.Connection:
        conn = sqlite3.connect(self.db_path)
        conn.row_factory = sqlite3.Row
        return conn

    @staticmethod
    def _to_row(rule: Rule) -> tuple:
        return (rule.position, rule.name, rule.mode.value, rule.info, rule.filename)

    @staticmethod
    def _from_row(row: sqlite3.Row) -> Rule:
        return Rule(
            position=int(row[C_POSITION]),
            name=row[C_NAME] or "",
            mode=RuleMode.from_label(row[C_MODE]),
            info=row[C_INFO] or "",
            filename=row[C_FILENAME] or "",
        )

    def init_db(self) -> None:
        """Create the rules table if it does not exist."""
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        with self._connect() as conn:
            conn.execute(
                f"""
                CREATE TABLE IF NOT EXISTS {TABLE} (
                    {C_POSITION} INTEGER PRIMARY KEY,
                    {C_NAME} TEXT,
                    {C_MODE} TEXT,
                    {C_INFO} TEXT,
                    {C_FILENAME} TEXT
                )
                """
            )
        logger.debug(f"Database ready: {self.db_path}")

    def insert_wallpaper(self, rule: Rule) -> None:
        """Insert a rule, replacing any rule already stored at its position."""
        with self._connect() as conn:
            conn.execute(_INSERT_SQL, self._to_row(rule))
        logger.info(f"Saved wallpaper rule: {rule.name} (position {rule.position})")

    def clear_and_insert(self, rules: Iterable[Rule]) -> None:
        """Replace the whole table with the given rules."""
        rows = [self._to_row(rule) for rule in rules]
        with self._connect() as conn:
            conn.execute(f"DELETE FROM {TABLE}")
            conn.executemany(_INSERT_SQL, rows)
        logger.info(f"Stored {len(rows)} wallpaper rules")

    def get_wallpaper_list(self) -> List[Rule]:
        """Return all rules in ascending position order."""
        with self._connect() as conn:
            rows = conn.execute(
                f"SELECT * FROM {TABLE} ORDER BY {C_POSITION} ASC"
            ).fetchall()
        return [self._from_row(row) for row in rows]

    def get_wallpaper(self, position: int) -> Optional[Rule]:
        """Return the rule at a position, if any."""
        with self._connect() as conn:
            row = conn.execute(
                f"SELECT * FROM {TABLE} WHERE {C_POSITION} = ?",
                (position,),
            ).fetchone()
        return self._from_row(row) if row else None

    def delete_wallpaper(self, position: int) -> bool:
        """
        Delete the rule at a position.

        Returns:
            True if a row was removed
        """
        with self._connect() as conn:
            cur = conn.execute(
                f"DELETE FROM {TABLE} WHERE {C_POSITION} = ?",
                (position,),
            )
            removed = cur.rowcount > 0
        if removed:
            logger.info(f"Removed wallpaper rule at position {position}")
        return removed

    def next_position(self) -> int:
        """Return the position after the last stored rule."""
        with self._connect() as conn:
            row = conn.execute(f"SELECT MAX({C_POSITION}) AS last FROM {TABLE}").fetchone()
        return 0 if row["last"] is None else int(row["last"]) + 1
