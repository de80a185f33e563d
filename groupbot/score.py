"""Daily sign-in and score keeping backed by SQLite."""

from __future__ import annotations

import sqlite3
import threading
from dataclasses import dataclass
from datetime import datetime

SIGNIN_MAX = 1
SCOREMAX = 120
SIGN_IN_BONUS = 1
LEVELS: tuple[int, ...] = (0, 1, 2, 5, 10, 20, 35, 55, 75, 100, 120)

_DAY_FORMAT = "%Y%m%d"


def get_level(count: int) -> int:
    """Return the level reached with ``count`` points, or -1 when out of range."""
    for level, threshold in enumerate(LEVELS):
        if count == threshold:
            return level
        if count < threshold:
            return level - 1
    return -1


def get_hour_word(moment: datetime) -> str:
    """Return the greeting for the hour of ``moment``."""
    hour = moment.hour
    if 6 <= hour < 12:
        return "早上好"
    if 12 <= hour < 14:
        return "中午好"
    if 14 <= hour < 19:
        return "下午好"
    if 19 <= hour < 24:
        return "晚上好"
    if 0 <= hour < 6:
        return "凌晨好"
    return ""


def next_level_score(level: int) -> int:
    """Return the score needed for the level after ``level``."""
    if level < len(LEVELS) - 1:
        return LEVELS[level + 1]
    return SCOREMAX


@dataclass(frozen=True)
class SignInResult:
    """Outcome of one sign-in attempt."""

    already_signed: bool
    count: int
    score: int
    level: int
    next_level: int
    capped: bool
    hour_word: str
    date_word: str


class ScoreDB:
    """Scores and sign-in counters of users."""

    def __init__(self, path: str = ":memory:") -> None:
        self._conn = sqlite3.connect(path, check_same_thread=False)
        self._lock = threading.RLock()
        with self._conn:
            self._conn.execute(
                "CREATE TABLE IF NOT EXISTS score "
                "(uid INTEGER PRIMARY KEY, score INTEGER NOT NULL DEFAULT 0)"
            )
            self._conn.execute(
                "CREATE TABLE IF NOT EXISTS sign_in "
                "(uid INTEGER PRIMARY KEY, count INTEGER NOT NULL DEFAULT 0, "
                "updated_at TEXT NOT NULL)"
            )

    def __enter__(self) -> "ScoreDB":
        return self

    def __exit__(self, *exc: object) -> None:
        self.close()

    def get_score(self, uid: int) -> int:
        """Return the user's score, creating a zero entry if missing."""
        with self._lock, self._conn:
            row = self._conn.execute(
                "SELECT score FROM score WHERE uid = ?", (uid,)
            ).fetchone()
            if row is not None:
                return row[0]
            self._conn.execute("INSERT INTO score (uid, score) VALUES (?, 0)", (uid,))
            return 0

    def set_score(self, uid: int, score: int) -> None:
        """Insert or update the user's score."""
        with self._lock, self._conn:
            self._conn.execute(
                "INSERT OR REPLACE INTO score (uid, score) VALUES (?, ?)", (uid, score)
            )

    def _get_sign_in(self, uid: int, now: datetime) -> tuple[int, datetime]:
        with self._lock, self._conn:
            row = self._conn.execute(
                "SELECT count, updated_at FROM sign_in WHERE uid = ?", (uid,)
            ).fetchone()
            if row is not None:
                return row[0], datetime.fromisoformat(row[1])
            self._conn.execute(
                "INSERT INTO sign_in (uid, count, updated_at) VALUES (?, 0, ?)",
                (uid, now.isoformat()),
            )
            return 0, now

    def get_sign_in(self, uid: int) -> tuple[int, datetime]:
        """Return the user's sign-in count and its last update time."""
        return self._get_sign_in(uid, datetime.now())

    def set_sign_in_count(self, uid: int, count: int, now: datetime) -> None:
        """Insert or update the user's sign-in count, stamped with ``now``."""
        with self._lock, self._conn:
            self._conn.execute(
                "INSERT OR REPLACE INTO sign_in (uid, count, updated_at) VALUES (?, ?, ?)",
                (uid, count, now.isoformat()),
            )

    def top_scores(self, n: int) -> list[tuple[int, int]]:
        """Return up to ``n`` (uid, score) pairs, highest score first."""
        with self._lock:
            rows = self._conn.execute(
                "SELECT uid, score FROM score ORDER BY score DESC, uid LIMIT ?", (n,)
            ).fetchall()
        return [(uid, score) for uid, score in rows]

    def sign_in(self, uid: int, now: datetime) -> SignInResult:
        """Sign the user in for the day of ``now`` and award the bonus."""
        today = now.strftime(_DAY_FORMAT)
        hour_word = get_hour_word(now)
        date_word = now.strftime("%m/%d")
        with self._lock:
            count, updated = self._get_sign_in(uid, now)
            same_day = updated.strftime(_DAY_FORMAT) == today
            if count >= SIGNIN_MAX and same_day:
                score = self.get_score(uid)
                level = get_level(score)
                return SignInResult(
                    True, count, score, level, next_level_score(level), False,
                    hour_word, date_word,
                )
            if not same_day:
                self.set_sign_in_count(uid, 0, now)
            self.set_sign_in_count(uid, count + 1, now)
            score = self.get_score(uid) + SIGN_IN_BONUS
            capped = score > SCOREMAX
            if capped:
                score = SCOREMAX
            self.set_score(uid, score)
        level = get_level(score)
        return SignInResult(
            False, count + 1, score, level, next_level_score(level), capped,
            hour_word, date_word,
        )

    def close(self) -> None:
        """Close the database."""
        with self._lock:
            self._conn.close()