"""Good-morning and good-night tracking per group, backed by SQLite."""

from __future__ import annotations

import math
import sqlite3
import threading
from datetime import datetime, timedelta


def time_duration(seconds: float | timedelta) -> tuple[int, int, int]:
    """Split a duration into whole hours, minutes and seconds."""
    if isinstance(seconds, timedelta):
        seconds = seconds.total_seconds()
    total = math.trunc(seconds)
    sign = -1 if total < 0 else 1
    hour, rest = divmod(abs(total), 3600)
    minute, second = divmod(rest, 60)
    return sign * hour, sign * minute, sign * second


def is_morning(hour: int) -> bool:
    """Return whether good-mornings are counted at this hour (6 to 12)."""
    return 6 <= hour <= 12


def is_evening(hour: int) -> bool:
    """Return whether good-nights are counted at this hour (21 to 3)."""
    return hour >= 21 or hour <= 3


def _no_duration(seconds: float | timedelta) -> tuple[bool, tuple[int, int, int]]:
    hms = time_duration(seconds)
    return hms == (0, 0, 0) or hms[0] >= 24, hms


def morning_reply(position: int, seconds: float | timedelta) -> str:
    """Return the reply to a good-morning."""
    short, (hour, minute, second) = _no_duration(seconds)
    if short:
        return f"早安成功！你是今天第{position}个起床的"
    return (
        f"早安成功！你的睡眠时长为{hour}时{minute}分{second}秒,"
        f"你是今天第{position}个起床的"
    )


def evening_reply(position: int, seconds: float | timedelta) -> str:
    """Return the reply to a good-night."""
    short, (hour, minute, second) = _no_duration(seconds)
    if short:
        return f"晚安成功！你是今天第{position}个睡觉的"
    return (
        f"晚安成功！你的清醒时长为{hour}时{minute}分{second}秒,"
        f"你是今天第{position}个睡觉的"
    )


def _stamp(moment: datetime) -> str:
    return moment.isoformat(sep="T", timespec="microseconds")


def _evening_start(now: datetime) -> datetime:
    clock = timedelta(minutes=now.minute, seconds=now.second)
    if now.hour >= 21:
        return now - timedelta(hours=now.hour - 21) - clock
    if now.hour <= 3:
        return now - timedelta(hours=3 + now.hour) - clock
    return datetime.min


def _morning_start(now: datetime) -> datetime:
    return now - timedelta(hours=now.hour - 6, minutes=now.minute, seconds=now.second)


class SleepDB:
    """The last sleep or wake time of each member of each group.

    Times are naive datetimes in local time.
    """

    def __init__(self, path: str = ":memory:") -> None:
        self._conn = sqlite3.connect(path, check_same_thread=False)
        self._lock = threading.RLock()
        with self._conn:
            self._conn.execute(
                "CREATE TABLE IF NOT EXISTS sleep_manage ("
                "id INTEGER PRIMARY KEY AUTOINCREMENT, group_id INTEGER, "
                "user_id INTEGER, sleep_time TEXT)"
            )

    def __enter__(self) -> "SleepDB":
        return self

    def __exit__(self, *exc: object) -> None:
        self.close()

    def _record(
        self, gid: int, uid: int, now: datetime, since: datetime
    ) -> tuple[int, float]:
        with self._lock, self._conn:
            row = self._conn.execute(
                "SELECT sleep_time FROM sleep_manage WHERE group_id = ? AND user_id = ? "
                "ORDER BY id LIMIT 1",
                (gid, uid),
            ).fetchone()
            if row is None:
                self._conn.execute(
                    "INSERT INTO sleep_manage (group_id, user_id, sleep_time) "
                    "VALUES (?, ?, ?)",
                    (gid, uid, _stamp(now)),
                )
                elapsed = 0.0
            else:
                elapsed = (now - datetime.fromisoformat(row[0])).total_seconds()
                self._conn.execute(
                    "UPDATE sleep_manage SET sleep_time = ? "
                    "WHERE group_id = ? AND user_id = ?",
                    (_stamp(now), gid, uid),
                )
            position = self._conn.execute(
                "SELECT COUNT(*) FROM sleep_manage WHERE group_id = ? "
                "AND sleep_time <= ? AND sleep_time >= ?",
                (gid, _stamp(now), _stamp(since)),
            ).fetchone()[0]
        return position, elapsed

    def sleep(self, gid: int, uid: int, now: datetime) -> tuple[int, float]:
        """Record a good-night; return the rank tonight and seconds awake."""
        return self._record(gid, uid, now, _evening_start(now))

    def get_up(self, gid: int, uid: int, now: datetime) -> tuple[int, float]:
        """Record a good-morning; return the rank this morning and seconds slept."""
        return self._record(gid, uid, now, _morning_start(now))

    def close(self) -> None:
        """Close the database."""
        with self._lock:
            self._conn.close()