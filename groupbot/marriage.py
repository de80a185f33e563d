"""One-couple-per-day group marriage registry backed by SQLite."""

from __future__ import annotations

import enum
import sqlite3
import threading
from dataclasses import dataclass
from datetime import date
from typing import Callable

ALL_GROUPS = "ALL"
NAME_WIDTH_LIMIT = 350
_UPDATE_TABLE = "updateinfo"

MSG_SINGLE_NOBLE_YOU = "今天的你是单身贵族噢"
MSG_SINGLE_NOBLE_YOU_ALT = "今天的你是单身贵族哦"
MSG_SINGLE_NOBLE_TA = "今天的ta是单身贵族噢"
MSG_SINGLE_NOBLE_TA_ALT = "今天的ta是单身贵族哦"
MSG_ALREADY_TOGETHER = "笨蛋~你们明明已经在一起了啊w"
MSG_YOU_HAVE_WIFE = "笨蛋~你家里还有个吃白饭的w"
MSG_YOU_ARE_WIFE = "该是0就是0，当0有什么不好"
MSG_TA_HAS_WIFE = "他有别的女人了，你该放下了"
MSG_TA_IS_WIFE = "这是一个纯爱的世界，拒绝NTR"
MSG_NO_CONCUBINE = "打灭，不给纳小妾！"
MSG_TA_SINGLE = "ta现在还是单身哦，快向ta表白吧！"
MSG_NOT_MARRIED = "今天你还没有结婚哦"


class Status(enum.IntEnum):
    """How a member stands in today's registry."""

    TARGET = 0  # married as the taken partner
    USER = 1  # married as the taking partner
    SINGLE = 3


@dataclass(frozen=True)
class Couple:
    """One registered marriage."""

    user: int
    target: int
    username: str
    targetname: str
    updatetime: str


def _day(today: date | str) -> str:
    if isinstance(today, str):
        return today
    return today.strftime("%Y/%m/%d")


def _quote(name: str) -> str:
    return '"' + name.replace('"', '""') + '"'


def slice_name(name: str, measure: Callable[[str], float]) -> str:
    """Shorten ``name`` so its measured width stays within 350 units."""
    width = 0
    last_fit = 0
    for i, char in enumerate(name):
        width += int(measure(char))
        if width > NAME_WIDTH_LIMIT:
            break
        last_fit = i
    if width > NAME_WIDTH_LIMIT:
        return name[: max(last_fit - 1, 0)] + "......"
    return name


class MarriageRegistry:
    """Per-group marriage tables plus the date each group was last reset."""

    def __init__(self, path: str = ":memory:") -> None:
        self._conn = sqlite3.connect(path, check_same_thread=False)
        self._lock = threading.RLock()

    def __enter__(self) -> "MarriageRegistry":
        return self

    def __exit__(self, *exc: object) -> None:
        self.close()

    def _ensure_group(self, gid: str) -> None:
        self._conn.execute(
            f"CREATE TABLE IF NOT EXISTS {_quote(gid)} ("
            "user INTEGER PRIMARY KEY, target INTEGER, username TEXT, "
            "targetname TEXT, updatetime TEXT)"
        )

    def _ensure_update_table(self) -> None:
        self._conn.execute(
            f"CREATE TABLE IF NOT EXISTS {_UPDATE_TABLE} "
            "(gid INTEGER PRIMARY KEY, updatetime TEXT)"
        )

    def _tables(self) -> list[str]:
        rows = self._conn.execute(
            "SELECT name FROM sqlite_master WHERE type = 'table'"
        ).fetchall()
        return [row[0] for row in rows]

    def _find(self, gid: str, column: str, value: int) -> Couple | None:
        row = self._conn.execute(
            f"SELECT user, target, username, targetname, updatetime "
            f"FROM {_quote(gid)} WHERE {column} = ? LIMIT 1",
            (value,),
        ).fetchone()
        return Couple(*row) if row else None

    def _insert(self, gid: str, couple: Couple) -> None:
        self._conn.execute(
            f"INSERT OR REPLACE INTO {_quote(gid)} "
            "(user, target, username, targetname, updatetime) VALUES (?, ?, ?, ?, ?)",
            (couple.user, couple.target, couple.username, couple.targetname,
             couple.updatetime),
        )

    def _mark_updated(self, gid: int, today: str) -> None:
        self._ensure_update_table()
        self._conn.execute(
            f"INSERT OR REPLACE INTO {_UPDATE_TABLE} (gid, updatetime) VALUES (?, ?)",
            (gid, today),
        )

    def check_update(self, gid: int, today: date | str) -> str:
        """Return the date the group was last reset, recording today if unknown."""
        with self._lock, self._conn:
            self._ensure_update_table()
            row = self._conn.execute(
                f"SELECT updatetime FROM {_UPDATE_TABLE} WHERE gid = ?", (gid,)
            ).fetchone()
            if row is not None:
                return row[0]
            stamp = _day(today)
            self._mark_updated(gid, stamp)
            return stamp

    def reset(self, gid: int | str, today: date | str) -> None:
        """Clear one group's registry, or every group's for ``"ALL"``."""
        stamp = _day(today)
        with self._lock, self._conn:
            if str(gid) != ALL_GROUPS:
                name = str(gid)
                if name not in self._tables():
                    self._ensure_group(name)
                    return
                self._conn.execute(f"DROP TABLE {_quote(name)}")
                self._mark_updated(int(name), stamp)
                return
            for name in self._tables():
                if name == _UPDATE_TABLE:
                    continue
                self._conn.execute(f"DROP TABLE {_quote(name)}")
                if name.lstrip("-").isdigit():
                    self._mark_updated(int(name), stamp)

    def divorce_wife(self, gid: int, wife: int) -> None:
        """Remove the marriage whose taken partner is ``wife``."""
        with self._lock, self._conn:
            self._conn.execute(f"DELETE FROM {_quote(str(gid))} WHERE target = ?", (wife,))

    def divorce_husband(self, gid: int, husband: int) -> None:
        """Remove the marriage whose taking partner is ``husband``."""
        with self._lock, self._conn:
            self._conn.execute(f"DELETE FROM {_quote(str(gid))} WHERE user = ?", (husband,))

    def remarry(
        self, gid: int, uid: int, target: int, username: str, targetname: str,
        today: date | str,
    ) -> None:
        """Rewrite the marriage of ``uid`` (or of ``target``) to join the two."""
        name = str(gid)
        with self._lock, self._conn:
            found = self._find(name, "user", uid) or self._find(name, "user", target)
            if found is None:
                raise LookupError("record not found")
            self._insert(name, Couple(uid, target, username, targetname, _day(today)))

    def roster(self, gid: int) -> tuple[list[Couple], int]:
        """Return today's couples and the number of registry entries."""
        name = str(gid)
        with self._lock, self._conn:
            self._ensure_group(name)
            number = self._conn.execute(f"SELECT COUNT(*) FROM {_quote(name)}").fetchone()[0]
            if number <= 0:
                return [], number
            rows = self._conn.execute(
                f"SELECT user, target, username, targetname, updatetime "
                f"FROM {_quote(name)} GROUP BY user"
            ).fetchall()
        couples = [Couple(*row) for row in rows if row[1] != 0]
        return couples, (number if couples else 0)

    def lookup(self, gid: int, uid: int) -> tuple[Couple | None, Status]:
        """Return the member's marriage and how they stand in it."""
        name = str(gid)
        with self._lock, self._conn:
            self._ensure_group(name)
            found = self._find(name, "user", uid)
            if found is not None:
                return found, Status.USER
            found = self._find(name, "target", uid)
            if found is not None:
                return found, Status.TARGET
        return None, Status.SINGLE

    def register(
        self, gid: int, uid: int, target: int, username: str, targetname: str,
        today: date | str,
    ) -> None:
        """Register ``uid`` as married to ``target`` (0 means single by choice)."""
        name = str(gid)
        with self._lock, self._conn:
            self._ensure_group(name)
            self._insert(name, Couple(uid, target, username, targetname, _day(today)))

    def ensure_today(self, gid: int, today: date | str) -> bool:
        """Reset the group if it was last reset on another day; return whether it was."""
        with self._lock:
            if self.check_update(gid, today) != _day(today):
                self.reset(gid, today)
                return True
        return False

    def check_single(
        self, gid: int, uid: int, fiancee: int, today: date | str
    ) -> str | None:
        """Return why a proposal is refused, or None when both may marry."""
        if self.ensure_today(gid, today):
            return None
        mine, my_status = self.lookup(gid, uid)
        theirs, their_status = self.lookup(gid, fiancee)
        my_target = mine.target if mine else 0
        their_target = theirs.target if theirs else 0
        if my_status is Status.SINGLE and their_status is Status.SINGLE:
            return None
        if my_target == fiancee:
            return MSG_ALREADY_TOGETHER
        if my_status is not Status.SINGLE and my_target == 0:
            return MSG_SINGLE_NOBLE_YOU
        if my_status is Status.USER:
            return MSG_YOU_HAVE_WIFE
        if my_status is Status.TARGET:
            return MSG_YOU_ARE_WIFE
        if their_status is not Status.SINGLE and their_target == 0:
            return MSG_SINGLE_NOBLE_TA
        if their_status is Status.USER:
            return MSG_TA_HAS_WIFE
        if their_status is Status.TARGET:
            return MSG_TA_IS_WIFE
        return None

    def check_mistress(
        self, gid: int, uid: int, fiancee: int, today: date | str
    ) -> str | None:
        """Return why stealing ``fiancee`` is refused, or None when it may be tried."""
        if self.ensure_today(gid, today):
            return MSG_TA_SINGLE
        mine, my_status = self.lookup(gid, uid)
        my_target = mine.target if mine else 0
        if my_target == fiancee:
            return MSG_ALREADY_TOGETHER
        if my_status is not Status.SINGLE and my_target == 0:
            return MSG_SINGLE_NOBLE_YOU_ALT
        if fiancee == uid:
            return None
        if my_status is Status.USER:
            return MSG_NO_CONCUBINE
        if my_status is Status.TARGET:
            return MSG_YOU_ARE_WIFE
        theirs, their_status = self.lookup(gid, fiancee)
        if their_status is Status.SINGLE:
            return MSG_TA_SINGLE
        if theirs is not None and theirs.target == 0:
            return MSG_SINGLE_NOBLE_TA_ALT
        return None

    def check_married(self, gid: int, uid: int, today: date | str) -> str | None:
        """Return why a divorce is refused, or None when ``uid`` is married."""
        if self.ensure_today(gid, today):
            return MSG_NOT_MARRIED
        _, status = self.lookup(gid, uid)
        if status is Status.SINGLE:
            return MSG_NOT_MARRIED
        return None

    def close(self) -> None:
        """Close the database."""
        with self._lock:
            self._conn.close()