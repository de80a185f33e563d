"""Storage of vtuber voice clips in three category levels, backed by SQLite."""

from __future__ import annotations

import json
import random
import re
import sqlite3
import threading
from dataclasses import dataclass
from typing import Any

import requests

VTB_LIST_URL = "https://vtbkeyboard.moe/api/get_vtb_list"
VTB_PAGE_URL = "https://vtbkeyboard.moe/api/get_vtb_page"
TIMEOUT = 30.0

FIRST_STEP_HEADER = "请选择一个vtb并发送序号:\n"
SECOND_STEP_HEADER = "请选择一个语录类别并发送序号:\n"
THIRD_STEP_HEADER = "请选择一个语录并发送序号:\n"

_USER_AGENTS = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/96.0.4664.110 Safari/537.36",
    "Mozilla/5.0 (Windows NT 6.1; WOW64; rv:6.0) Gecko/20100101 Firefox/6.0",
    "Mozilla/5.0 (X11; Linux x86_64; rv:99.0) Gecko/20100101 Firefox/99.0",
)

_UNICODE_ESCAPE = re.compile(r"\\u(.{0,4})", re.DOTALL)
_HEX4 = re.compile(r"[0-9a-fA-F]{4}")
_MISSING = object()


@dataclass(frozen=True)
class FirstCategory:
    """One vtuber."""

    index: int
    name: str
    uid: str
    description: str = ""
    icon_path: str = ""


@dataclass(frozen=True)
class ThirdCategory:
    """One voice clip."""

    third_index: int
    second_index: int
    first_uid: str
    name: str
    path: str
    author: str = ""
    description: str = ""


def unescape_unicode(text: str) -> str:
    """Replace literal ``\\uXXXX`` sequences by the characters they name."""

    def replace(match: re.Match[str]) -> str:
        digits = match.group(1)
        if not _HEX4.fullmatch(digits):
            raise ValueError(f"invalid unicode escape: \\u{digits}")
        code = int(digits, 16)
        if 0xD800 <= code <= 0xDFFF:
            raise ValueError(f"invalid unicode escape: \\u{digits}")
        return chr(code)

    return _UNICODE_ESCAPE.sub(replace, text)


def _get(data: Any, *path: str) -> Any:
    for key in path:
        if isinstance(data, dict) and key in data:
            data = data[key]
        else:
            return _MISSING
    return data


def _text(value: Any) -> str:
    if value is _MISSING or value is None:
        return ""
    if isinstance(value, str):
        return value
    if isinstance(value, bool):
        return "true" if value else "false"
    return json.dumps(value, ensure_ascii=False)


def _list(value: Any) -> list[Any]:
    return value if isinstance(value, list) else []


def _decode(payload: str | bytes) -> Any:
    if isinstance(payload, bytes):
        payload = payload.decode("utf-8")
    return json.loads(unescape_unicode(payload))


class VtbDB:
    """Vtubers, their voice categories and their voice clips."""

    def __init__(self, path: str = ":memory:") -> None:
        self._conn = sqlite3.connect(path, check_same_thread=False)
        self._lock = threading.RLock()
        with self._conn:
            self._conn.execute(
                "CREATE TABLE IF NOT EXISTS first_category ("
                "id INTEGER PRIMARY KEY AUTOINCREMENT, first_category_index INTEGER, "
                "first_category_name TEXT, first_category_uid TEXT, "
                "first_category_description TEXT, first_category_icon_path TEXT)"
            )
            self._conn.execute(
                "CREATE TABLE IF NOT EXISTS second_category ("
                "id INTEGER PRIMARY KEY AUTOINCREMENT, second_category_index INTEGER, "
                "first_category_uid TEXT, second_category_name TEXT, "
                "second_category_author TEXT, second_category_description TEXT)"
            )
            self._conn.execute(
                "CREATE TABLE IF NOT EXISTS third_category ("
                "id INTEGER PRIMARY KEY AUTOINCREMENT, third_category_index INTEGER, "
                "second_category_index INTEGER, first_category_uid TEXT, "
                "third_category_name TEXT, third_category_path TEXT, "
                "third_category_author TEXT, third_category_description TEXT)"
            )

    def __enter__(self) -> "VtbDB":
        return self

    def __exit__(self, *exc: object) -> None:
        self.close()

    def _first_uid(self, first_index: int) -> str:
        row = self._conn.execute(
            "SELECT first_category_uid FROM first_category "
            "WHERE first_category_index = ? ORDER BY id LIMIT 1",
            (first_index,),
        ).fetchone()
        return row[0] if row else ""

    def first_category_message(self) -> str:
        """Return the numbered list of all vtubers."""
        with self._lock:
            rows = self._conn.execute(
                "SELECT first_category_index, first_category_name "
                "FROM first_category ORDER BY id"
            ).fetchall()
        return FIRST_STEP_HEADER + "".join(f"{i}. {name}\n" for i, name in rows)

    def second_category_message(self, first_index: int) -> str:
        """Return the numbered voice categories of a vtuber, or "" if none."""
        with self._lock:
            uid = self._first_uid(first_index)
            rows = self._conn.execute(
                "SELECT second_category_index, second_category_name "
                "FROM second_category WHERE first_category_uid = ? ORDER BY id",
                (uid,),
            ).fetchall()
        if not rows:
            return ""
        return SECOND_STEP_HEADER + "".join(f"{i}. {name}\n" for i, name in rows)

    def third_category_message(self, first_index: int, second_index: int) -> str:
        """Return the numbered clips of one category, or "" if none."""
        with self._lock:
            uid = self._first_uid(first_index)
            rows = self._conn.execute(
                "SELECT third_category_index, third_category_name FROM third_category "
                "WHERE first_category_uid = ? AND second_category_index = ? ORDER BY id",
                (uid, second_index),
            ).fetchall()
        if not rows:
            return ""
        return THIRD_STEP_HEADER + "".join(f"{i}. {name}\n" for i, name in rows)

    @staticmethod
    def _third(row: tuple[Any, ...]) -> ThirdCategory:
        return ThirdCategory(
            third_index=row[0],
            second_index=row[1],
            first_uid=row[2],
            name=row[3] or "",
            path=row[4] or "",
            author=row[5] or "",
            description=row[6] or "",
        )

    _THIRD_COLUMNS = (
        "third_category_index, second_category_index, first_category_uid, "
        "third_category_name, third_category_path, third_category_author, "
        "third_category_description"
    )

    def get_third_category(
        self, first_index: int, second_index: int, third_index: int
    ) -> ThirdCategory | None:
        """Return the clip chosen by the three indexes, or None."""
        with self._lock:
            uid = self._first_uid(first_index)
            row = self._conn.execute(
                f"SELECT {self._THIRD_COLUMNS} FROM third_category "
                "WHERE first_category_uid = ? AND second_category_index = ? "
                "AND third_category_index = ? LIMIT 1",
                (uid, second_index, third_index),
            ).fetchone()
        return self._third(row) if row else None

    def random_vtb(self, rng: random.Random) -> ThirdCategory | None:
        """Return a random clip, or None when there is none."""
        with self._lock:
            count = self._conn.execute("SELECT COUNT(*) FROM third_category").fetchone()[0]
            if count <= 0:
                return None
            row = self._conn.execute(
                f"SELECT {self._THIRD_COLUMNS} FROM third_category "
                "ORDER BY id LIMIT 1 OFFSET ?",
                (rng.randrange(count),),
            ).fetchone()
        return self._third(row) if row else None

    def get_first_category_by_uid(self, first_uid: str) -> FirstCategory | None:
        """Return the vtuber with the given uid, or None."""
        with self._lock:
            row = self._conn.execute(
                "SELECT first_category_index, first_category_name, first_category_uid, "
                "first_category_description, first_category_icon_path "
                "FROM first_category WHERE first_category_uid = ? LIMIT 1",
                (first_uid,),
            ).fetchone()
        if row is None:
            return None
        return FirstCategory(row[0], row[1] or "", row[2] or "", row[3] or "", row[4] or "")

    def store_vtb_list(self, payload: str | bytes) -> list[str]:
        """Store the vtuber list reply and return the uids in it."""
        items = _list(_decode(payload))
        uids: list[str] = []
        with self._lock, self._conn:
            for index, item in enumerate(items):
                name = _text(_get(item, "name"))
                description = _text(_get(item, "description"))
                icon = _text(_get(item, "icon_path"))
                uid = _text(_get(item, "uid"))
                found = self._conn.execute(
                    "SELECT id FROM first_category WHERE first_category_uid = ? LIMIT 1",
                    (uid,),
                ).fetchone()
                if found is None:
                    self._conn.execute(
                        "INSERT INTO first_category (first_category_index, "
                        "first_category_name, first_category_uid, "
                        "first_category_description, first_category_icon_path) "
                        "VALUES (?, ?, ?, ?, ?)",
                        (index, name, uid, description, icon),
                    )
                else:
                    self._conn.execute(
                        "UPDATE first_category SET first_category_index = ?, "
                        "first_category_name = ?, first_category_description = ?, "
                        "first_category_icon_path = ? WHERE first_category_uid = ?",
                        (index, name, description, icon, uid),
                    )
                uids.append(uid)
        return uids

    def store_vtb_page(self, uid: str, payload: str | bytes) -> None:
        """Store the voice categories and clips of one vtuber."""
        voices = _list(_get(_decode(payload), "data", "voices"))
        with self._lock, self._conn:
            for second_index, second in enumerate(voices):
                self._upsert_second(uid, second_index, second)
                clips = _list(_get(second, "voiceList"))
                for third_index, third in enumerate(clips):
                    self._upsert_third(uid, second_index, third_index, third)

    def _upsert_second(self, uid: str, second_index: int, item: Any) -> None:
        name = _text(_get(item, "categoryName"))
        author = _text(_get(item, "author"))
        description = _text(_get(item, "categoryDescription", "zh-CN"))
        found = self._conn.execute(
            "SELECT id FROM second_category WHERE first_category_uid = ? "
            "AND second_category_index = ? LIMIT 1",
            (uid, second_index),
        ).fetchone()
        if found is None:
            self._conn.execute(
                "INSERT INTO second_category (second_category_index, "
                "first_category_uid, second_category_name, second_category_author, "
                "second_category_description) VALUES (?, ?, ?, ?, ?)",
                (second_index, uid, name, author, description),
            )
        else:
            self._conn.execute(
                "UPDATE second_category SET second_category_name = ?, "
                "second_category_author = ?, second_category_description = ? "
                "WHERE first_category_uid = ? AND second_category_index = ?",
                (name, author, description, uid, second_index),
            )

    def _upsert_third(
        self, uid: str, second_index: int, third_index: int, item: Any
    ) -> None:
        name = _text(_get(item, "name"))
        description = _text(_get(item, "description", "zh-CN"))
        path = _text(_get(item, "path"))
        author = _text(_get(item, "author"))
        key = (uid, second_index, third_index)
        found = self._conn.execute(
            "SELECT id FROM third_category WHERE first_category_uid = ? "
            "AND second_category_index = ? AND third_category_index = ? LIMIT 1",
            key,
        ).fetchone()
        if found is None:
            self._conn.execute(
                "INSERT INTO third_category (third_category_index, "
                "second_category_index, first_category_uid, third_category_name, "
                "third_category_path, third_category_author, "
                "third_category_description) VALUES (?, ?, ?, ?, ?, ?, ?)",
                (third_index, second_index, uid, name, path, author, description),
            )
        else:
            self._conn.execute(
                "UPDATE third_category SET third_category_name = ?, "
                "third_category_description = ?, third_category_path = ?, "
                "third_category_author = ? WHERE first_category_uid = ? "
                "AND second_category_index = ? AND third_category_index = ?",
                (name, description, path, author, *key),
            )

    @staticmethod
    def _get_remote(url: str, params: dict[str, str] | None = None) -> bytes:
        headers = {"User-Agent": random.choice(_USER_AGENTS)}
        response = requests.get(url, params=params, headers=headers, timeout=TIMEOUT)
        response.raise_for_status()
        return response.content

    def fetch_vtb_list(self) -> list[str]:
        """Download and store the vtuber list, returning the uids."""
        return self.store_vtb_list(self._get_remote(VTB_LIST_URL))

    def store_vtb(self, uid: str) -> None:
        """Download and store the voice page of one vtuber."""
        self.store_vtb_page(uid, self._get_remote(VTB_PAGE_URL, {"uid": uid}))

    def close(self) -> None:
        """Close the database."""
        with self._lock:
            self._conn.close()