"""Guess the meaning of pinyin-initial abbreviations."""

from __future__ import annotations

import json
import re
from typing import Any

import requests

GUESS_URL = "https://lab.magiconch.com/api/nbnhhsh/guess"

_COMMAND = re.compile(r"^[?？]{1,2} ?([a-z0-9]+)$")


def parse_command(text: str) -> str | None:
    """Return the abbreviation from a ``?? abbr`` message, or None."""
    match = _COMMAND.match(text)
    return match.group(1) if match else None


def _as_text(value: Any) -> str:
    if isinstance(value, str):
        return value
    if value is None:
        return ""
    return json.dumps(value, ensure_ascii=False)


def parse_guess(payload: str | bytes) -> list[str]:
    """Extract candidate meanings from the guess API reply."""
    data = json.loads(payload)
    if not isinstance(data, list) or not data or not isinstance(data[0], dict):
        return []
    first = data[0]
    values = first["trans"] if "trans" in first else first.get("inputting")
    if values is None:
        return []
    if not isinstance(values, list):
        values = [values]
    return [_as_text(v) for v in values]


def guess(text: str) -> list[str]:
    """Ask the guess API for the meanings of ``text``."""
    response = requests.post(GUESS_URL, data={"text": text}, timeout=30)
    return parse_guess(response.content)


def format_reply(keyword: str, values: list[str]) -> str:
    """Format the chat reply for a keyword and its meanings."""
    return keyword + ": " + ", ".join(values)