"""Count the hot words of a group's chat history."""

from __future__ import annotations

import re
from bisect import bisect_left
from collections import Counter
from typing import Callable, Iterable, Sequence

MAX_MESSAGES = 10000
DEFAULT_MESSAGES = 1000
TOP_N = 20

_CHINESE = re.compile(r"^[一-龥]+$")
_COMMAND = re.compile(r"^热词\s?(\d*)\s?(\d*)$")


def load_stopwords(text: str) -> list[str]:
    """Split a stopword file into a sorted list."""
    return sorted(text.replace("\r", "").split("\n"))


def is_chinese_word(text: str) -> bool:
    """Return whether ``text`` consists only of common Chinese characters."""
    return _CHINESE.match(text) is not None


def _is_stopword(word: str, stopwords: Sequence[str]) -> bool:
    i = bisect_left(stopwords, word)
    return i < len(stopwords) and stopwords[i] == word


def count_words(
    texts: Iterable[str],
    stopwords: Sequence[str],
    segment: Callable[[str], Iterable[str]],
) -> dict[str, int]:
    """Count Chinese words outside ``stopwords`` (sorted) in the given texts."""
    counts: Counter[str] = Counter()
    for text in texts:
        text = text.strip()
        if not text:
            continue
        for piece in segment(text):
            word = piece.strip()
            if is_chinese_word(word) and not _is_stopword(word, stopwords):
                counts[word] += 1
    return dict(counts)


def rank_by_word_count(frequencies: dict[str, int]) -> list[tuple[str, int]]:
    """Return (word, count) pairs, most frequent first."""
    return sorted(frequencies.items(), key=lambda item: (-item[1], item[0]))


def parse_command(text: str, group_id: int) -> tuple[int, int] | None:
    """Parse ``热词 [group] [count]`` into (group id, message count), or None."""
    match = _COMMAND.match(text)
    if match is None:
        return None
    gid = int(match.group(1) or 0)
    count = int(match.group(2) or 0)
    if count > MAX_MESSAGES:
        count = MAX_MESSAGES
    if count == 0:
        count = DEFAULT_MESSAGES
    if gid == 0:
        gid = group_id
    return gid, count