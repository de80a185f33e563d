"""Canned replies picked at random from a phrase dictionary."""

from __future__ import annotations

import json
import random
from dataclasses import dataclass, field


@dataclass
class Thesaurus:
    """A mapping from trigger phrases to lists of possible replies."""

    entries: dict[str, list[str]] = field(default_factory=dict)

    @classmethod
    def from_json(cls, data: str | bytes) -> "Thesaurus":
        """Build a thesaurus from a JSON object of phrase -> replies."""
        raw = json.loads(data)
        if not isinstance(raw, dict):
            raise ValueError("thesaurus data must be a JSON object")
        entries: dict[str, list[str]] = {}
        for key, replies in raw.items():
            if not isinstance(replies, list) or not all(
                isinstance(r, str) for r in replies
            ):
                raise ValueError(f"replies for {key!r} must be a list of strings")
            entries[key] = list(replies)
        return cls(entries)

    def keys(self) -> list[str]:
        """Return every trigger phrase."""
        return list(self.entries)

    def reply(self, message: str, rng: random.Random) -> str | None:
        """Pick a reply for an exactly matching message, or None."""
        replies = self.entries.get(message)
        if not replies:
            return None
        return rng.choice(replies)