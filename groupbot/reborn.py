"""Pick a random birthplace and gender for a reincarnation joke."""

from __future__ import annotations

import bisect
import json
from typing import Any, Generic, Iterable, Protocol, TypeVar

T = TypeVar("T")

SUCCESS_THRESHOLD = 1 << 27
FAILURE_TEXT = "投胎失败！\n您没能活到出生，祝您下次好运！"


class _Rng(Protocol):
    def randint(self, a: int, b: int) -> int: ...

    def getrandbits(self, k: int) -> int: ...


class WeightedChooser(Generic[T]):
    """Pick items at random in proportion to integer weights."""

    def __init__(self, choices: Iterable[tuple[T, int]]) -> None:
        self.items: list[T] = []
        self._totals: list[int] = []
        total = 0
        for item, weight in choices:
            if weight < 0:
                raise ValueError("weights must not be negative")
            total += weight
            self.items.append(item)
            self._totals.append(total)
        if total <= 0:
            raise ValueError("no valid choices")
        self.total = total

    def pick(self, rng: Any) -> T:
        """Return one item chosen by weight."""
        r = rng.randint(1, self.total)
        return self.items[bisect.bisect_left(self._totals, r)]


GENDER: WeightedChooser[str] = WeightedChooser(
    [("男孩子", 50707), ("女孩子", 48292), ("雌雄同体", 1001)]
)


def load_rates(data: str | bytes) -> list[tuple[str, float]]:
    """Parse a JSON list of ``{"name", "weight"}`` objects."""
    raw = json.loads(data)
    if not isinstance(raw, list):
        raise ValueError("rate data must be a JSON list")
    rates = []
    for entry in raw:
        if not isinstance(entry, dict):
            raise ValueError("rate entries must be objects")
        rates.append((str(entry.get("name", "")), float(entry.get("weight", 0.0))))
    return rates


def country_chooser(rates: Iterable[tuple[str, float]]) -> WeightedChooser[str]:
    """Build a chooser over countries, scaling weights by one billion."""
    return WeightedChooser((name, int(weight * 1e9)) for name, weight in rates)


def reborn(countries: WeightedChooser[str], rng: Any) -> str:
    """Return the reincarnation message."""
    if rng.getrandbits(31) > SUCCESS_THRESHOLD:
        return (
            f"投胎成功！\n您出生在 {countries.pick(rng)}, 是 {GENDER.pick(rng)}。"
        )
    return FAILURE_TEXT