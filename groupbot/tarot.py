"""Draw Major Arcana tarot cards and lay out spreads."""

from __future__ import annotations

import json
import re
from dataclasses import dataclass, field
from typing import Any

IMAGE_BASE = "https://gitcode.net/shudorcl/zbp-tarot/-/raw/master/"
CARD_COUNT = 22
MAX_DRAW = 20
REASONS = ("您抽到的是~\n", "锵锵锵，塔罗牌的预言是~\n", "诶，让我看看您抽到了~\n")
POSITIONS = ("正位", "逆位")
_REVERSE = ("", "Reverse")

_COUNT_COMMAND = re.compile(r"^抽(\d{1,2}张)?塔罗牌$")


class TarotError(Exception):
    """A tarot request could not be served."""


@dataclass(frozen=True)
class CardInfo:
    """Meaning and picture of one card."""

    description: str = ""
    reverse_description: str = ""
    img_url: str = ""


@dataclass(frozen=True)
class Formation:
    """A tarot spread: how many cards and what each position stands for."""

    cards_num: int
    is_cut: bool = False
    represent: list[list[str]] = field(default_factory=list)


@dataclass(frozen=True)
class Draw:
    """One drawn card."""

    index: int
    reversed: bool
    name: str

    @property
    def position(self) -> str:
        return POSITIONS[int(self.reversed)]

    @property
    def image_url(self) -> str:
        return f"{IMAGE_BASE}MajorArcana{_REVERSE[int(self.reversed)]}/{self.index}.png"


def parse_count(text: str, in_group: bool) -> int:
    """Return how many cards a ``抽[n张]塔罗牌`` command asks for."""
    match = _COUNT_COMMAND.match(text)
    if match is None:
        raise TarotError("not a draw command")
    if match.group(1) is None:
        return 1
    n = int(match.group(1)[:-1])
    if n <= 0:
        raise TarotError("张数必须为正")
    if n > 1 and not in_group:
        raise TarotError("抽取多张仅支持群聊")
    if n > MAX_DRAW:
        raise TarotError("抽取张数过多")
    return n


def _card_info(raw: Any) -> CardInfo:
    if not isinstance(raw, dict):
        raw = {}
    return CardInfo(
        description=str(raw.get("description", "")),
        reverse_description=str(raw.get("reverseDescription", "")),
        img_url=str(raw.get("imgUrl", "")),
    )


@dataclass
class Tarot:
    """The card deck and the known spreads."""

    names: dict[str, str] = field(default_factory=dict)
    infos: dict[str, CardInfo] = field(default_factory=dict)
    formations: dict[str, Formation] = field(default_factory=dict)

    @classmethod
    def from_json(cls, cards_json: str | bytes, formations_json: str | bytes) -> "Tarot":
        """Load the deck and the spreads from their JSON files."""
        cards = json.loads(cards_json)
        spreads = json.loads(formations_json)
        if not isinstance(cards, dict) or not isinstance(spreads, dict):
            raise TarotError("tarot data must be JSON objects")
        names: dict[str, str] = {}
        infos: dict[str, CardInfo] = {}
        for key, card in cards.items():
            if not isinstance(card, dict):
                raise TarotError(f"card {key!r} must be an object")
            name = str(card.get("name", ""))
            names[key] = name
            infos[name.split("(")[0]] = _card_info(card.get("info"))
        formations = {
            key: Formation(
                cards_num=int(value.get("cards_num", 0)),
                is_cut=bool(value.get("is_cut", False)),
                represent=[list(row) for row in value.get("represent", [])],
            )
            for key, value in spreads.items()
            if isinstance(value, dict)
        }
        return cls(names, infos, formations)

    def _make_draw(self, index: int, rng: Any) -> Draw:
        reversed_ = rng.randrange(2) == 1
        return Draw(index, reversed_, self.names.get(str(index), ""))

    def draw(self, n: int, rng: Any) -> list[Draw]:
        """Draw ``n`` distinct cards, each upright or reversed."""
        if n <= 0:
            raise TarotError("张数必须为正")
        if n > CARD_COUNT:
            raise TarotError("抽取张数过多")
        if n == 1:
            return [self._make_draw(rng.randrange(CARD_COUNT), rng)]
        return [self._make_draw(i, rng) for i in rng.sample(range(CARD_COUNT), n)]

    def interpret(self, name: str) -> CardInfo:
        """Return the meaning of a card by its short name."""
        try:
            return self.infos[name]
        except KeyError:
            raise TarotError(f"没有找到{name}噢~") from None

    def lay_formation(self, name: str, rng: Any) -> tuple[str, list[Draw]]:
        """Lay out a spread, returning its description and the cards."""
        try:
            formation = self.formations[name]
        except KeyError:
            raise TarotError(f"没有找到{name}噢~") from None
        draws = self.draw(formation.cards_num, rng)
        meanings = formation.represent[0] if formation.represent else []
        if len(meanings) < len(draws):
            raise TarotError(f"formation {name!r} lacks position meanings")
        text = "".join(
            f"{meaning}: {d.position} 的 {d.name}\n" for meaning, d in zip(meanings, draws)
        )
        return text, draws