"""A word guessing game with coloured feedback."""

from __future__ import annotations

import enum
import io
from typing import Sequence
from bisect import bisect_left

from PIL import Image, ImageDraw, ImageFont

CLASSES: dict[str, int] = {"": 5, "五阶": 5, "六阶": 6, "七阶": 7}

_SIDE = 20
_SPACE = 10
_WHITE = (255, 255, 255, 255)


class WordleError(Exception):
    """A guess could not be accepted."""


class LengthNotEnoughError(WordleError):
    """The guess has the wrong length."""

    def __init__(self) -> None:
        super().__init__("length not enough")


class UnknownWordError(WordleError):
    """The guess is not in the dictionary."""

    def __init__(self) -> None:
        super().__init__("unknown word")


class TimesRunOutError(WordleError):
    """No guesses are left."""

    def __init__(self) -> None:
        super().__init__("times run out")


class LetterState(enum.Enum):
    """Feedback for one cell, valued by its colour."""

    MATCH = (125, 166, 108, 255)
    EXIST = (199, 183, 96, 255)
    NOTEXIST = (123, 123, 123, 255)
    UNDONE = (219, 219, 219, 255)


def class_for(name: str) -> int:
    """Return the word length of a difficulty name."""
    try:
        return CLASSES[name]
    except KeyError:
        raise WordleError(f"unknown class: {name}") from None


def load_word_list(text: str) -> list[str]:
    """Split a word file into a sorted list of lines."""
    return sorted(text.split("\n"))


class WordleGame:
    """One game: a target word and the guesses made so far."""

    def __init__(self, target: str, dictionary: Sequence[str]) -> None:
        self.target = target
        self.dictionary = sorted(dictionary)
        self.guesses: list[str] = []
        self.max_guesses = len(target) + 1

    def _known(self, word: str) -> bool:
        i = bisect_left(self.dictionary, word)
        return i < len(self.dictionary) and self.dictionary[i] == word

    def guess(self, word: str) -> bool:
        """Record a guess and return whether it wins.

        Raises TimesRunOutError once the last guess is used up without a win.
        """
        if len(self.guesses) >= self.max_guesses:
            raise TimesRunOutError()
        word = word.lower()
        win = word == self.target
        if not win:
            if len(word) != len(self.target):
                raise LengthNotEnoughError()
            if not self._known(word):
                raise UnknownWordError()
        self.guesses.append(word)
        if not win and len(self.guesses) >= self.max_guesses:
            raise TimesRunOutError()
        return win

    def states(self) -> list[list[LetterState]]:
        """Return the feedback for every recorded guess."""
        rows = []
        for word in self.guesses[: self.max_guesses]:
            row = []
            for letter, wanted in zip(word, self.target):
                if letter == wanted:
                    row.append(LetterState.MATCH)
                elif letter in self.target:
                    row.append(LetterState.EXIST)
                else:
                    row.append(LetterState.NOTEXIST)
            rows.append(row)
        return rows

    def render(self) -> bytes:
        """Draw the board as PNG bytes."""
        size = len(self.target)
        step = _SIDE + 4
        width = step * size + _SPACE * 2 - 4
        height = step * (size + 1) + _SPACE * 2 - 4
        image = Image.new("RGBA", (width, height), _WHITE)
        draw = ImageDraw.Draw(image)
        font = ImageFont.load_default()
        states = self.states()
        for i in range(size + 1):
            for j in range(size):
                x = _SPACE + j * step
                y = _SPACE + i * step
                if i < len(states):
                    draw.rectangle(
                        (x, y, x + _SIDE - 1, y + _SIDE - 1), fill=states[i][j].value
                    )
                    draw.text(
                        (x + 7, y + 4), self.guesses[i][j].upper(), fill=_WHITE, font=font
                    )
                else:
                    draw.rectangle(
                        (x + 1, y + 1, x + _SIDE - 2, y + _SIDE - 2),
                        outline=LetterState.UNDONE.value,
                        width=1,
                    )
        buffer = io.BytesIO()
        image.save(buffer, format="PNG")
        return buffer.getvalue()