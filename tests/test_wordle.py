import io

import pytest
from PIL import Image

from groupbot.wordle import (
    LengthNotEnoughError,
    LetterState,
    TimesRunOutError,
    UnknownWordError,
    WordleError,
    WordleGame,
    class_for,
    load_word_list,
)

DICTIONARY = ["apple", "angle", "crane", "plate", "stone"]


@pytest.fixture
def game():
    return WordleGame("apple", DICTIONARY)


def test_class_for():
    assert class_for("") == 5
    assert class_for("六阶") == 6
    assert class_for("七阶") == 7
    with pytest.raises(WordleError):
        class_for("八阶")


def test_load_word_list_sorted():
    words = load_word_list("stone\napple\ncrane")
    assert words == sorted(words)
    assert set(words) == {"stone", "apple", "crane"}


def test_wrong_length(game):
    with pytest.raises(LengthNotEnoughError):
        game.guess("app")
    assert game.guesses == []


def test_unknown_word(game):
    with pytest.raises(UnknownWordError):
        game.guess("zzzzz")


def test_win_is_case_insensitive(game):
    assert game.guess("APPLE") is True
    assert game.states() == [[LetterState.MATCH] * 5]


def test_wrong_guess_not_win(game):
    assert game.guess("crane") is False
    assert game.guesses == ["crane"]


def test_states_feedback(game):
    game.guess("angle")
    assert game.states() == [[
        LetterState.MATCH,
        LetterState.NOTEXIST,
        LetterState.NOTEXIST,
        LetterState.MATCH,
        LetterState.MATCH,
    ]]


def test_exist_state(game):
    game.guess("plate")
    row = game.states()[0]
    assert row[0] is LetterState.EXIST
    assert row[4] is LetterState.MATCH


def test_times_run_out(game):
    for _ in range(game.max_guesses - 1):
        assert game.guess("stone") is False
    with pytest.raises(TimesRunOutError):
        game.guess("stone")
    assert len(game.guesses) == game.max_guesses


def test_win_on_last_guess(game):
    for _ in range(game.max_guesses - 1):
        game.guess("stone")
    assert game.guess("apple") is True


def test_render_png(game):
    data = game.render()
    assert data[:8] == b"\x89PNG\r\n\x1a\n"
    with Image.open(io.BytesIO(data)) as image:
        assert image.size == (136, 160)


def test_render_colours_first_cell(game):
    game.guess("angle")
    with Image.open(io.BytesIO(game.render())) as image:
        pixel = image.convert("RGBA").getpixel((11, 11))
    assert pixel == LetterState.MATCH.value