from datetime import datetime, timedelta

import pytest

from groupbot.score import (
    LEVELS,
    SCOREMAX,
    ScoreDB,
    get_hour_word,
    get_level,
    next_level_score,
)


@pytest.fixture
def db():
    with ScoreDB() as database:
        yield database


def test_get_level_exact_thresholds():
    for level, threshold in enumerate(LEVELS):
        assert get_level(threshold) == level


def test_get_level_between_thresholds_and_out_of_range():
    assert get_level(3) == get_level(2)
    assert get_level(SCOREMAX + 1) == -1
    assert get_level(-1) == -1


@pytest.mark.parametrize(
    "hour,word",
    [(7, "早上好"), (12, "中午好"), (15, "下午好"), (20, "晚上好"), (2, "凌晨好")],
)
def test_get_hour_word(hour, word):
    assert get_hour_word(datetime(2022, 7, 1, hour)) == word


def test_next_level_score():
    assert next_level_score(10) == SCOREMAX
    assert next_level_score(0) == LEVELS[1]
    assert next_level_score(3) == LEVELS[4]


def test_get_score_creates_zero(db):
    assert db.get_score(42) == 0
    assert db.top_scores(10) == [(42, 0)]


def test_set_score_round_trip(db):
    db.set_score(1, 7)
    db.set_score(1, 9)
    assert db.get_score(1) == 9


def test_sign_in_count_round_trip(db):
    now = datetime(2022, 7, 1, 8, 30)
    db.set_sign_in_count(5, 3, now)
    count, updated = db.get_sign_in(5)
    assert count == 3
    assert updated == now


def test_first_sign_in_awards_point(db):
    now = datetime(2022, 7, 1, 8)
    result = db.sign_in(1, now)
    assert not result.already_signed
    assert result.score == 1
    assert result.level == get_level(1)
    assert result.hour_word == "早上好"
    assert result.date_word == "07/01"
    assert db.get_score(1) == 1


def test_second_sign_in_same_day_refused(db):
    now = datetime(2022, 7, 1, 8)
    db.sign_in(1, now)
    again = db.sign_in(1, now + timedelta(hours=2))
    assert again.already_signed
    assert db.get_score(1) == 1


def test_sign_in_next_day_adds_again(db):
    now = datetime(2022, 7, 1, 8)
    db.sign_in(1, now)
    result = db.sign_in(1, now + timedelta(days=1))
    assert not result.already_signed
    assert result.score == 2


def test_sign_in_caps_score(db):
    db.set_score(3, SCOREMAX)
    result = db.sign_in(3, datetime(2022, 7, 1, 20))
    assert result.capped
    assert result.score == SCOREMAX
    assert db.get_score(3) == SCOREMAX


def test_top_scores_ordering_and_limit(db):
    for uid, score in [(1, 5), (2, 50), (3, 20)]:
        db.set_score(uid, score)
    assert db.top_scores(2) == [(2, 50), (3, 20)]
    scores = [s for _, s in db.top_scores(10)]
    assert scores == sorted(scores, reverse=True)