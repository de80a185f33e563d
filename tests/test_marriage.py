import sqlite3
from datetime import date

import pytest

from groupbot.marriage import (
    MSG_ALREADY_TOGETHER,
    MSG_NO_CONCUBINE,
    MSG_NOT_MARRIED,
    MSG_SINGLE_NOBLE_YOU,
    MSG_TA_HAS_WIFE,
    MSG_TA_IS_WIFE,
    MSG_TA_SINGLE,
    MSG_YOU_HAVE_WIFE,
    Couple,
    MarriageRegistry,
    Status,
    slice_name,
)

DAY = date(2022, 7, 15)
NEXT = date(2022, 7, 16)
GID = 1001


@pytest.fixture
def reg():
    registry = MarriageRegistry()
    yield registry
    registry.close()


def test_date_format_is_fixed(reg):
    assert reg.check_update(GID, DAY) == "2022/07/15"


def test_check_update_keeps_first_date(reg):
    first = reg.check_update(GID, DAY)
    assert reg.check_update(GID, NEXT) == first


def test_register_and_lookup(reg):
    reg.register(GID, 1, 2, "a", "b", DAY)
    couple, status = reg.lookup(GID, 1)
    assert status is Status.USER
    assert couple == Couple(1, 2, "a", "b", "2022/07/15")
    couple2, status2 = reg.lookup(GID, 2)
    assert status2 is Status.TARGET
    assert couple2 == couple
    assert reg.lookup(GID, 3) == (None, Status.SINGLE)


def test_ensure_today_resets_on_new_day(reg):
    reg.check_update(GID, DAY)
    reg.register(GID, 1, 2, "a", "b", DAY)
    assert reg.ensure_today(GID, DAY) is False
    assert reg.ensure_today(GID, NEXT) is True
    assert reg.lookup(GID, 1)[1] is Status.SINGLE
    assert reg.check_update(GID, NEXT) == "2022/07/16"


def test_roster_skips_single_nobles(reg):
    reg.register(GID, 1, 2, "a", "b", DAY)
    reg.register(GID, 3, 0, "", "", DAY)
    couples, number = reg.roster(GID)
    assert [c.user for c in couples] == [1]
    assert number == 2


def test_roster_empty(reg):
    assert reg.roster(GID) == ([], 0)


def test_divorce(reg):
    reg.register(GID, 1, 2, "a", "b", DAY)
    reg.register(GID, 3, 4, "c", "d", DAY)
    reg.divorce_wife(GID, 2)
    assert reg.lookup(GID, 1)[1] is Status.SINGLE
    reg.divorce_husband(GID, 3)
    assert reg.lookup(GID, 4)[1] is Status.SINGLE


def test_remarry_replaces_partner(reg):
    reg.register(GID, 1, 2, "a", "b", DAY)
    reg.remarry(GID, 1, 5, "a", "e", DAY)
    couple, status = reg.lookup(GID, 5)
    assert status is Status.TARGET
    assert couple.user == 1
    assert reg.lookup(GID, 2)[1] is Status.SINGLE


def test_remarry_missing_raises(reg):
    reg.register(GID, 1, 2, "a", "b", DAY)
    with pytest.raises(LookupError):
        reg.remarry(GID, 7, 8, "x", "y", DAY)


def test_divorce_unknown_group_raises(reg):
    with pytest.raises(sqlite3.OperationalError):
        reg.divorce_wife(999, 1)


def test_reset_all(reg):
    reg.register(GID, 1, 2, "a", "b", DAY)
    reg.register(2002, 3, 4, "c", "d", DAY)
    reg.reset("ALL", NEXT)
    assert reg.lookup(GID, 1)[1] is Status.SINGLE
    assert reg.lookup(2002, 3)[1] is Status.SINGLE


def test_check_single(reg):
    reg.check_update(GID, DAY)
    assert reg.check_single(GID, 1, 2, DAY) is None
    reg.register(GID, 1, 2, "a", "b", DAY)
    assert reg.check_single(GID, 1, 2, DAY) == MSG_ALREADY_TOGETHER
    assert reg.check_single(GID, 1, 9, DAY) == MSG_YOU_HAVE_WIFE
    assert reg.check_single(GID, 9, 1, DAY) == MSG_TA_HAS_WIFE
    assert reg.check_single(GID, 9, 2, DAY) == MSG_TA_IS_WIFE
    reg.register(GID, 5, 0, "", "", DAY)
    assert reg.check_single(GID, 5, 9, DAY) == MSG_SINGLE_NOBLE_YOU


def test_check_mistress(reg):
    reg.check_update(GID, DAY)
    reg.register(GID, 1, 2, "a", "b", DAY)
    assert reg.check_mistress(GID, 9, 1, DAY) is None
    assert reg.check_mistress(GID, 9, 8, DAY) == MSG_TA_SINGLE
    assert reg.check_mistress(GID, 1, 7, DAY) == MSG_NO_CONCUBINE
    assert reg.check_mistress(GID, 9, 9, DAY) is None
    assert reg.check_mistress(GID, 1, 1, NEXT) == MSG_TA_SINGLE


def test_check_married(reg):
    reg.check_update(GID, DAY)
    assert reg.check_married(GID, 1, DAY) == MSG_NOT_MARRIED
    reg.register(GID, 1, 2, "a", "b", DAY)
    assert reg.check_married(GID, 2, DAY) is None
    assert reg.check_married(GID, 2, NEXT) == MSG_NOT_MARRIED


def test_slice_name_short_unchanged():
    assert slice_name("abc", lambda c: 100) == "abc"


def test_slice_name_long_truncated():
    result = slice_name("abcdef", lambda c: 100)
    assert result.endswith("......")
    assert "abcdef".startswith(result[: -len("......")])
    assert len(result) < len("abcdef") + len("......")