from groupbot.word_count import (
    DEFAULT_MESSAGES,
    MAX_MESSAGES,
    count_words,
    is_chinese_word,
    load_stopwords,
    parse_command,
    rank_by_word_count,
)


def test_load_stopwords_sorted_and_strips_cr():
    words = load_stopwords("乙\r\n甲\r\n丙")
    assert words == sorted(words)
    assert set(words) == {"甲", "乙", "丙"}
    assert all("\r" not in w for w in words)


def test_is_chinese_word():
    assert is_chinese_word("你好")
    assert not is_chinese_word("hello")
    assert not is_chinese_word("你好a")
    assert not is_chinese_word("")


def test_count_words_skips_stopwords_and_non_chinese():
    stop = load_stopwords("世界")
    counts = count_words(["你好 世界 hello", "  ", "你好 朋友"], stop, str.split)
    assert counts == {"你好": 2, "朋友": 1}


def test_count_words_strips_pieces():
    counts = count_words(["x"], [], lambda _text: [" 朋友 ", "朋友"])
    assert counts == {"朋友": 2}


def test_rank_by_word_count_descending():
    ranked = rank_by_word_count({"甲": 1, "乙": 5, "丙": 3})
    assert [w for w, _ in ranked] == ["乙", "丙", "甲"]
    counts = [c for _, c in ranked]
    assert counts == sorted(counts, reverse=True)


def test_parse_command_defaults():
    assert parse_command("热词", 42) == (42, DEFAULT_MESSAGES)


def test_parse_command_explicit():
    assert parse_command("热词 123456 500", 42) == (123456, 500)


def test_parse_command_caps_count():
    assert parse_command("热词 123456 99999", 42) == (123456, MAX_MESSAGES)


def test_parse_command_rejects_other():
    assert parse_command("热词abc", 42) is None