from urllib.parse import parse_qs

import responses

from groupbot.nbnhhsh import GUESS_URL, format_reply, guess, parse_command, parse_guess


def test_parse_command_variants():
    assert parse_command("?? yyds") == "yyds"
    assert parse_command("？yyds") == "yyds"
    assert parse_command("?xswl") == "xswl"


def test_parse_command_rejects():
    assert parse_command("??? yyds") is None
    assert parse_command("?? ABC") is None
    assert parse_command("yyds") is None


def test_parse_guess_trans():
    payload = '[{"name": "yyds", "trans": ["永远的神", "yyds"]}]'
    assert parse_guess(payload) == ["永远的神", "yyds"]


def test_parse_guess_inputting_fallback():
    payload = '[{"name": "qwe", "inputting": ["去玩儿"]}]'
    assert parse_guess(payload) == ["去玩儿"]


def test_parse_guess_empty():
    assert parse_guess("[]") == []
    assert parse_guess('[{"name": "q"}]') == []


def test_guess_posts_form():
    with responses.RequestsMock() as rsps:
        rsps.add(responses.POST, GUESS_URL, json=[{"name": "yyds", "trans": ["永远的神"]}])
        assert guess("yyds") == ["永远的神"]
        assert parse_qs(rsps.calls[0].request.body) == {"text": ["yyds"]}


def test_format_reply():
    assert format_reply("yyds", ["a", "b"]) == "yyds: a, b"
    assert format_reply("k", []) == "k: "