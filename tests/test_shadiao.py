import pytest
import requests
import responses

from groupbot import shadiao


def test_extract_shadiao_text():
    assert shadiao.extract_shadiao_text('{"data": {"text": "abc"}}') == "abc"


def test_extract_shadiao_text_missing_is_empty():
    assert shadiao.extract_shadiao_text('{"other": 1}') == ""
    assert shadiao.extract_shadiao_text("not json") == ""


def test_extract_lovelive_text():
    payload = b'{"returnObj": {"content": "sweet"}}'
    assert shadiao.extract_lovelive_text(payload) == "sweet"


def test_extract_duanzi_replaces_br():
    payload = '{"duanzi": "one<br>two<br>three"}'
    assert shadiao.extract_duanzi(payload) == "one\ntwo\nthree"


def test_extract_luther():
    page = (
        "<html><body><main role='main'><p class='larger'>Thou art vile</p>"
        "<p>other</p></main></body></html>"
    )
    assert shadiao.extract_luther(page) == "Thou art vile"


def test_extract_luther_missing_raises():
    with pytest.raises(ValueError):
        shadiao.extract_luther("<html><body><p>nothing</p></body></html>")


def test_fetch_shadiao_sends_referer():
    with responses.RequestsMock() as rsps:
        rsps.add(responses.GET, shadiao.CHP_URL, json={"data": {"text": "hello"}})
        assert shadiao.fetch("哄我") == "hello"
        assert rsps.calls[0].request.headers["Referer"] == shadiao.SD_REFERER


def test_fetch_duanzi_posts():
    with responses.RequestsMock() as rsps:
        rsps.add(responses.POST, shadiao.YDUANZI_URL, json={"duanzi": "a<br>b"})
        assert shadiao.fetch("讲个段子") == "a\nb"
        assert rsps.calls[0].request.method == "POST"


def test_fetch_lovelive():
    with responses.RequestsMock() as rsps:
        rsps.add(
            responses.GET, shadiao.GANHAI_URL, json={"returnObj": {"content": "bad"}}
        )
        assert shadiao.fetch("渣我") == "bad"


def test_fetch_http_error():
    with responses.RequestsMock() as rsps:
        rsps.add(responses.GET, shadiao.DU_URL, status=500)
        with pytest.raises(requests.HTTPError):
            shadiao.fetch("来碗毒鸡汤")


def test_fetch_unknown_command():
    with pytest.raises(ValueError):
        shadiao.fetch("nothing here")