"""Fetch short joke texts from a handful of public web APIs."""

from __future__ import annotations

import json
from typing import Any

import requests
from lxml import html as lxml_html

CHP_URL = "https://api.shadiao.app/chp"
DU_URL = "https://api.shadiao.app/du"
PYQ_URL = "https://api.shadiao.app/pyq"
YDUANZI_URL = "http://www.yduanzi.com/duanzi/getduanzi"
CHAYI_URL = "https://api.lovelive.tools/api/SweetNothings/Web/0"
GANHAI_URL = "https://api.lovelive.tools/api/SweetNothings/Web/1"
ERGOFABULOUS_URL = "https://ergofabulous.org/luther/?"
USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/96.0.4664.110 Safari/537.36"
)
SD_REFERER = "https://api.shadiao.app/"
YDUANZI_REFERER = "http://www.yduanzi.com/?utm_source=shadiao.app"
LOVELIVE_REFERER = "https://lovelive.tools/"
TIMEOUT = 30.0

_LUTHER_XPATH = '//main[@role="main"]/p[@class="larger"]/text()'
_MISSING = object()


def _get_path(data: Any, path: str) -> Any:
    for segment in path.split("."):
        if isinstance(data, dict):
            data = data.get(segment, _MISSING)
        elif isinstance(data, list) and segment.isdigit() and int(segment) < len(data):
            data = data[int(segment)]
        else:
            return _MISSING
        if data is _MISSING:
            return _MISSING
    return data


def _as_text(value: Any) -> str:
    if value is _MISSING or value is None:
        return ""
    if isinstance(value, str):
        return value
    if isinstance(value, bool):
        return "true" if value else "false"
    return json.dumps(value, ensure_ascii=False)


def _json_text(payload: str | bytes, path: str) -> str:
    try:
        data = json.loads(payload)
    except ValueError:
        return ""
    return _as_text(_get_path(data, path))


def extract_shadiao_text(payload: str | bytes) -> str:
    """Return ``data.text`` from a shadiao API reply."""
    return _json_text(payload, "data.text")


def extract_lovelive_text(payload: str | bytes) -> str:
    """Return ``returnObj.content`` from a lovelive API reply."""
    return _json_text(payload, "returnObj.content")


def extract_duanzi(payload: str | bytes) -> str:
    """Return the joke from a yduanzi reply with ``<br>`` turned into newlines."""
    return _json_text(payload, "duanzi").replace("<br>", "\n")


def extract_luther(html: str | bytes) -> str:
    """Return the insult text from an ergofabulous page."""
    tree = lxml_html.fromstring(html)
    nodes = tree.xpath(_LUTHER_XPATH)
    if not nodes:
        raise ValueError("no insult found in page")
    return str(nodes[0])


_COMMANDS: dict[str, tuple[str, str, str, Any]] = {
    "哄我": ("GET", CHP_URL, SD_REFERER, extract_shadiao_text),
    "来碗毒鸡汤": ("GET", DU_URL, SD_REFERER, extract_shadiao_text),
    "发个朋友圈": ("GET", PYQ_URL, SD_REFERER, extract_shadiao_text),
    "来碗绿茶": ("GET", CHAYI_URL, LOVELIVE_REFERER, extract_lovelive_text),
    "渣我": ("GET", GANHAI_URL, LOVELIVE_REFERER, extract_lovelive_text),
    "讲个段子": ("POST", YDUANZI_URL, YDUANZI_REFERER, extract_duanzi),
}


def fetch(command: str) -> str:
    """Fetch the reply text for a chat command."""
    if command == "马丁路德骂我":
        response = requests.get(ERGOFABULOUS_URL, timeout=TIMEOUT)
        response.raise_for_status()
        return extract_luther(response.content)
    try:
        method, url, referer, extract = _COMMANDS[command]
    except KeyError:
        raise ValueError(f"unknown command: {command}") from None
    headers = {"User-Agent": USER_AGENT}
    if referer:
        headers["Referer"] = referer
    response = requests.request(method, url, headers=headers, timeout=TIMEOUT)
    response.raise_for_status()
    return extract(response.content)