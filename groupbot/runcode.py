"""Run code snippets on a remote online compiler and tidy up its output."""

from __future__ import annotations

import os
import re
from dataclasses import dataclass

import requests

API_URL = "https://tool.runoob.com/compile2.php"
REFERER = "https://c.runoob.com/"
USER_AGENT = (
    "Mozilla/5.0 (Windows NT 6.1; Win64; x64; rv:87.0) Gecko/20100101 Firefox/87.0"
)
TIMEOUT = 15.0
MAX_LINES = 30
MAX_CHARS = 1000
TRUNCATION_MARK = "\n............\n............"

_API_TOKEN = os.environ.get("GROUPBOT_RUNCODE_TOKEN", "")

_CSHARP = (
    "using System;\nnamespace HelloWorldApplication\n{\n   class HelloWorld\n   {\n"
    "      static void Main(string[] args)\n      {\n"
    "         Console.WriteLine(\"Hello World!\");\n      }\n   }\n}"
)
_CPP = (
    "#include <iostream>\nusing namespace std;\n\nint main()\n{\n"
    "   cout << \"Hello World\";\n   return 0;\n}"
)
_JS = "console.log(\"Hello World!\");"
_RUBY = "puts \"Hello World!\";"
_RUST = "fn main() {\n    println!(\"Hello World!\");\n}"
_KOTLIN = "fun main(args : Array<String>){\n    println(\"Hello World!\")\n}"
_TS = "const hello : string = \"Hello World!\"\nconsole.log(hello)"
_SHELL = "echo 'Hello World!'"
_PY3 = "print(\"Hello, World!\")"
_SWIFT = "var myString = \"Hello, World!\"\nprint(myString)"

TEMPLATES: dict[str, str] = {
    "py2": "print 'Hello World!'",
    "ruby": _RUBY,
    "rb": _RUBY,
    "php": "<?php\n\techo 'Hello World!';\n?>",
    "javascript": _JS,
    "js": _JS,
    "node.js": _JS,
    "scala": (
        "object Main {\n  def main(args:Array[String])\n  {\n"
        "    println(\"Hello World!\")\n  }\n\t\t\n}"
    ),
    "go": (
        "package main\n\nimport \"fmt\"\n\nfunc main() {\n"
        "   fmt.Println(\"Hello, World!\")\n}"
    ),
    "c": (
        "#include <stdio.h>\n\nint main()\n{\n   printf(\"Hello, World! \n\");\n"
        "   return 0;\n}"
    ),
    "c++": _CPP,
    "cpp": _CPP,
    "java": (
        "public class HelloWorld {\n    public static void main(String []args) {\n"
        "       System.out.println(\"Hello World!\");\n    }\n}"
    ),
    "rust": _RUST,
    "rs": _RUST,
    "c#": _CSHARP,
    "cs": _CSHARP,
    "csharp": _CSHARP,
    "shell": _SHELL,
    "bash": _SHELL,
    "erlang": (
        "% escript will ignore the first line\n\nmain(_) ->\n"
        "    io:format(\"Hello World!~n\")."
    ),
    "perl": "print \"Hello, World!\n\";",
    "python": _PY3,
    "py": _PY3,
    "swift": _SWIFT,
    "lua": _SWIFT,
    "pascal": "runcode Hello;\nbegin\n  writeln ('Hello, world!')\nend.",
    "kotlin": _KOTLIN,
    "kt": _KOTLIN,
    "r": "myString <- \"Hello, World!\"\nprint ( myString)",
    "vb": (
        "Module Module1\n\n    Sub Main()\n"
        "        Console.WriteLine(\"Hello World!\")\n    End Sub\n\nEnd Module"
    ),
    "typescript": _TS,
    "ts": _TS,
}

LANGUAGES: dict[str, tuple[str, str]] = {
    "py2": ("0", "py"),
    "ruby": ("1", "rb"),
    "rb": ("1", "rb"),
    "php": ("3", "php"),
    "javascript": ("4", "js"),
    "js": ("4", "js"),
    "node.js": ("4", "js"),
    "scala": ("5", "scala"),
    "go": ("6", "go"),
    "c": ("7", "c"),
    "c++": ("7", "cpp"),
    "cpp": ("7", "cpp"),
    "java": ("8", "java"),
    "rust": ("9", "rs"),
    "rs": ("9", "rs"),
    "c#": ("10", "cs"),
    "cs": ("10", "cs"),
    "csharp": ("10", "cs"),
    "shell": ("10", "sh"),
    "bash": ("10", "sh"),
    "erlang": ("12", "erl"),
    "perl": ("14", "pl"),
    "python": ("15", "py3"),
    "py": ("15", "py3"),
    "swift": ("16", "swift"),
    "lua": ("17", "lua"),
    "pascal": ("18", "pas"),
    "kotlin": ("19", "kt"),
    "kt": ("19", "kt"),
    "r": ("80", "r"),
    "vb": ("84", "vb"),
    "typescript": ("1010", "ts"),
    "ts": ("1010", "ts"),
}

_COMMAND = re.compile(r"^>runcode(raw)?\s(.+?)\s([\s\S]+)$")


class RunCodeError(Exception):
    """The remote compiler failed or reported an error."""


class UnsupportedLanguageError(RunCodeError):
    """The requested language is not supported."""

    def __init__(self, language: str) -> None:
        super().__init__(f"unsupported language: {language}")
        self.language = language


@dataclass(frozen=True)
class RunCommand:
    """A parsed ``>runcode`` chat command."""

    raw: bool
    language: str
    code: str


def _unescape_cq(text: str) -> str:
    return (
        text.replace("&#91;", "[")
        .replace("&#93;", "]")
        .replace("&#44;", ",")
        .replace("&amp;", "&")
    )


def parse_command(text: str) -> RunCommand | None:
    """Parse a ``>runcode[raw] <language> <code>`` message, or return None."""
    match = _COMMAND.match(text)
    if match is None:
        return None
    return RunCommand(
        raw=match.group(1) is not None,
        language=match.group(2).lower(),
        code=_unescape_cq(match.group(3)),
    )


def lookup_language(language: str) -> tuple[str, str]:
    """Return the (language id, file extension) pair for a language name."""
    try:
        return LANGUAGES[language.lower()]
    except KeyError:
        raise UnsupportedLanguageError(language) from None


def template_for(language: str) -> str:
    """Return the hello-world template of a language."""
    try:
        return TEMPLATES[language.lower()]
    except KeyError:
        raise UnsupportedLanguageError(language) from None


def run_code(code: str, language: str) -> str:
    """Run ``code`` remotely and return its trimmed output."""
    lang_id, ext = lookup_language(language)
    headers = {
        "Content-Type": "application/x-www-form-urlencoded; charset=UTF-8",
        "Referer": REFERER,
        "User-Agent": USER_AGENT,
    }
    form = {
        "code": code,
        "token": _API_TOKEN,
        "stdin": "",
        "language": lang_id,
        "fileext": ext,
    }
    try:
        response = requests.post(API_URL, data=form, headers=headers, timeout=TIMEOUT)
    except requests.RequestException as exc:
        raise RunCodeError(str(exc)) from exc
    if response.status_code != 200:
        raise RunCodeError("code not 200")
    try:
        content = response.json()
    except ValueError:
        content = {}
    if not isinstance(content, dict):
        content = {}
    errors = content.get("errors")
    errors = errors if isinstance(errors, str) else ""
    if errors != "\n\n":
        raise RunCodeError(cut_too_long(clear_newline_suffix(errors)))
    output = content.get("output")
    output = output if isinstance(output, str) else ""
    return cut_too_long(clear_newline_suffix(output))


def clear_newline_suffix(text: str) -> str:
    """Strip every trailing newline."""
    return text.rstrip("\n")


def cut_too_long(text: str) -> str:
    """Truncate text after 30 line breaks or 1000 characters."""
    count = 0
    last = len(text) - 1
    for i, char in enumerate(text):
        if char == "\r" and i < last and text[i + 1] == "\n":
            pass
        elif char in "\n\r":
            count += 1
        if count > MAX_LINES or i > MAX_CHARS:
            return text[: i - 1] + TRUNCATION_MARK
    return text