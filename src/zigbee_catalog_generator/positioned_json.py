"""Recursive-descent JSON parser that records the source line of every object key.

The parser is lenient in two ways the device definition files rely on: a stray
comma before a closing ``}`` or ``]`` is accepted, and double-quoted strings
that start with ``/Date(<milliseconds>`` are decoded into UTC timestamps.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
import re
from typing import ClassVar, Optional, TypeAlias, Union

from .json_types import JSONValue, MutableJSONObject, PositionedKey

_WHITESPACE = " \t\r\n"
_SIMPLE_ESCAPES = {
    '"': '"',
    "\\": "\\",
    "/": "/",
    "b": "\b",
    "f": "\f",
    "n": "\n",
    "r": "\r",
    "t": "\t",
}

_NUMBER_RE = re.compile(r"[+-]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?")
_WORD_RE = re.compile(r"[A-Za-z_][A-Za-z0-9_]*")
_DATE_ENVELOPE_RE = re.compile(r"/Date\((?P<millis>[+-]?\d+)")
_REPLACEMENT_CHARACTER = "\ufffd"

_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)
_INT64_MIN = -(2**63)
_INT64_MAX = 2**63 - 1


class JSONParseError(RuntimeError):
    """Raised inside the parser when the token stream is malformed."""

    def __init__(self, message: str, *, line: int, column: int) -> None:
        super().__init__(f"{message} at line {line}, column {column}")
        self.message = message
        self.line = line
        self.column = column


@dataclass(frozen=True)
class ParsedJSON:
    """Successful parse result."""

    value: JSONValue
    is_error: ClassVar[bool] = False


@dataclass(frozen=True)
class ParseFailure:
    """Parse result describing why the text is not acceptable JSON."""

    message: str
    line: int
    column: int
    is_error: ClassVar[bool] = True

    def describe(self) -> str:
        """Return the message with its position."""
        return f"{self.message} (line {self.line}, column {self.column})"


ParseResult: TypeAlias = Union[ParsedJSON, ParseFailure]


def parse_json(text: str) -> ParseResult:
    """Parse one JSON value from ``text``.

    Malformed input never raises; the returned result reports ``is_error``
    instead. Anything after the first complete value is ignored.

    Args:
        text (str): Raw JSON document text.

    Returns:
        ParseResult: ``ParsedJSON`` with the value tree or ``ParseFailure``.
    """
    cursor = _Cursor(text)
    try:
        value = _parse_value(cursor)
    except JSONParseError as exc:
        return ParseFailure(message=exc.message, line=exc.line, column=exc.column)
    except RecursionError:
        line, column = cursor.position()
        return ParseFailure(message="JSON nesting is too deep", line=line, column=column)
    return ParsedJSON(value=value)


def decode_legacy_date(text: str) -> Optional[datetime]:
    """Decode a ``/Date(<milliseconds>)/`` string into a UTC timestamp.

    Only the ``/Date(<integer>`` prefix is checked; whatever follows the integer
    (offset, closing ``)/``) is ignored. Returns ``None`` when the prefix is
    missing, the integer does not fit a signed 64-bit value, or the instant is
    out of ``datetime`` range.
    """
    match = _DATE_ENVELOPE_RE.match(text)
    if match is None:
        return None
    millis = int(match.group("millis"))
    if not _INT64_MIN <= millis <= _INT64_MAX:
        return None
    # Whole seconds, truncated toward zero.
    seconds = abs(millis) // 1000
    if millis < 0:
        seconds = -seconds
    try:
        return _EPOCH + timedelta(seconds=seconds)
    except OverflowError:
        return None


class _Cursor:
    """Position in the source text with line tracking."""

    def __init__(self, text: str) -> None:
        self.text = text
        self.pos = 0
        self.line = 1
        self._line_start = 0
        self.skip_whitespace()

    def position(self) -> tuple[int, int]:
        return self.line, self.pos - self._line_start + 1

    def error(self, message: str) -> JSONParseError:
        line, column = self.position()
        return JSONParseError(message, line=line, column=column)

    def peek(self) -> str:
        if self.pos < len(self.text):
            return self.text[self.pos]
        return ""

    def advance(self, count: int = 1) -> None:
        end = min(self.pos + count, len(self.text))
        while self.pos < end:
            if self.text[self.pos] == "\n":
                self.line += 1
                self._line_start = self.pos + 1
            self.pos += 1

    def skip_whitespace(self) -> None:
        while self.pos < len(self.text) and self.text[self.pos] in _WHITESPACE:
            self.advance()

    def take_char(self, char: str) -> bool:
        """Consume ``char`` and following whitespace when it is next."""
        if self.peek() != char:
            return False
        self.advance()
        self.skip_whitespace()
        return True

    def pass_char(self, char: str) -> None:
        if not self.take_char(char):
            raise self.error(f"missing '{char}'")

    def take_word(self, word: str) -> bool:
        match = _WORD_RE.match(self.text, self.pos)
        if match is None or match.group() != word:
            return False
        self.advance(len(word))
        self.skip_whitespace()
        return True

    def match_number(self) -> Optional[re.Match[str]]:
        return _NUMBER_RE.match(self.text, self.pos)

    def is_string(self) -> bool:
        return self.peek() in ('"', "'")

    def read_string(self) -> str:
        quote = self.peek()
        if quote not in ('"', "'"):
            raise self.error("missing string")
        self.advance()
        chunks: list[str] = []
        while True:
            char = self.peek()
            if char == "":
                raise self.error("unterminated string")
            if char == quote:
                self.advance()
                break
            if char == "\n":
                raise self.error("unterminated string")
            if char == "\\":
                self.advance()
                chunks.append(self._read_escape())
                continue
            chunks.append(char)
            self.advance()
        self.skip_whitespace()
        return "".join(chunks)

    def _read_escape(self) -> str:
        char = self.peek()
        if char == "":
            raise self.error("unterminated string")
        if char == "u":
            self.advance()
            code = self._read_hex4()
            if 0xD800 <= code <= 0xDBFF and self.text.startswith("\\u", self.pos):
                saved = self.pos
                self.advance(2)
                low = self._read_hex4()
                if 0xDC00 <= low <= 0xDFFF:
                    return chr(0x10000 + ((code - 0xD800) << 10) + (low - 0xDC00))
                self.pos = saved
            # Unpaired surrogates cannot be encoded as UTF-8.
            if 0xD800 <= code <= 0xDFFF:
                return _REPLACEMENT_CHARACTER
            return chr(code)
        self.advance()
        return _SIMPLE_ESCAPES.get(char, char)

    def _read_hex4(self) -> int:
        digits = self.text[self.pos : self.pos + 4]
        if len(digits) != 4 or any(c not in "0123456789abcdefABCDEF" for c in digits):
            raise self.error("invalid unicode escape")
        self.advance(4)
        return int(digits, 16)


def _parse_value(cursor: _Cursor) -> JSONValue:
    number = cursor.match_number()
    if number is not None:
        cursor.advance(len(number.group()))
        cursor.skip_whitespace()
        return float(number.group())

    if cursor.is_string():
        double_quoted = cursor.peek() == '"'
        text = cursor.read_string()
        if double_quoted:
            timestamp = decode_legacy_date(text)
            if timestamp is not None:
                return timestamp
        return text

    if cursor.take_word("null"):
        return None
    if cursor.take_word("true"):
        return True
    if cursor.take_word("false"):
        return False

    if cursor.take_char("{"):
        return _parse_object(cursor)
    if cursor.take_char("["):
        return _parse_array(cursor)

    raise cursor.error("unrecognized JSON element")


def _parse_object(cursor: _Cursor) -> MutableJSONObject:
    mapping: MutableJSONObject = {}
    while not cursor.take_char("}"):
        line = cursor.line
        key = PositionedKey(cursor.read_string(), line)
        cursor.pass_char(":")
        value = _parse_value(cursor)
        if key not in mapping:
            mapping[key] = value
        # A stray ',' before the closing brace is allowed.
        if cursor.take_char("}"):
            break
        cursor.pass_char(",")
    return mapping


def _parse_array(cursor: _Cursor) -> list[JSONValue]:
    items: list[JSONValue] = []
    while not cursor.take_char("]"):
        items.append(_parse_value(cursor))
        # A stray ',' before the closing bracket is allowed.
        if cursor.take_char("]"):
            break
        cursor.pass_char(",")
    return items


__all__ = [
    "JSONParseError",
    "ParseFailure",
    "ParseResult",
    "ParsedJSON",
    "decode_legacy_date",
    "parse_json",
]
