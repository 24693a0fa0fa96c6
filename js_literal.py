# js_literal.py
"""
Reader for JavaScript data literals.

Turns the source text of an array/object literal, as it appears in a
minified bundle, into plain Python values (list, dict, str, int, float,
bool, None). Only literal syntax is understood: there is no evaluation,
so identifiers other than the keyword constants are rejected.
"""

import logging
import math
import re
from typing import Any, List, NamedTuple

from errors import DecodeError

logger = logging.getLogger(__name__)

PUNCTUATION = "[]{}:,+-!"
DIGITS = "0123456789"

KEYWORD_VALUES = {
    "true": True,
    "false": False,
    "null": None,
    "undefined": None,
    "NaN": math.nan,
    "Infinity": math.inf,
}

NUMBER_RE = re.compile(
    r"""
    0[xX][0-9a-fA-F_]+n?
    | 0[oO][0-7_]+n?
    | 0[bB][01_]+n?
    | (?:\d[\d_]*(?:\.[\d_]*)?|\.\d[\d_]*)(?:[eE][+-]?\d[\d_]*)?n?
    """,
    re.VERBOSE | re.ASCII,
)

SIMPLE_ESCAPES = {
    "n": "\n",
    "t": "\t",
    "r": "\r",
    "b": "\b",
    "f": "\f",
    "v": "\v",
}

LINE_TERMINATORS = "\n\r\u2028\u2029"


class Token(NamedTuple):
    kind: str  # punct | string | number | ident | eof
    value: Any
    pos: int


def _is_ident_start(ch: str) -> bool:
    return ch == "$" or ch == "_" or ch.isalpha()


def _is_ident_part(ch: str) -> bool:
    return ch == "$" or ch == "_" or ch.isalnum() or ch in "\u200c\u200d"


def _join_surrogates(value: str) -> str:
    """Combine \\uD83D\\uDE00-style pairs; raises UnicodeDecodeError on a lone surrogate."""
    return value.encode("utf-16", "surrogatepass").decode("utf-16")


def _is_truthy(value) -> bool:
    if isinstance(value, float) and math.isnan(value):
        return False
    return bool(value)


class Tokenizer:
    def __init__(self, text: str):
        self.text = text
        self.pos = 0

    def error(self, message: str, pos: int = None) -> DecodeError:
        return DecodeError(message, self.text, self.pos if pos is None else pos)

    def tokens(self) -> List[Token]:
        out = []
        while True:
            token = self.next_token()
            out.append(token)
            if token.kind == "eof":
                return out

    def _skip_blank(self):
        text = self.text
        n = len(text)
        while self.pos < n:
            ch = text[self.pos]
            if ch.isspace() or ch == "\ufeff":
                self.pos += 1
            elif text.startswith("//", self.pos):
                while self.pos < n and text[self.pos] not in LINE_TERMINATORS:
                    self.pos += 1
            elif text.startswith("/*", self.pos):
                end = text.find("*/", self.pos + 2)
                if end == -1:
                    raise self.error("Unterminated block comment")
                self.pos = end + 2
            else:
                return

    def next_token(self) -> Token:
        self._skip_blank()
        text = self.text
        start = self.pos
        if start >= len(text):
            return Token("eof", None, start)
        ch = text[start]
        if ch in PUNCTUATION:
            self.pos += 1
            return Token("punct", ch, start)
        if ch in "'\"`":
            return Token("string", self._read_string(), start)
        if ch in DIGITS or (ch == "." and text[start + 1:start + 2] in tuple(DIGITS)):
            return Token("number", self._read_number(), start)
        if _is_ident_start(ch):
            end = start + 1
            while end < len(text) and _is_ident_part(text[end]):
                end += 1
            self.pos = end
            return Token("ident", text[start:end], start)
        raise self.error(f"Unexpected character {ch!r}")

    def _read_number(self):
        match = NUMBER_RE.match(self.text, self.pos)
        literal = match.group(0)
        end = match.end()
        if end < len(self.text) and (_is_ident_part(self.text[end]) or self.text[end] == "."):
            raise self.error(f"Invalid number literal {self.text[self.pos:end + 1]!r}")
        self.pos = end
        if literal.startswith("_") or literal.endswith("_") or "__" in literal:
            raise self.error(f"Misplaced numeric separator in {literal!r}")
        cleaned = literal.replace("_", "")
        big_int = cleaned.endswith("n")
        if big_int:
            cleaned = cleaned[:-1]
        prefix = cleaned[:2].lower()
        if prefix == "0x":
            return int(cleaned[2:], 16)
        if prefix == "0o":
            return int(cleaned[2:], 8)
        if prefix == "0b":
            return int(cleaned[2:], 2)
        if "." in cleaned or "e" in cleaned.lower():
            if big_int:
                raise self.error(f"Invalid BigInt literal {literal!r}")
            return float(cleaned)
        if len(cleaned) > 1 and cleaned[0] == "0" and all(c in "01234567" for c in cleaned):
            # legacy octal, e.g. 017
            return int(cleaned, 8)
        return int(cleaned)

    def _read_string(self) -> str:
        text = self.text
        quote = text[self.pos]
        start = self.pos
        self.pos += 1
        chunks = []
        n = len(text)
        while True:
            if self.pos >= n:
                raise self.error("Unterminated string literal", start)
            ch = text[self.pos]
            if ch == quote:
                self.pos += 1
                break
            if ch == "\\":
                chunks.append(self._read_escape())
                continue
            if quote == "`":
                if text.startswith("${", self.pos):
                    raise self.error("Template literal interpolation is not data")
                if ch == "\r":
                    # template literals normalise CRLF and CR to LF
                    self.pos += 2 if text.startswith("\r\n", self.pos) else 1
                    chunks.append("\n")
                    continue
            elif ch in "\n\r":
                raise self.error("Line break inside string literal")
            chunks.append(ch)
            self.pos += 1
        try:
            return _join_surrogates("".join(chunks))
        except UnicodeDecodeError:
            raise self.error("Lone surrogate in string literal", start) from None

    def _read_hex(self, count: int) -> int:
        digits = self.text[self.pos:self.pos + count]
        if len(digits) != count or not all(c in "0123456789abcdefABCDEF" for c in digits):
            raise self.error("Invalid hexadecimal escape")
        self.pos += count
        return int(digits, 16)

    def _read_escape(self) -> str:
        text = self.text
        self.pos += 1
        if self.pos >= len(text):
            raise self.error("Unterminated escape sequence")
        ch = text[self.pos]
        self.pos += 1
        if ch in SIMPLE_ESCAPES:
            return SIMPLE_ESCAPES[ch]
        if ch == "x":
            return chr(self._read_hex(2))
        if ch == "u":
            if text.startswith("{", self.pos):
                end = text.find("}", self.pos)
                digits = text[self.pos + 1:end] if end != -1 else ""
                if not digits or not all(c in "0123456789abcdefABCDEF" for c in digits):
                    raise self.error("Invalid unicode code point escape")
                code = int(digits, 16)
                if code > 0x10FFFF:
                    raise self.error("Unicode code point out of range")
                self.pos = end + 1
                return chr(code)
            return chr(self._read_hex(4))
        if ch == "\r":
            if text.startswith("\n", self.pos):
                self.pos += 1
            return ""
        if ch in "\n\u2028\u2029":
            return ""
        if ch in "01234567":
            digits = ch
            limit = 3 if ch in "0123" else 2
            while len(digits) < limit and self.pos < len(text) and text[self.pos] in "01234567":
                digits += text[self.pos]
                self.pos += 1
            return chr(int(digits, 8))
        return ch


class LiteralParser:
    """Recursive-descent reader over the token stream."""

    def __init__(self, text: str):
        self.text = text
        self.tokens = Tokenizer(text).tokens()
        self.index = 0

    def error(self, message: str, token: Token) -> DecodeError:
        return DecodeError(message, self.text, token.pos)

    def peek(self) -> Token:
        return self.tokens[self.index]

    def advance(self) -> Token:
        token = self.tokens[self.index]
        if token.kind != "eof":
            self.index += 1
        return token

    def expect(self, punct: str) -> Token:
        token = self.advance()
        if token.kind != "punct" or token.value != punct:
            raise self.error(f"Expected {punct!r}, got {self._describe(token)}", token)
        return token

    @staticmethod
    def _describe(token: Token) -> str:
        if token.kind == "eof":
            return "end of input"
        return f"{token.kind} {token.value!r}"

    def _is_punct(self, token: Token, punct: str) -> bool:
        return token.kind == "punct" and token.value == punct

    def parse(self) -> Any:
        value = self.parse_value()
        token = self.peek()
        if token.kind != "eof":
            raise self.error(f"Unexpected {self._describe(token)} after literal", token)
        return value

    def parse_value(self) -> Any:
        token = self.advance()
        if token.kind == "punct":
            if token.value == "[":
                return self.parse_array()
            if token.value == "{":
                return self.parse_object()
            if token.value in "+-":
                return self.parse_signed(token)
            if token.value == "!":
                operand = self.parse_value()
                if isinstance(operand, (list, dict)):
                    raise self.error("Negation of a non-primitive value", token)
                return not _is_truthy(operand)
        elif token.kind in ("string", "number"):
            return token.value
        elif token.kind == "ident":
            if token.value in KEYWORD_VALUES:
                return KEYWORD_VALUES[token.value]
            if token.value == "void":
                self.parse_value()
                return None
            raise self.error(f"Identifier {token.value!r} is not a literal value", token)
        raise self.error(f"Unexpected {self._describe(token)}", token)

    def parse_signed(self, sign: Token) -> Any:
        operand = self.parse_value()
        if isinstance(operand, bool) or not isinstance(operand, (int, float)):
            raise self.error(f"Unary {sign.value!r} applied to a non-number", sign)
        return -operand if sign.value == "-" else operand

    def parse_array(self) -> list:
        items = []
        while True:
            token = self.peek()
            if self._is_punct(token, "]"):
                self.advance()
                return items
            if self._is_punct(token, ","):
                raise self.error("Array holes are not supported", token)
            items.append(self.parse_value())
            token = self.advance()
            if self._is_punct(token, "]"):
                return items
            if not self._is_punct(token, ","):
                raise self.error(f"Expected ',' or ']' in array, got {self._describe(token)}", token)

    def parse_key(self) -> str:
        token = self.advance()
        if token.kind in ("string", "ident"):
            return token.value
        if token.kind == "number":
            return _number_key(token.value)
        raise self.error(f"Invalid property key {self._describe(token)}", token)

    def parse_object(self) -> dict:
        obj = {}
        while True:
            token = self.peek()
            if self._is_punct(token, "}"):
                self.advance()
                return obj
            key = self.parse_key()
            colon = self.peek()
            if not self._is_punct(colon, ":"):
                raise self.error(f"Expected ':' after key {key!r}, got {self._describe(colon)}", colon)
            self.advance()
            obj[key] = self.parse_value()
            token = self.advance()
            if self._is_punct(token, "}"):
                return obj
            if not self._is_punct(token, ","):
                raise self.error(f"Expected ',' or '}}' in object, got {self._describe(token)}", token)


def _number_key(value) -> str:
    # numeric keys become strings the same way JS property names do
    if isinstance(value, float) and value.is_integer() and abs(value) < 1e21:
        return str(int(value))
    return str(value)


def parse_literal(raw: str) -> list:
    """
    Decode the array literal `raw` into a list of Python values.
    Raises DecodeError for anything that is not literal data or not an array.
    """
    try:
        value = LiteralParser(raw).parse()
    except RecursionError:
        raise DecodeError("Literal is nested too deeply", raw) from None
    if not isinstance(value, list):
        raise DecodeError(f"Expected an array literal, got {type(value).__name__}", raw, 0)
    logger.info("Decoded %d records from literal", len(value))
    return value
