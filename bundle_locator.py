# bundle_locator.py
import logging
import re
from typing import Iterator, List, Optional, Set, Tuple

from errors import NotFoundError

logger = logging.getLogger(__name__)

DEFAULT_MARKER = "U"
DELIMITERS = (";", ",")
REGEX_PRECEDERS = "(,=:[!&|?{};+-*%<>~^"


def _declaration_pattern(marker: str):
    return re.compile(r"\b(?:const|let|var)\s+" + re.escape(marker) + r"\s*=\s*\[")


def _skip_string(text: str, pos: int) -> int:
    """Return the index just past the string literal that opens at `pos`."""
    quote = text[pos]
    i = pos + 1
    n = len(text)
    while i < n:
        ch = text[i]
        if ch == "\\":
            i += 2
            continue
        if ch == quote:
            return i + 1
        i += 1
    return n


def _skip_comment(text: str, pos: int) -> int:
    if text.startswith("//", pos):
        end = text.find("\n", pos)
        return len(text) if end == -1 else end + 1
    end = text.find("*/", pos + 2)
    return len(text) if end == -1 else end + 2


def find_block_end(text: str, start: int) -> Optional[int]:
    """
    Scan from the opening bracket at `start` to its matching closing bracket.
    Brackets inside string literals and comments are ignored.
    Returns the index just past the closing bracket, or None when the
    block never balances.
    """
    depth = 0
    i = start
    n = len(text)
    while i < n:
        ch = text[i]
        if ch in "'\"`":
            i = _skip_string(text, i)
            continue
        if ch == "/" and i + 1 < n and text[i + 1] in "/*":
            i = _skip_comment(text, i)
            continue
        if ch in "[{(":
            depth += 1
        elif ch in "]})":
            depth -= 1
            if depth == 0:
                return i + 1
        i += 1
    return None


def _terminated(text: str, end: int) -> bool:
    rest = text[end:].lstrip()
    return not rest or rest[0] in DELIMITERS


def _skip_regex(text: str, pos: int) -> int:
    """Index just past the regex literal opening at `pos`, or pos + 1 if it is not one."""
    i = pos + 1
    n = len(text)
    in_class = False
    while i < n:
        ch = text[i]
        if ch == "\\":
            i += 2
            continue
        if ch in "\n\r":
            return pos + 1
        if in_class:
            if ch == "]":
                in_class = False
        elif ch == "[":
            in_class = True
        elif ch == "/":
            return i + 1
        i += 1
    return pos + 1


def _code_offsets(text: str, offsets: List[int]) -> Set[int]:
    """
    Of the ascending `offsets`, return those that fall in code rather than
    inside a string, comment or regex literal. A `/` counts as a regex
    opener after punctuation that cannot end an expression.
    """
    in_code = set()
    i = 0
    n = len(text)
    prev = ""
    for offset in offsets:
        while i < offset and i < n:
            ch = text[i]
            if ch in "'\"`":
                i = _skip_string(text, i)
                prev = ch
            elif ch == "/" and text[i + 1:i + 2] in ("/", "*"):
                i = _skip_comment(text, i)
            elif ch == "/" and (not prev or prev in REGEX_PRECEDERS):
                i = _skip_regex(text, i)
                prev = "/"
            else:
                if not ch.isspace():
                    prev = ch
                i += 1
        if i == offset:
            in_code.add(offset)
    return in_code


def iter_literals(bundle_text: str, marker: str = DEFAULT_MARKER) -> Iterator[Tuple[int, str]]:
    """Yield (offset, literal source) for every well-formed `marker = [...]` declaration."""
    pattern = _declaration_pattern(marker)
    matches = list(pattern.finditer(bundle_text))
    in_code = _code_offsets(bundle_text, [match.start() for match in matches])
    for match in matches:
        if match.start() not in in_code:
            logger.debug("Skipping %s at offset %d inside a string or comment", marker, match.start())
            continue
        start = match.end() - 1
        end = find_block_end(bundle_text, start)
        if end is None:
            logger.debug("Declaration of %s at offset %d never closes", marker, match.start())
            continue
        if not _terminated(bundle_text, end):
            logger.debug("Declaration of %s at offset %d is not followed by a delimiter", marker, match.start())
            continue
        yield match.start(), bundle_text[start:end]


def locate_literal(bundle_text: str, marker: str = DEFAULT_MARKER) -> str:
    """Return the raw array literal bound to `marker`, brackets included."""
    found = list(iter_literals(bundle_text, marker))
    if not found:
        raise NotFoundError(f"Data block not found: no '{marker} = [...]' declaration in bundle")
    if len(found) > 1:
        logger.warning(
            "Found %d declarations of %s, using the one at offset %d",
            len(found), marker, found[0][0],
        )
    offset, literal = found[0]
    logger.info("Located %s literal at offset %d (%d chars)", marker, offset, len(literal))
    return literal
