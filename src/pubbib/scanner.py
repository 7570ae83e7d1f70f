"""Locate BibTeX entries and isolate their raw bodies.

The scanner works in two linear passes over the document:

1. :func:`strip_comments` removes ``%`` comments and ``#`` lines that sit
   outside delimited values.
2. :func:`scan_entries` matches every ``@type{`` header against its closing
   brace, using a brace map computed once by :func:`match_braces`.
"""

from __future__ import annotations

import logging
import re

from .types import RawEntry

logger = logging.getLogger(__name__)

_HEADER_PATTERN = re.compile(r"@\s*(\w+)\s*\{")

# Entry kinds that define macros rather than bibliographic records
_MACRO_TYPES = frozenset({"string"})


def is_escaped(text: str, index: int) -> bool:
    """Return ``True`` if ``text[index]`` is preceded by an odd run of backslashes."""
    backslashes = 0
    index -= 1
    while index >= 0 and text[index] == "\\":
        backslashes += 1
        index -= 1
    return backslashes % 2 == 1


def strip_comments(text: str) -> str:
    """Remove comments from BibTeX source.

    ``%`` runs to the end of the line unless it appears inside a field value
    (brace depth of two or more, or a quoted value inside an entry body). Lines
    starting with ``#`` are dropped when they sit outside every entry. Line
    breaks are kept so line numbers stay stable.

    Only braces that have a partner count towards the depth, so an unterminated
    entry or a stray ``{`` does not shift the depth of everything after it.
    """
    if "%" not in text and "#" not in text:
        return text

    pairs = match_braces(text)
    closers = set(pairs.values())
    out: list[str] = []
    depth = 0
    in_quote = False
    at_line_start = True
    i = 0
    length = len(text)

    while i < length:
        char = text[i]

        if at_line_start and depth == 0:
            stripped_start = i
            while stripped_start < length and text[stripped_start] in " \t":
                stripped_start += 1
            if stripped_start < length and text[stripped_start] == "#":
                newline = text.find("\n", stripped_start)
                if newline == -1:
                    break
                out.append("\n")
                i = newline + 1
                continue

        at_line_start = char == "\n"

        if char == "%" and not in_quote and depth <= 1 and not is_escaped(text, i):
            newline = text.find("\n", i)
            if newline == -1:
                break
            i = newline
            continue

        if char == "{" and i in pairs:
            depth += 1
        elif char == "}" and i in closers:
            depth = max(depth - 1, 0)
            if depth == 0:
                in_quote = False
        elif char == '"' and depth == 1 and not is_escaped(text, i):
            in_quote = not in_quote

        out.append(char)
        i += 1

    return "".join(out)


def match_braces(text: str) -> dict[int, int]:
    """Map the index of every balanced ``{`` to the index of its matching ``}``.

    Delimiter depth is the size of the stack of open positions. Escaped braces
    are ignored, stray closing braces are ignored, and opening braces that are
    still on the stack when the text ends are absent from the result.
    """
    pairs: dict[int, int] = {}
    stack: list[int] = []

    for index, char in enumerate(text):
        if char == "{":
            if not is_escaped(text, index):
                stack.append(index)
        elif char == "}":
            if stack and not is_escaped(text, index):
                pairs[stack.pop()] = index

    return pairs


def scan_entries(text: str) -> list[RawEntry]:
    """Find every bibliographic entry in ``text``, in document order.

    ``@string`` definitions are skipped. Entries whose opening brace is never
    closed are dropped and scanning resumes right after their header, so
    well-formed entries that follow are still found.

    Args:
        text: BibTeX source, normally already passed through :func:`strip_comments`

    Returns:
        List of ``RawEntry(entry_type, key, body)`` triples
    """
    pairs = match_braces(text)
    lines = _LineCounter(text)
    entries: list[RawEntry] = []
    position = 0

    while True:
        header = _HEADER_PATTERN.search(text, position)
        if header is None:
            break

        entry_type = header.group(1)
        open_index = header.end() - 1
        close_index = pairs.get(open_index)

        if close_index is None:
            logger.warning(
                "Dropping unterminated @%s entry '%s' at line %d",
                entry_type,
                _peek_key(text, header.end()),
                lines.at(header.start()),
            )
            position = header.end()
            continue

        position = close_index + 1

        if entry_type.lower() in _MACRO_TYPES:
            logger.debug("Skipping @%s block at line %d", entry_type, lines.at(header.start()))
            continue

        content = text[open_index + 1 : close_index]
        key, _, body = content.partition(",")
        key = key.strip()

        if not key:
            logger.warning(
                "Dropping @%s entry without citation key at line %d",
                entry_type,
                lines.at(header.start()),
            )
            continue

        entries.append(RawEntry(entry_type.lower(), key, body))

    logger.debug("Scanned %d entries", len(entries))
    return entries


class _LineCounter:
    """Line numbers for increasing offsets, counted incrementally."""

    def __init__(self, text: str) -> None:
        self._text = text
        self._offset = 0
        self._line = 1

    def at(self, index: int) -> int:
        if index > self._offset:
            self._line += self._text.count("\n", self._offset, index)
            self._offset = index
        return self._line


def _peek_key(text: str, start: int) -> str:
    line_end = text.find("\n", start)
    head = text[start:] if line_end == -1 else text[start:line_end]
    return head.split(",", 1)[0].strip()
