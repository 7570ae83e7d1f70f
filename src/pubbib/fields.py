"""Decode the fields of a raw BibTeX entry body."""

from __future__ import annotations

import enum
import logging
import re

from .scanner import is_escaped
from .types import FieldMap

logger = logging.getLogger(__name__)

_NAME_PATTERN = re.compile(r"([\w-]+)\s*=\s*")


class _State(enum.Enum):
    NAME = "name"
    BRACE = "brace"
    QUOTE = "quote"
    BARE = "bare"
    SKIP = "skip"


def decode_fields(body: str) -> FieldMap:
    """Turn an entry body into a mapping of field name to value.

    The body is everything after the citation key's comma up to (not including)
    the entry's closing brace. Values may be brace-delimited (nested groups are
    kept verbatim, only the outer pair is removed), quote-delimited (ends at the
    next unescaped ``"``) or a bare token such as ``feb`` or ``2019``.

    Names are lowercased, values trimmed, empty values dropped. When a name
    repeats, the last occurrence wins. Fragments that are not ``name = value``
    are skipped up to the next top-level comma, or up to the next line that
    starts with ``name =`` when fields are not separated by commas.

    Args:
        body: Raw entry body

    Returns:
        Dictionary of decoded fields in first-seen order
    """
    fields: FieldMap = {}
    state = _State.NAME
    name = ""
    start = 0
    depth = 0
    new_line = False
    i = 0
    length = len(body)

    while i < length:
        char = body[i]

        if state is _State.NAME:
            new_line = False
            if char.isspace() or char == ",":
                i += 1
                continue
            match = _NAME_PATTERN.match(body, i)
            if match is None:
                logger.debug("Skipping unrecognized field fragment near: %r", body[i : i + 30])
                state = _State.SKIP
                depth = 0
                continue
            name = match.group(1).lower()
            i = match.end()
            if i >= length:
                break
            opener = body[i]
            if opener == "{":
                state = _State.BRACE
                depth = 1
                start = i + 1
            elif opener == '"':
                state = _State.QUOTE
                start = i + 1
            elif opener == ",":
                logger.debug("Field '%s' has no value", name)
                continue
            else:
                state = _State.BARE
                start = i
            i += 1

        elif state is _State.BRACE:
            if char == "{" and not is_escaped(body, i):
                depth += 1
            elif char == "}" and not is_escaped(body, i):
                depth -= 1
                if depth == 0:
                    _store(fields, name, body[start:i])
                    state = _State.SKIP
            i += 1

        elif state is _State.QUOTE:
            if char == '"' and not is_escaped(body, i):
                _store(fields, name, body[start:i])
                state = _State.SKIP
            i += 1

        elif state is _State.BARE:
            if char == "," or char.isspace():
                _store(fields, name, body[start:i])
                state = _State.SKIP
                continue
            i += 1

        else:
            # Discard everything up to the next comma outside braces and quotes, or
            # up to a new line that starts with another assignment
            if depth == 0 and new_line and not char.isspace():
                new_line = False
                if _NAME_PATTERN.match(body, i):
                    state = _State.NAME
                    continue
            if char == "\n" and depth == 0:
                new_line = True
            elif char == "{" and not is_escaped(body, i):
                depth += 1
            elif char == "}" and not is_escaped(body, i):
                depth = max(depth - 1, 0)
            elif char == '"' and depth == 0 and not is_escaped(body, i):
                closing = _find_unescaped_quote(body, i + 1)
                i = length if closing == -1 else closing
            elif char == "," and depth == 0:
                state = _State.NAME
            i += 1

    if state is _State.BARE:
        _store(fields, name, body[start:])
    elif state in (_State.BRACE, _State.QUOTE):
        logger.warning("Unterminated value for field '%s', skipping rest of entry body", name)

    return fields


def normalize_value(value: str) -> str:
    """Trim a value and each of its lines, keeping line breaks."""
    if "\n" not in value:
        return value.strip()
    return "\n".join(line.strip() for line in value.strip().splitlines())


def _store(fields: FieldMap, name: str, raw_value: str) -> None:
    value = normalize_value(raw_value)
    if not value:
        logger.debug("Dropping empty field '%s'", name)
        return
    if name in fields:
        logger.debug("Field '%s' repeated, keeping last value", name)
    fields[name] = value


def _find_unescaped_quote(text: str, start: int) -> int:
    index = text.find('"', start)
    while index != -1 and is_escaped(text, index):
        index = text.find('"', index + 1)
    return index
