"""Parse BibTeX source into :class:`~pubbib.types.Entry` records."""

from __future__ import annotations

import logging
from collections import Counter
from pathlib import Path

from .exceptions import FileOperationError
from .fields import decode_fields
from .scanner import scan_entries, strip_comments
from .types import Entry

logger = logging.getLogger(__name__)


def parse(text: str) -> list[Entry]:
    """Parse BibTeX source text into entries.

    Comments and ``@string`` definitions are ignored. Malformed entries and
    field fragments are skipped with a log message; this function never raises
    for bad input and returns every entry it could recover, in document order.
    Entries sharing a citation key are all kept.

    Args:
        text: BibTeX source

    Returns:
        List of parsed entries
    """
    cleaned = strip_comments(text)
    entries = [
        Entry(raw.entry_type, raw.key, decode_fields(raw.body)) for raw in scan_entries(cleaned)
    ]

    duplicates = [key for key, count in Counter(e.key for e in entries).items() if count > 1]
    if duplicates:
        logger.warning("Duplicate citation keys: %s", ", ".join(duplicates))

    logger.debug("Parsed %d entries", len(entries))
    return entries


def parse_file(bib_path: Path) -> list[Entry]:
    """Read a UTF-8 ``.bib`` file and parse it.

    Args:
        bib_path: Path to the .bib file

    Returns:
        List of parsed entries

    Raises:
        FileNotFoundError: If bib file doesn't exist
        FileOperationError: If the file cannot be read or decoded
    """
    if not bib_path.exists():
        raise FileNotFoundError(f"Bibliography file not found: {bib_path}")

    logger.debug("Parsing .bib file: %s", bib_path)

    try:
        text = bib_path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise FileOperationError(f"Failed to read {bib_path}: {e}") from e

    entries = parse(text)
    logger.info("Loaded %d entries from %s", len(entries), bib_path.name)
    return entries
