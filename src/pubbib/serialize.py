"""JSON and BibTeX serialization of parsed entries."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from pathlib import Path

import bibtexparser
import msgspec
from bibtexparser.library import Library
from bibtexparser.middlewares import AddEnclosingMiddleware
from bibtexparser.model import Entry as BibtexEntry
from bibtexparser.model import Field

from .exceptions import FileOperationError, InvalidDataError
from .types import Entry

logger = logging.getLogger(__name__)


class EntryRecord(
    msgspec.Struct,
    rename={"key": "citationKey", "entry_type": "entryType", "tags": "entryTags"},
):
    """JSON shape of an entry as consumed by the publication page scripts."""

    key: str
    entry_type: str
    tags: dict[str, str] = msgspec.field(default_factory=dict)


def entries_to_json(entries: Iterable[Entry], *, indent: int = 2) -> bytes:
    """Encode entries as a JSON array of ``citationKey/entryType/entryTags`` records."""
    records = [EntryRecord(entry.key, entry.entry_type, dict(entry.fields)) for entry in entries]
    encoded = msgspec.json.encode(records)
    return msgspec.json.format(encoded, indent=indent) if indent else encoded


def entries_from_json(data: bytes | str) -> list[Entry]:
    """Decode a JSON array produced by :func:`entries_to_json`.

    Raises:
        InvalidDataError: If the JSON is malformed or does not match the record schema
    """
    try:
        records = msgspec.json.decode(data, type=list[EntryRecord])
    except msgspec.DecodeError as e:
        # msgspec.ValidationError is a DecodeError subclass
        raise InvalidDataError(f"Invalid entry JSON: {e}") from e

    entries: list[Entry] = []
    for index, record in enumerate(records):
        try:
            entries.append(Entry(record.entry_type, record.key, record.tags))
        except ValueError as e:
            raise InvalidDataError(f"Invalid entry at index {index}: {e}") from e

    logger.debug(f"Decoded {len(entries)} entries from JSON")
    return entries


def load_entries_json(json_path: Path) -> list[Entry]:
    """Load entries from a JSON dump on disk.

    Raises:
        FileNotFoundError: If the file doesn't exist
        FileOperationError: If the file cannot be read
        InvalidDataError: If the content is not a valid entry dump
    """
    if not json_path.exists():
        raise FileNotFoundError(f"Entry JSON file not found: {json_path}")

    try:
        data = json_path.read_bytes()
    except OSError as e:
        raise FileOperationError(f"Failed to read {json_path}: {e}") from e

    return entries_from_json(data)


def to_library(entries: Iterable[Entry]) -> Library:
    """Build a :class:`bibtexparser.Library` from entries.

    Later entries reusing an already exported citation key are left out.
    """
    library = Library()
    seen: set[str] = set()

    for entry in entries:
        if entry.key in seen:
            logger.warning(f"Skipping duplicate citation key '{entry.key}' in BibTeX export")
            continue
        seen.add(entry.key)
        fields = [Field(key=name, value=value) for name, value in entry.fields.items()]
        library.add(BibtexEntry(entry_type=entry.entry_type, key=entry.key, fields=fields))

    return library


def entries_to_bibtex(entries: Iterable[Entry]) -> str:
    """Write entries as BibTeX with every value enclosed in braces."""
    library = to_library(entries)
    unparse_stack = [
        AddEnclosingMiddleware(
            allow_inplace_modification=False,
            default_enclosing="{",
            reuse_previous_enclosing=False,
            enclose_integers=True,
        )
    ]
    return str(bibtexparser.write_string(library, unparse_stack=unparse_stack))
