"""Type definitions for pubbib data structures."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import NamedTuple


class RawEntry(NamedTuple):
    """An entry located by the scanner, before its fields are decoded."""

    entry_type: str
    key: str
    body: str


@dataclass(frozen=True, slots=True)
class Entry:
    """One bibliographic record.

    ``fields`` is exposed as a read-only mapping from lowercased field name to
    value. Entries are never modified after creation.
    """

    entry_type: str
    key: str
    fields: Mapping[str, str] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if not self.entry_type:
            raise ValueError("Entry type must not be empty")
        if not self.key:
            raise ValueError("Entry key must not be empty")
        object.__setattr__(self, "entry_type", self.entry_type.lower())
        object.__setattr__(self, "fields", MappingProxyType(dict(self.fields)))

    def get(self, name: str, default: str = "") -> str:
        """Return the value of field ``name`` (case-insensitive) or ``default``."""
        return self.fields.get(name.lower(), default)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Entry):
            return NotImplemented
        return (
            self.entry_type == other.entry_type
            and self.key == other.key
            and dict(self.fields) == dict(other.fields)
        )

    def __hash__(self) -> int:
        return hash((self.entry_type, self.key, tuple(sorted(self.fields.items()))))


# Type aliases for common data structures
FieldMap = dict[str, str]
YearGroups = dict[str, list[Entry]]
