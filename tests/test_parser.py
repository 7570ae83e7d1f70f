"""Tests for the BibTeX parser entry point."""

import dataclasses
import logging
from pathlib import Path

import pytest

from pubbib import Entry, parse, parse_file


def test_parse_two_entries():
    """Brace and bare values across two entries."""
    entries = parse("@article{k1, title={T}, year={2020}}\n@misc{k2, year=2019}")

    assert [entry.key for entry in entries] == ["k1", "k2"]
    assert dict(entries[0].fields) == {"title": "T", "year": "2020"}
    assert dict(entries[1].fields) == {"year": "2019"}
    assert entries[0].entry_type == "article"
    assert entries[1].entry_type == "misc"


def test_parse_realistic_document():
    """A typical publication list with mixed value styles."""
    text = """@STRING{ieee = "IEEE"}

% Journal papers
@Article{smith2021deep,
  author    = {Smith, Alice and Jones, Bob and Lee, Carol},
  title     = {{Deep} Learning for {BibTeX}},
  journal   = "Journal of Parsing",
  volume    = 12,
  number    = {3},
  pages     = {100--120},
  year      = {2021},
  month     = feb,
  doi       = {10.1000/xyz123},
  url       = {https://example.org/paper%201.pdf},
}

@inproceedings{doe2019,
  author = "Doe, John",
  title = "A Multi-line
           Title",
  booktitle = {Proceedings of the Conference},
  year = 2019
}
"""
    entries = parse(text)

    assert len(entries) == 2
    smith, doe = entries

    assert smith.entry_type == "article"
    assert smith.key == "smith2021deep"
    assert smith.get("title") == "{Deep} Learning for {BibTeX}"
    assert smith.get("journal") == "Journal of Parsing"
    assert smith.get("volume") == "12"
    assert smith.get("month") == "feb"
    assert smith.get("url") == "https://example.org/paper%201.pdf"
    assert smith.get("author") == "Smith, Alice and Jones, Bob and Lee, Carol"

    assert doe.entry_type == "inproceedings"
    assert doe.get("title") == "A Multi-line\nTitle"
    assert doe.get("booktitle") == "Proceedings of the Conference"
    assert doe.get("year") == "2019"


def test_parse_nested_braces_round_trip():
    """Outer braces are stripped and inner pairs preserved."""
    entries = parse("@misc{k, title = {nested {inner} text}}")
    assert entries[0].get("title") == "nested {inner} text"


def test_parse_multiline_quoted_value():
    """Quoted values keep embedded line breaks."""
    entries = parse('@misc{k, note = "multi\nline"}')
    assert entries[0].get("note") == "multi\nline"


def test_parse_duplicate_field_last_wins():
    """The last occurrence of a field name wins."""
    entries = parse("@misc{k, year = {2019}, year = 2020}")
    assert entries[0].get("year") == "2020"


def test_parse_drops_unbalanced_entry(caplog: pytest.LogCaptureFixture):
    """An entry missing its final brace is dropped; others still decode."""
    text = """@article{first, title = {One}, year = {2018}}

@article{broken,
  title = {Never closed},
  year = {2019}

@book{last, title = {Three}, year = {2020}}
"""
    with caplog.at_level(logging.WARNING, logger="pubbib"):
        entries = parse(text)

    assert [entry.key for entry in entries] == ["first", "last"]
    assert entries[1].get("title") == "Three"
    assert "broken" in caplog.text


def test_parse_ignores_comment_lines():
    """Comment lines, including commented-out entries, are ignored."""
    text = "% not an entry\n% @article{fake, title={No}}\n@article{real, title = {Yes}}"

    entries = parse(text)

    assert len(entries) == 1
    assert entries[0].key == "real"
    assert entries[0].get("title") == "Yes"


def test_parse_hash_comment_lines():
    """Lines starting with '#' outside entries are ignored."""
    entries = parse("# exported list\n@misc{k, year = 2001}")
    assert [entry.key for entry in entries] == ["k"]


def test_parse_skips_string_macros():
    """@string definitions produce no entries, in any case."""
    text = '@string{acm = "ACM"}\n@STRING{ieee = {IEEE {Press}}}\n@misc{k, publisher = acm}'

    entries = parse(text)

    assert len(entries) == 1
    assert entries[0].get("publisher") == "acm"


def test_parse_entry_count_matches_headers():
    """Every balanced non-string header yields exactly one entry."""
    text = "\n".join(f"@misc{{key{i}, year = {2000 + i}}}" for i in range(25))
    text += '\n@string{x = "y"}'

    entries = parse(text)

    assert len(entries) == 25
    assert [entry.key for entry in entries] == [f"key{i}" for i in range(25)]


def test_parse_keeps_duplicate_keys(caplog: pytest.LogCaptureFixture):
    """Entries sharing a citation key are all kept, in order."""
    with caplog.at_level(logging.WARNING, logger="pubbib.parser"):
        entries = parse("@misc{dup, year = 1}\n@misc{dup, year = 2}")

    assert [entry.get("year") for entry in entries] == ["1", "2"]
    assert "Duplicate citation keys: dup" in caplog.text


def test_parse_lowercases_type_and_names():
    """Entry types and field names are lowercased; keys keep their case."""
    entry = parse("@ARTICLE{MixedKey, Title = {X}}")[0]

    assert entry.entry_type == "article"
    assert entry.key == "MixedKey"
    assert dict(entry.fields) == {"title": "X"}


def test_parse_entry_without_fields():
    """An entry may have no fields at all."""
    entries = parse("@misc{lonely,}\n@misc{alone}")

    assert [entry.key for entry in entries] == ["lonely", "alone"]
    assert all(len(entry.fields) == 0 for entry in entries)


def test_parse_is_idempotent():
    """Each call is independent and yields equal results."""
    text = "@misc{a, year = 1}\n@misc{b, title = {T}}"

    first = parse(text)
    second = parse(text)

    assert first == second
    assert first[0] is not second[0]


def test_parse_empty_and_garbage_input():
    """Input without entries yields an empty list."""
    assert parse("") == []
    assert parse("just some text } with { braces") == []
    assert parse("@") == []


def test_entries_are_immutable():
    """Entries cannot be modified after creation."""
    entry = parse("@misc{k, year = 2020}")[0]

    with pytest.raises(dataclasses.FrozenInstanceError):
        entry.key = "other"  # type: ignore[misc]
    with pytest.raises(TypeError):
        entry.fields["year"] = "1999"  # type: ignore[index]


def test_entry_get_is_case_insensitive():
    """Entry.get looks up fields by lowercased name."""
    entry = Entry("Article", "k", {"title": "T"})

    assert entry.entry_type == "article"
    assert entry.get("TITLE") == "T"
    assert entry.get("missing") == ""
    assert entry.get("missing", "n/a") == "n/a"


def test_entry_requires_type_and_key():
    """Entries must have a non-empty type and key."""
    with pytest.raises(ValueError, match="type"):
        Entry("", "k")
    with pytest.raises(ValueError, match="key"):
        Entry("misc", "")


def test_parse_file(tmp_path: Path):
    """parse_file reads UTF-8 .bib files."""
    bib_path = tmp_path / "publications.bib"
    bib_path.write_text("@book{b, author = {Gödel, Kurt}, year = 1931}", encoding="utf-8")

    entries = parse_file(bib_path)

    assert len(entries) == 1
    assert entries[0].get("author") == "Gödel, Kurt"


def test_parse_file_missing(tmp_path: Path):
    """A missing file raises FileNotFoundError."""
    with pytest.raises(FileNotFoundError, match="Bibliography file not found"):
        parse_file(tmp_path / "missing.bib")


def test_parse_comments_after_unterminated_entry():
    """Comment handling in later entries is unaffected by an unterminated entry."""
    percent = "@article{bad, title = {T}\n@misc{k2,\n  % year = {1999}\n  year = {2019}}\n"
    entries = parse(percent)
    assert [entry.key for entry in entries] == ["k2"]
    assert entries[0].get("year") == "2019"

    hashed = "@article{bad, title = {T}\n# @misc{ghost, year = 1}\n@misc{k2, year = 2019}\n"
    assert [entry.key for entry in parse(hashed)] == ["k2"]


def test_parse_fields_without_separating_commas():
    """Fields on their own lines are all kept when commas are missing."""
    entries = parse("@misc{k,\n  title = {T}\n  year = 2019\n  author = {A}\n}")

    assert dict(entries[0].fields) == {"title": "T", "year": "2019", "author": "A"}
