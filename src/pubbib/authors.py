"""Author list formatting."""

AUTHOR_SEPARATOR = " and "


def split_authors(authors: str) -> list[str]:
    """Split an ``author`` field on the literal ``" and "`` separator.

    Names are trimmed and empty names dropped.
    """
    if not authors:
        return []
    return [name.strip() for name in authors.split(AUTHOR_SEPARATOR) if name.strip()]


def format_authors(authors: str) -> str:
    """Shorten an author list for display.

    One name is returned as is, two are joined with ``and``, and longer lists
    keep the first two names followed by ``et al.``.

    Examples:
        >>> format_authors("A and B and C")
        'A, B, et al.'
        >>> format_authors("A and B")
        'A and B'
    """
    names = split_authors(authors)

    if not names:
        return ""
    if len(names) == 1:
        return names[0]
    if len(names) == 2:
        return f"{names[0]} and {names[1]}"
    return f"{names[0]}, {names[1]}, et al."
