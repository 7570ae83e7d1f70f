"""BibTeX publication list tools package."""

import logging

from .authors import format_authors
from .parser import parse, parse_file
from .types import Entry

# Install a NullHandler to avoid emitting logs unless the application configures logging
logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = ["Entry", "format_authors", "parse", "parse_file"]
