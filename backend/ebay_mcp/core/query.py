from __future__ import annotations

import re
from typing import Set

# Browse API free-text search matches these literally instead of as operators
BOOLEAN_OPERATORS: Set[str] = {"AND", "OR", "NOT"}
EXCLUSION_MARKER = "-"

_EXCLUDED_TERM = re.compile(r"(?:^|(?<=\s))-\S*")


def _is_dropped(token: str) -> bool:
    return token in BOOLEAN_OPERATORS or token.startswith(EXCLUSION_MARKER)


def sanitize_query(raw: str) -> str:
    """
    Make a free-text query safe for the Browse API search engine:
      - "iphone 13 -cracked"        => "iphone 13"
      - "lego AND technic NOT star" => "lego technic star"
      - "-refurb"                   => "-refurb" (nothing else left to search)
    Returns "" only for empty / whitespace-only input.
    """
    if not raw or not raw.strip():
        return ""

    kept = [t for t in raw.split() if not _is_dropped(t)]
    if kept:
        return " ".join(kept)

    # Operators only: strip just the -excluded words
    stripped = re.sub(r"\s+", " ", _EXCLUDED_TERM.sub(" ", raw)).strip()
    if stripped:
        return stripped

    return raw.strip()
