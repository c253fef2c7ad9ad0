"""Word splitting and casing helpers for labels and identifiers."""

import re

# Acronyms, capitalised words, lower-case runs and digit runs, in that order.
_WORD_RE = re.compile(r"[A-Z]+(?=[A-Z][a-z])|[A-Z]?[a-z]+|[A-Z]+|[0-9]+")


def words(value: str) -> list[str]:
    """Split an identifier or phrase into words.

    >>> words("getUserProfile")
    ['get', 'User', 'Profile']
    >>> words("fields[model]")
    ['fields', 'model']
    """
    return _WORD_RE.findall(str(value))


def start_case(value) -> str:
    """``"filter.entities.all"`` -> ``"Filter Entities All"``."""
    return " ".join(word[0].upper() + word[1:] for word in words(value))


def camel_case(value: str) -> str:
    """``"List all entities"`` -> ``"listAllEntities"``."""
    parts = [word.lower() for word in words(value)]
    if not parts:
        return ""
    return parts[0] + "".join(part.capitalize() for part in parts[1:])
