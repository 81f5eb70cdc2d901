"""Shared name normalization utilities."""

import unicodedata


def normalize_name(name: str) -> str:
    """Build the identity key used for duplicate-name checks."""
    return name.strip().lower()


def name_sort_key(name: str) -> tuple[str, str]:
    """Sort key approximating locale-aware collation.

    Accents and case only break ties: "apple" sorts before "Banana", and a
    lowercase name sorts before the same name capitalized.
    """
    decomposed = unicodedata.normalize("NFKD", name)
    base = "".join(ch for ch in decomposed if not unicodedata.combining(ch))
    return (base.casefold(), name.swapcase())
