"""Text normalization and trigram similarity.

Search compares product names and queries after the same transformation:
lower-case, then strip diacritics ("Café" == "cafe").

On PostgreSQL this runs in SQL as unaccent(lower(x)) with pg_trgm's
similarity(). The functions here are the Python equivalents; they are used
directly by unit tests and registered as SQL functions on SQLite databases.

Trigram similarity (pg_trgm semantics):
- words are runs of alphanumeric characters
- each word is padded with two spaces in front and one behind
- similarity = |shared trigrams| / |all distinct trigrams of both sides|
"""

import re
import unicodedata

_WORD_RE = re.compile(r"[^\W_]+", re.UNICODE)


def strip_accents(text: str) -> str:
    """Remove diacritical marks (NFD decomposition, drop combining marks)."""
    decomposed = unicodedata.normalize("NFD", text)
    stripped = "".join(c for c in decomposed if unicodedata.category(c) != "Mn")
    return unicodedata.normalize("NFC", stripped)


def normalize_text(text: str | None) -> str:
    """Lower-case then strip diacritics.

    Example:
        >>> normalize_text("Feijão PRETO")
        'feijao preto'
    """
    if not text:
        return ""
    return strip_accents(text.lower())


def trigrams(text: str) -> set[str]:
    """Extract the pg_trgm trigram set of a string."""
    result: set[str] = set()
    for word in _WORD_RE.findall(text.lower()):
        padded = f"  {word} "
        for i in range(len(padded) - 2):
            result.add(padded[i : i + 3])
    return result


def trigram_similarity(a: str | None, b: str | None) -> float:
    """Similarity in [0.0, 1.0]: 0 = no shared trigram, 1 = same trigram set."""
    ta = trigrams(a or "")
    tb = trigrams(b or "")
    if not ta or not tb:
        return 0.0
    return len(ta & tb) / len(ta | tb)
