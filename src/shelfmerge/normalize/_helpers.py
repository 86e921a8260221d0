"""Text helpers shared by the per-kind canonicalizers."""

import unicodedata

__all__ = [
    "APOSTROPHES",
    "INVISIBLE",
    "strip_accents",
    "collapse_whitespace",
    "fold_text",
    "is_punctuation",
    "replace_punctuation",
]

APOSTROPHES = frozenset({"'", "’", "‘", "ʼ", "`", "´"})

# Format (zero-width, bidi marks) and control characters
INVISIBLE = frozenset({"Cf", "Cc"})


def strip_accents(text: str) -> str:
    """Remove diacritical marks for cross-locale matching.

    Parameters
    ----------
    text : str
        Input text with potential diacritics.

    Returns
    -------
    str
        Text with diacritical marks removed, NFC-composed.
    """
    nfd = unicodedata.normalize("NFD", text)
    stripped = "".join(c for c in nfd if unicodedata.category(c) != "Mn")
    return unicodedata.normalize("NFC", stripped)


def collapse_whitespace(text: str) -> str:
    """Trim and collapse runs of whitespace to a single space."""
    return " ".join(text.split())


def fold_text(text: str) -> str:
    """Compose, case-fold, strip accents and drop invisible characters.

    Parameters
    ----------
    text : str
        Raw text.

    Returns
    -------
    str
        Folded text; punctuation and spacing are untouched.
    """
    text = unicodedata.normalize("NFC", text)
    text = "".join(c for c in text if c.isspace() or unicodedata.category(c) not in INVISIBLE)
    text = text.casefold()
    return strip_accents(text)


def is_punctuation(char: str) -> bool:
    """Whether a character is punctuation or a symbol."""
    return unicodedata.category(char)[0] in ("P", "S")


def replace_punctuation(text: str, replacement: str) -> str:
    """Drop apostrophes and replace other punctuation.

    Parameters
    ----------
    text : str
        Folded text.
    replacement : str
        Substitute for punctuation and symbols ("" or " ").

    Returns
    -------
    str
        Text containing only letters, digits, marks and whitespace.
    """
    out: list[str] = []
    for char in text:
        if char in APOSTROPHES:
            continue
        out.append(replacement if is_punctuation(char) else char)
    return "".join(out)
