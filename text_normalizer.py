"""
text_normalizer.py
------------------
Canonicalises raw chat input into the form the intent rules are written for.

    normalize("Hey, what's Arjun’s  CGPA?!")  ->  "hey what s arjun s cgpa?!"

The function is total (never raises) and idempotent.
"""

import re

# Apostrophe look-alikes that users paste from phones / word processors
_APOSTROPHES = re.compile(r"[`´‘’′]")

# apostrophe + contraction suffix after a word char  ->  " suffix"
_CONTRACTION = re.compile(r"(?<=\w)'(s|re|ve|ll|d|m|t)\b")

# Anything that is not a word char, whitespace or meaningful punctuation
_NOISE = re.compile(r"[^\w\s?!.'-]")

_WHITESPACE = re.compile(r"\s+")


def normalize(raw) -> str:
    """
    Return the canonical, matchable form of *raw*.

    Steps: trim, lower-case, unify apostrophes, expand contractions,
    replace noise characters with spaces, collapse whitespace, trim.
    Non-string input yields an empty string.
    """
    if not isinstance(raw, str):
        return ""

    text = raw.strip().lower()
    text = _APOSTROPHES.sub("'", text)
    text = _CONTRACTION.sub(r" \1", text)
    text = _NOISE.sub(" ", text)
    text = _WHITESPACE.sub(" ", text)
    return text.strip()
