"""Profanity filter applied to chirp bodies before they are stored."""

import re

BANNED_WORDS: frozenset[str] = frozenset({"kerfuffle", "sharbert", "fornax"})
CENSOR_MASK = "****"

# Capturing split keeps the whitespace runs so the body can be rejoined verbatim.
_WHITESPACE_SPLIT = re.compile(r"(\s+)")


def clean_body(body: str) -> str:
    """
    Replace banned words with CENSOR_MASK.

    Matching is case-insensitive and on whole whitespace-delimited tokens only:
    "Kerfuffle" is masked, "kerfuffle!" is not. Whitespace is preserved exactly.
    """
    parts = _WHITESPACE_SPLIT.split(body)
    return "".join(
        CENSOR_MASK if part.lower() in BANNED_WORDS else part for part in parts
    )
