"""Stable cache keys for claim text."""

import hashlib
import re

_WHITESPACE = re.compile(r"\s+")


def normalize_claim_text(text: str) -> str:
    """Lowercase, trim and collapse whitespace runs to single spaces."""
    return _WHITESPACE.sub(" ", text.strip().lower())


def derive_cache_key(text: str) -> str:
    """SHA-256 hex digest of the normalized claim text.

    Claims that differ only by case or whitespace share a key. Paraphrases
    do not.
    """
    normalized = normalize_claim_text(text)
    return hashlib.sha256(normalized.encode("utf-8")).hexdigest()
