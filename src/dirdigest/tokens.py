"""Token estimation helpers."""

from __future__ import annotations

from dirdigest.config import CHARS_PER_TOKEN


def estimate_tokens(text: str) -> int:
    """Approximate the language-model token count of ``text`` from its length."""
    return len(text) // CHARS_PER_TOKEN


def format_token_count(total_tokens: int) -> str:
    """Format a token count for display (``950``, ``1.2k``, ``3.4M``)."""
    if total_tokens >= 1_000_000:
        return f"{total_tokens / 1_000_000:.1f}M"
    if total_tokens >= 1_000:
        return f"{total_tokens / 1_000:.1f}k"
    return str(total_tokens)
