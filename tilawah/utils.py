"""Utility functions for the application."""

from __future__ import annotations


def build_search_tokens(name: str | None, email: str | None) -> list[str]:
    """Build the prefix search index for a user's name and email.

    Every whitespace-separated word of both fields is lowercased and each of
    its non-empty prefixes becomes a token. The result is deduplicated.
    """
    tokens: set[str] = set()

    for value in (name, email):
        normalized = (value or "").strip().lower()
        if not normalized:
            continue
        for part in normalized.split():
            for i in range(1, len(part) + 1):
                tokens.add(part[:i])

    return list(tokens)
