"""Order-independent key for a two-party conversation."""

from __future__ import annotations

from uuid import UUID


def build_pair_key(user_a: UUID, user_b: UUID) -> str:
    """
    Build the normalized key for an unordered pair of users.

    ``build_pair_key(a, b) == build_pair_key(b, a)``; the key is stored with a
    unique constraint so a pair can own at most one conversation.
    """
    first, second = sorted((user_a.hex, user_b.hex))
    return f"{first}:{second}"
