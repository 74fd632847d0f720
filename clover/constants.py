"""
clover.constants — Shared Constants & Helpers
==============================================

Single source of truth for presentation constants used by the session
manager, the seed routine and the API.
"""

from __future__ import annotations

from urllib.parse import quote

DEFAULT_AVATAR_BASE_URL = "https://i.pravatar.cc/150?u="

DEFAULT_POST_CATEGORY = "General"

# ---------------------------------------------------------------------------
# Leaderboard presentation
# ---------------------------------------------------------------------------
RANK_BADGES: list[str] = ["\U0001f947", "\U0001f948", "\U0001f949"]  # 🥇🥈🥉


def rank_badge(rank: int) -> str | None:
    """Medal for the top three ranks, ``None`` below that."""
    if 1 <= rank <= len(RANK_BADGES):
        return RANK_BADGES[rank - 1]
    return None


# ---------------------------------------------------------------------------
# Avatars
# ---------------------------------------------------------------------------
def avatar_url(email: str, base_url: str = DEFAULT_AVATAR_BASE_URL) -> str:
    """Generated avatar reference for a member, keyed on their email."""
    return f"{base_url}{quote(email.strip(), safe='@.')}"
