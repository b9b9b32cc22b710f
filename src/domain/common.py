"""Shared types for roster balancing and duel matchmaking."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any


class MatchStatus(str, Enum):
    """Lifecycle of a match as stored in the matches table."""

    OPEN = "OPEN"
    FINISHED = "FINISHED"
    COMPLETED = "COMPLETED"


class DuelStatus(str, Enum):
    """Lifecycle of a duel; COMPLETED and DRAW are terminal."""

    PENDING = "PENDING"
    ACTIVE = "ACTIVE"
    COMPLETED = "COMPLETED"
    DRAW = "DRAW"

    @property
    def is_terminal(self) -> bool:
        return self in (DuelStatus.COMPLETED, DuelStatus.DRAW)


OPEN_DUEL_STATUSES = (DuelStatus.PENDING.value, DuelStatus.ACTIVE.value)


def normalize_side(value: Any) -> str:
    """Canonical side label: trimmed, uppercased, empty when unknown."""
    if value is None:
        return ""
    return str(value).strip().upper()


def coerce_rating(value: Any) -> float:
    """Ratings are opaque numbers; a missing rating counts as 0."""
    if value is None:
        return 0.0
    return float(value)


@dataclass(frozen=True)
class Participant:
    """A rated player snapshot taken from a roster."""

    id: str
    rating: float = 0.0
    side: str = ""


@dataclass(frozen=True)
class MatchSnapshot:
    match_id: str
    league_id: str | None
    status: str


@dataclass(frozen=True)
class RosterEntry:
    """One confirmed roster row with its normalised side label."""

    user_id: str
    side: str = ""


@dataclass(frozen=True)
class RatedMember:
    """League-member rating row joined with the player's display identity."""

    user_id: str
    rating: float
    full_name: str | None = None
    profile_photo_url: str | None = None


__all__ = [
    "DuelStatus",
    "MatchSnapshot",
    "MatchStatus",
    "OPEN_DUEL_STATUSES",
    "Participant",
    "RatedMember",
    "RosterEntry",
    "coerce_rating",
    "normalize_side",
]
