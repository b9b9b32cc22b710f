"""Transient projections of duel rows handed back to callers."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True)
class DuelRecord:
    duel_id: str
    match_id: str
    challenger_id: str
    rival_id: str
    status: str
    winner_id: str | None = None
    created_at: datetime | None = None
    resolved_at: datetime | None = None


@dataclass(frozen=True)
class PlayerIdentity:
    full_name: str | None = None
    profile_photo_url: str | None = None


@dataclass(frozen=True)
class PairingDetails:
    """Display payload returned alongside a freshly generated duel."""

    challenger: PlayerIdentity
    rival: PlayerIdentity
    rating_diff: str


@dataclass(frozen=True)
class GeneratedDuel:
    duel: DuelRecord
    details: PairingDetails


@dataclass(frozen=True)
class DuelOutcome:
    """Decision written by the resolver; ``winner_id`` is None on a draw."""

    duel_id: str
    match_id: str
    challenger_id: str
    rival_id: str
    status: str
    winner_id: str | None
    challenger_score: float
    rival_score: float

    @property
    def loser_id(self) -> str | None:
        if self.winner_id is None:
            return None
        return self.rival_id if self.winner_id == self.challenger_id else self.challenger_id


@dataclass(frozen=True)
class DuelPlayerCard:
    user_id: str
    username: str | None
    full_name: str | None
    profile_photo_url: str | None
    overall: float
    mvps: int
    team: str


@dataclass(frozen=True)
class DuelOverview:
    duel: DuelRecord
    challenger: DuelPlayerCard
    rival: DuelPlayerCard


__all__ = [
    "DuelOutcome",
    "DuelOverview",
    "DuelPlayerCard",
    "DuelRecord",
    "GeneratedDuel",
    "PairingDetails",
    "PlayerIdentity",
]
