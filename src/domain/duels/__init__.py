"""Duel matchmaking and resolution modules."""

from domain.duels.candidates import CandidatePair, pair_key
from domain.duels.config import DuelParameters, DuelSystemConfig, load_duel_system_configs
from domain.duels.errors import (
    DuelAlreadyExists,
    DuelGenerationError,
    InsufficientConfirmedPlayers,
    InsufficientMemberData,
    MatchHasNoLeague,
    MatchNotFound,
    NoCompatiblePairs,
    PairSelectionFailed,
)
from domain.duels.records import DuelOutcome, DuelOverview, DuelRecord, GeneratedDuel

__all__ = [
    "CandidatePair",
    "DuelAlreadyExists",
    "DuelGenerationError",
    "DuelOutcome",
    "DuelOverview",
    "DuelParameters",
    "DuelRecord",
    "DuelSystemConfig",
    "GeneratedDuel",
    "InsufficientConfirmedPlayers",
    "InsufficientMemberData",
    "MatchHasNoLeague",
    "MatchNotFound",
    "NoCompatiblePairs",
    "PairSelectionFailed",
    "load_duel_system_configs",
    "pair_key",
]
