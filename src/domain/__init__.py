"""Roster balancing and duel matchmaking domain modules."""

from domain.balancing import TeamAssignment, balance
from domain.common import DuelStatus, MatchStatus, Participant

__all__ = ["DuelStatus", "MatchStatus", "Participant", "TeamAssignment", "balance"]
