"""ORM models."""

from models.base import Base
from models.duel import Duel
from models.league import League, LeagueMember
from models.match import Match, MatchPlayer
from models.user import User

__all__ = [
    "Base",
    "Duel",
    "League",
    "LeagueMember",
    "Match",
    "MatchPlayer",
    "User",
]
