"""Database repository helpers."""

from repositories.duel_repository import (
    duel_exists_for_match,
    ensure_schema,
    fetch_duel_overview,
    fetch_open_duel,
    fetch_previous_duel_pair_key,
    insert_duel,
    reward_duel_winner,
    update_duel_outcome,
)
from repositories.roster_repository import (
    fetch_confirmed_roster,
    fetch_match,
    fetch_match_ratings,
    fetch_rated_members,
    fetch_rated_roster,
)

__all__ = [
    "duel_exists_for_match",
    "ensure_schema",
    "fetch_confirmed_roster",
    "fetch_duel_overview",
    "fetch_match",
    "fetch_match_ratings",
    "fetch_open_duel",
    "fetch_previous_duel_pair_key",
    "fetch_rated_members",
    "fetch_rated_roster",
    "insert_duel",
    "reward_duel_winner",
    "update_duel_outcome",
]
