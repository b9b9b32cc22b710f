"""Expected failure conditions raised while generating a duel."""

from __future__ import annotations


class DuelGenerationError(Exception):
    """Base class; ``code`` is stable, ``message`` is safe to show to players."""

    code = "DUEL_GENERATION_FAILED"
    message = "The duel could not be generated."

    def __init__(self, match_id: str, detail: str | None = None) -> None:
        self.match_id = match_id
        self.detail = detail
        text = f"{self.code} match_id={match_id}"
        if detail:
            text = f"{text}: {detail}"
        super().__init__(text)


class MatchNotFound(DuelGenerationError):
    code = "MATCH_NOT_FOUND"
    message = "Match not found."


class DuelAlreadyExists(DuelGenerationError):
    code = "DUEL_ALREADY_EXISTS"
    message = "A duel has already been generated for this match."


class InsufficientConfirmedPlayers(DuelGenerationError):
    code = "INSUFFICIENT_CONFIRMED_PLAYERS"
    message = "At least 2 confirmed players are needed to create a duel."


class MatchHasNoLeague(DuelGenerationError):
    code = "MATCH_HAS_NO_LEAGUE"
    message = "The match is not associated with a league."


class InsufficientMemberData(DuelGenerationError):
    code = "INSUFFICIENT_MEMBER_DATA"
    message = "Not enough league member data was found for the confirmed players."


class NoCompatiblePairs(DuelGenerationError):
    code = "NO_COMPATIBLE_PAIRS"
    message = "No compatible pairs could be generated."


class PairSelectionFailed(DuelGenerationError):
    code = "PAIR_SELECTION_FAILED"
    message = "The duel pair could not be selected."


__all__ = [
    "DuelAlreadyExists",
    "DuelGenerationError",
    "InsufficientConfirmedPlayers",
    "InsufficientMemberData",
    "MatchHasNoLeague",
    "MatchNotFound",
    "NoCompatiblePairs",
    "PairSelectionFailed",
]
