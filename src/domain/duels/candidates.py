"""Candidate-pair enumeration and selection for rivalry duels."""

from __future__ import annotations

import random
from collections.abc import Sequence
from dataclasses import dataclass
from itertools import combinations

from domain.common import Participant


def pair_key(player_id: str, other_player_id: str) -> str:
    """Order-independent identifier for a two-player pairing."""
    return ",".join(sorted((player_id, other_player_id)))


@dataclass(frozen=True)
class CandidatePair:
    first: Participant
    second: Participant
    rating_diff: float
    same_side: bool
    key: str

    @classmethod
    def of(cls, first: Participant, second: Participant) -> CandidatePair:
        same_side = first.side != "" and second.side != "" and first.side == second.side
        return cls(
            first=first,
            second=second,
            rating_diff=abs(first.rating - second.rating),
            same_side=same_side,
            key=pair_key(first.id, second.id),
        )


def enumerate_candidates(participants: Sequence[Participant]) -> list[CandidatePair]:
    """All n*(n-1)/2 unordered pairs, in enumeration order of the input."""
    return [CandidatePair.of(first, second) for first, second in combinations(participants, 2)]


def exclude_pair(candidates: Sequence[CandidatePair], excluded_key: str | None) -> list[CandidatePair]:
    if excluded_key is None:
        return list(candidates)
    return [candidate for candidate in candidates if candidate.key != excluded_key]


def rank_by_balance(candidates: Sequence[CandidatePair]) -> list[CandidatePair]:
    """Most balanced first; ties keep their relative order."""
    return sorted(candidates, key=lambda candidate: candidate.rating_diff)


def selection_pool(ranked: Sequence[CandidatePair], pool_size: int) -> list[CandidatePair]:
    """Best-balanced prefix of cross-side pairs, falling back to same-side pairs."""
    different_side = [candidate for candidate in ranked if not candidate.same_side]
    same_side = [candidate for candidate in ranked if candidate.same_side]
    pool = different_side if different_side else same_side
    return pool[: max(pool_size, 0)]


def draw_candidate(pool: Sequence[CandidatePair], rng: random.Random) -> CandidatePair | None:
    if not pool:
        return None
    return pool[rng.randrange(len(pool))]


__all__ = [
    "CandidatePair",
    "draw_candidate",
    "enumerate_candidates",
    "exclude_pair",
    "pair_key",
    "rank_by_balance",
    "selection_pool",
]
