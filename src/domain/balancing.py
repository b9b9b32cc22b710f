"""Greedy two-team roster balancing by rating."""

from __future__ import annotations

from collections.abc import Iterable
from typing import NamedTuple

from domain.common import Participant


class TeamAssignment(NamedTuple):
    """Two disjoint teams covering every input participant exactly once."""

    team_a: tuple[Participant, ...]
    team_b: tuple[Participant, ...]

    @property
    def rating_sum_a(self) -> float:
        return sum(player.rating for player in self.team_a)

    @property
    def rating_sum_b(self) -> float:
        return sum(player.rating for player in self.team_b)

    @property
    def rating_gap(self) -> float:
        return abs(self.rating_sum_a - self.rating_sum_b)


def balance(players: Iterable[Participant]) -> TeamAssignment:
    """Split players into two teams, always topping up the lighter side.

    Players are visited by rating, highest first (ties keep input order). Each one
    joins Team A when ``sum_a <= sum_b`` and Team B otherwise, so an exact tie
    favours Team A. This is a heuristic, not an optimal partition.
    """
    ordered = sorted(players, key=lambda player: player.rating, reverse=True)

    team_a: list[Participant] = []
    team_b: list[Participant] = []
    sum_a = 0.0
    sum_b = 0.0
    for player in ordered:
        if sum_a <= sum_b:
            team_a.append(player)
            sum_a += player.rating
        else:
            team_b.append(player)
            sum_b += player.rating

    return TeamAssignment(team_a=tuple(team_a), team_b=tuple(team_b))


__all__ = ["TeamAssignment", "balance"]
