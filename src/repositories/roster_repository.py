"""Read helpers for matches, confirmed rosters and league ratings."""

from __future__ import annotations

from collections.abc import Sequence

from sqlalchemy import select
from sqlalchemy.orm import Session

from domain.common import (
    MatchSnapshot,
    Participant,
    RatedMember,
    RosterEntry,
    coerce_rating,
    normalize_side,
)
from models import LeagueMember, Match, MatchPlayer, User


def fetch_match(session: Session, match_id: str) -> MatchSnapshot | None:
    row = session.execute(
        select(Match.id, Match.league_id, Match.status).where(Match.id == match_id)
    ).first()
    if row is None:
        return None
    return MatchSnapshot(match_id=row.id, league_id=row.league_id, status=row.status)


def fetch_confirmed_roster(session: Session, match_id: str) -> list[RosterEntry]:
    """Confirmed roster rows in deterministic user order."""
    statement = (
        select(MatchPlayer.user_id, MatchPlayer.team)
        .where(MatchPlayer.match_id == match_id, MatchPlayer.has_confirmed.is_(True))
        .order_by(MatchPlayer.user_id)
    )
    return [
        RosterEntry(user_id=row.user_id, side=normalize_side(row.team))
        for row in session.execute(statement)
    ]


def fetch_rated_members(
    session: Session,
    *,
    league_id: str,
    user_ids: Sequence[str],
) -> list[RatedMember]:
    """League rating rows for the given players, ordered by user id."""
    if not user_ids:
        return []

    statement = (
        select(
            LeagueMember.user_id,
            LeagueMember.league_overall,
            User.full_name,
            User.profile_photo_url,
        )
        .select_from(LeagueMember)
        .outerjoin(User, User.id == LeagueMember.user_id)
        .where(LeagueMember.league_id == league_id, LeagueMember.user_id.in_(list(user_ids)))
        .order_by(LeagueMember.user_id)
    )
    return [
        RatedMember(
            user_id=row.user_id,
            rating=coerce_rating(row.league_overall),
            full_name=row.full_name,
            profile_photo_url=row.profile_photo_url,
        )
        for row in session.execute(statement)
    ]


def fetch_match_ratings(
    session: Session,
    *,
    match_id: str,
    user_ids: Sequence[str],
) -> dict[str, float]:
    """Per-match performance rating by user; players without a rating are absent."""
    statement = select(MatchPlayer.user_id, MatchPlayer.match_rating).where(
        MatchPlayer.match_id == match_id,
        MatchPlayer.user_id.in_(list(user_ids)),
        MatchPlayer.match_rating.is_not(None),
    )
    return {row.user_id: float(row.match_rating) for row in session.execute(statement)}


def fetch_rated_roster(session: Session, match_id: str) -> list[Participant]:
    """Confirmed players of a match as Participants carrying league rating and side.

    Players without a league-member row keep a rating of 0. Friendly matches
    (no league) yield unrated participants.
    """
    match = fetch_match(session, match_id)
    if match is None:
        return []

    roster = fetch_confirmed_roster(session, match_id)
    ratings: dict[str, float] = {}
    if match.league_id is not None:
        members = fetch_rated_members(
            session,
            league_id=match.league_id,
            user_ids=[entry.user_id for entry in roster],
        )
        ratings = {member.user_id: member.rating for member in members}

    return [
        Participant(id=entry.user_id, rating=ratings.get(entry.user_id, 0.0), side=entry.side)
        for entry in roster
    ]


__all__ = [
    "fetch_confirmed_roster",
    "fetch_match",
    "fetch_match_ratings",
    "fetch_rated_members",
    "fetch_rated_roster",
]
