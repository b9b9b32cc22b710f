"""Persistence helpers for duels and duel rewards using SQLAlchemy."""

from __future__ import annotations

from datetime import UTC, datetime

from sqlalchemy import func, select, update
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session

from domain.common import OPEN_DUEL_STATUSES, DuelStatus, MatchStatus, normalize_side
from domain.duels.candidates import pair_key
from domain.duels.records import DuelOverview, DuelPlayerCard, DuelRecord
from models import Base, Duel, LeagueMember, Match, MatchPlayer, User

DEFAULT_OVERALL = 5.0
UNASSIGNED_TEAM = "UNASSIGNED"


def ensure_schema(engine: Engine) -> None:
    """Create every table and index if they do not exist."""
    Base.metadata.create_all(bind=engine)


def _to_record(duel: Duel) -> DuelRecord:
    return DuelRecord(
        duel_id=duel.id,
        match_id=duel.match_id,
        challenger_id=duel.challenger_id,
        rival_id=duel.rival_id,
        status=duel.status,
        winner_id=duel.winner_id,
        created_at=duel.created_at,
        resolved_at=duel.resolved_at,
    )


def duel_exists_for_match(session: Session, match_id: str) -> bool:
    statement = select(func.count(Duel.id)).where(Duel.match_id == match_id)
    return int(session.scalar(statement) or 0) > 0


def fetch_previous_duel_pair_key(
    session: Session,
    *,
    league_id: str,
    exclude_match_id: str,
) -> str | None:
    """Pair key of the duel from the latest other completed match in the league."""
    last_completed_match_id = session.scalar(
        select(Match.id)
        .where(
            Match.league_id == league_id,
            Match.status == MatchStatus.COMPLETED.value,
            Match.id != exclude_match_id,
        )
        .order_by(Match.date_time.desc().nulls_last(), Match.id.desc())
        .limit(1)
    )
    if last_completed_match_id is None:
        return None

    row = session.execute(
        select(Duel.challenger_id, Duel.rival_id).where(Duel.match_id == last_completed_match_id)
    ).first()
    if row is None:
        return None
    return pair_key(row.challenger_id, row.rival_id)


def insert_duel(
    session: Session,
    *,
    match_id: str,
    challenger_id: str,
    rival_id: str,
) -> DuelRecord:
    """Add a PENDING duel and flush so its generated id is available."""
    duel = Duel(
        match_id=match_id,
        challenger_id=challenger_id,
        rival_id=rival_id,
        status=DuelStatus.PENDING.value,
    )
    session.add(duel)
    session.flush()
    return _to_record(duel)


def fetch_open_duel(session: Session, match_id: str) -> DuelRecord | None:
    duel = session.execute(
        select(Duel).where(Duel.match_id == match_id, Duel.status.in_(OPEN_DUEL_STATUSES))
    ).scalar_one_or_none()
    if duel is None:
        return None
    return _to_record(duel)


def update_duel_outcome(
    session: Session,
    *,
    duel_id: str,
    status: DuelStatus,
    winner_id: str | None,
) -> None:
    """Move an open duel to a terminal status."""
    if not status.is_terminal:
        raise ValueError(f"duel_id={duel_id} cannot be resolved to non-terminal status {status.value}")

    # Only an open row matches, so a concurrent resolution cannot be applied twice.
    result = session.execute(
        update(Duel)
        .where(Duel.id == duel_id, Duel.status.in_(OPEN_DUEL_STATUSES))
        .values(
            status=status.value,
            winner_id=winner_id,
            resolved_at=datetime.now(UTC).replace(tzinfo=None),
        )
        .execution_options(synchronize_session="evaluate")
    )
    if result.rowcount == 1:
        return

    current_status = session.scalar(select(Duel.status).where(Duel.id == duel_id))
    if current_status is None:
        raise LookupError(f"duel_id={duel_id} does not exist")
    raise ValueError(f"duel_id={duel_id} is already resolved with status={current_status}")


def reward_duel_winner(
    session: Session,
    *,
    league_id: str,
    user_id: str,
    honors_increment: int,
    overall_increment: float,
) -> bool:
    """Increment the winner's duel honors and overall rating in one statement.

    Returns False when the player has no standing row in the league.
    """
    result = session.execute(
        update(LeagueMember)
        .where(LeagueMember.league_id == league_id, LeagueMember.user_id == user_id)
        .values(
            honors_duel=LeagueMember.honors_duel + honors_increment,
            league_overall=func.coalesce(LeagueMember.league_overall, 0.0) + overall_increment,
        )
        .execution_options(synchronize_session=False)
    )
    return bool(result.rowcount)


def fetch_duel_overview(session: Session, match_id: str) -> DuelOverview | None:
    """Duel of a match with both players' identity, league stats and side."""
    row = session.execute(
        select(Duel, Match.league_id)
        .join(Match, Match.id == Duel.match_id)
        .where(Duel.match_id == match_id)
    ).first()
    if row is None or row.league_id is None:
        return None

    duel: Duel = row.Duel
    return DuelOverview(
        duel=_to_record(duel),
        challenger=_player_card(
            session, league_id=row.league_id, match_id=match_id, user_id=duel.challenger_id
        ),
        rival=_player_card(session, league_id=row.league_id, match_id=match_id, user_id=duel.rival_id),
    )


def _player_card(session: Session, *, league_id: str, match_id: str, user_id: str) -> DuelPlayerCard:
    user = session.get(User, user_id)
    standing = session.execute(
        select(LeagueMember.league_overall, LeagueMember.honors_mvp).where(
            LeagueMember.league_id == league_id,
            LeagueMember.user_id == user_id,
        )
    ).first()
    team = session.scalar(
        select(MatchPlayer.team).where(
            MatchPlayer.match_id == match_id,
            MatchPlayer.user_id == user_id,
        )
    )

    overall = DEFAULT_OVERALL
    mvps = 0
    if standing is not None:
        if standing.league_overall:
            overall = float(standing.league_overall)
        mvps = int(standing.honors_mvp or 0)

    return DuelPlayerCard(
        user_id=user_id,
        username=user.username if user is not None else None,
        full_name=user.full_name if user is not None else None,
        profile_photo_url=user.profile_photo_url if user is not None else None,
        overall=overall,
        mvps=mvps,
        team=normalize_side(team) or UNASSIGNED_TEAM,
    )


__all__ = [
    "duel_exists_for_match",
    "ensure_schema",
    "fetch_duel_overview",
    "fetch_open_duel",
    "fetch_previous_duel_pair_key",
    "insert_duel",
    "reward_duel_winner",
    "update_duel_outcome",
]
