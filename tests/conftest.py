"""Shared fixtures: an in-memory store and a small seeding helper."""

from __future__ import annotations

from collections.abc import Iterator
from datetime import datetime

import pytest
from sqlalchemy import func, select
from sqlalchemy.orm import Session, sessionmaker

from db import create_db_engine, create_session_factory
from models import Duel, League, LeagueMember, Match, MatchPlayer, User
from repositories.duel_repository import ensure_schema


class Seeder:
    """Writes fixture rows, committing after every call."""

    def __init__(self, session_factory: sessionmaker[Session]) -> None:
        self.session_factory = session_factory

    def _add(self, *rows: object) -> None:
        with self.session_factory() as session:
            session.add_all(rows)
            session.commit()

    def league(self, league_id: str = "league-1", name: str = "Thursday League") -> str:
        self._add(League(id=league_id, name=name))
        return league_id

    def user(self, user_id: str, full_name: str | None = None, **fields: object) -> str:
        self._add(User(id=user_id, full_name=full_name, **fields))
        return user_id

    def member(
        self,
        user_id: str,
        rating: float | None,
        *,
        league_id: str = "league-1",
        honors_duel: int = 0,
        honors_mvp: int = 0,
    ) -> None:
        self._add(
            LeagueMember(
                league_id=league_id,
                user_id=user_id,
                league_overall=rating,
                honors_duel=honors_duel,
                honors_mvp=honors_mvp,
            )
        )

    def match(
        self,
        match_id: str,
        *,
        league_id: str | None = "league-1",
        status: str = "OPEN",
        date_time: datetime | None = None,
    ) -> str:
        self._add(Match(id=match_id, league_id=league_id, status=status, date_time=date_time))
        return match_id

    def roster(
        self,
        match_id: str,
        user_id: str,
        *,
        confirmed: bool = True,
        team: str | None = None,
        match_rating: float | None = None,
    ) -> None:
        self._add(
            MatchPlayer(
                match_id=match_id,
                user_id=user_id,
                has_confirmed=confirmed,
                team=team,
                match_rating=match_rating,
            )
        )

    def duel(
        self,
        match_id: str,
        challenger_id: str,
        rival_id: str,
        *,
        status: str = "PENDING",
        winner_id: str | None = None,
    ) -> str:
        duel = Duel(
            match_id=match_id,
            challenger_id=challenger_id,
            rival_id=rival_id,
            status=status,
            winner_id=winner_id,
        )
        with self.session_factory() as session:
            session.add(duel)
            session.commit()
            return duel.id

    def player(
        self,
        user_id: str,
        rating: float | None,
        *,
        match_id: str,
        team: str | None = None,
        match_rating: float | None = None,
        full_name: str | None = None,
    ) -> str:
        """User + league standing + confirmed roster row in one call."""
        self.user(user_id, full_name=full_name)
        self.member(user_id, rating)
        self.roster(match_id, user_id, team=team, match_rating=match_rating)
        return user_id

    def count_duels(self) -> int:
        with self.session_factory() as session:
            return int(session.scalar(select(func.count(Duel.id))) or 0)

    def load_duel(self, match_id: str) -> Duel | None:
        with self.session_factory() as session:
            return session.execute(select(Duel).where(Duel.match_id == match_id)).scalar_one_or_none()

    def load_member(self, user_id: str, league_id: str = "league-1") -> LeagueMember:
        with self.session_factory() as session:
            return session.execute(
                select(LeagueMember).where(
                    LeagueMember.league_id == league_id,
                    LeagueMember.user_id == user_id,
                )
            ).scalar_one()


@pytest.fixture
def session_factory() -> Iterator[sessionmaker[Session]]:
    engine = create_db_engine("sqlite+pysqlite:///:memory:")
    ensure_schema(engine)
    yield create_session_factory(engine)
    engine.dispose()


@pytest.fixture
def seed(session_factory: sessionmaker[Session]) -> Seeder:
    return Seeder(session_factory)
