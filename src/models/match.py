"""matches and match_players table models."""

from __future__ import annotations

import uuid
from datetime import datetime

from sqlalchemy import Boolean, DateTime, Float, ForeignKey, Index, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from models.base import Base


class Match(Base):
    """A scheduled league (or friendly) match."""

    __tablename__ = "matches"
    __table_args__ = (Index("idx_matches_league_status_date", "league_id", "status", "date_time"),)

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    league_id: Mapped[str | None] = mapped_column(ForeignKey("leagues.id"), nullable=True)
    status: Mapped[str] = mapped_column(String(32), nullable=False, default="OPEN")
    date_time: Mapped[datetime | None] = mapped_column(DateTime(timezone=False), nullable=True)
    location: Mapped[str | None] = mapped_column(String(256), nullable=True)


class MatchPlayer(Base):
    """Roster entry: confirmation, side label and post-match performance rating."""

    __tablename__ = "match_players"
    __table_args__ = (UniqueConstraint("match_id", "user_id", name="uq_match_players_match_user"),)

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    match_id: Mapped[str] = mapped_column(ForeignKey("matches.id"), nullable=False)
    user_id: Mapped[str] = mapped_column(ForeignKey("users.id"), nullable=False)
    has_confirmed: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    team: Mapped[str | None] = mapped_column(String(16), nullable=True)
    match_rating: Mapped[float | None] = mapped_column(Float, nullable=True)
