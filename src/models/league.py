"""leagues and league_members table models."""

from __future__ import annotations

import uuid

from sqlalchemy import Float, ForeignKey, Index, Integer, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from models.base import Base


class League(Base):
    __tablename__ = "leagues"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    name: Mapped[str] = mapped_column(String(128), nullable=False)


class LeagueMember(Base):
    """Per-league standing of one player (rating and honor counters)."""

    __tablename__ = "league_members"
    __table_args__ = (
        UniqueConstraint("league_id", "user_id", name="uq_league_members_league_user"),
        Index("idx_league_members_user", "user_id"),
    )

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    league_id: Mapped[str] = mapped_column(ForeignKey("leagues.id"), nullable=False)
    user_id: Mapped[str] = mapped_column(ForeignKey("users.id"), nullable=False)
    league_overall: Mapped[float | None] = mapped_column(Float, nullable=True)
    honors_duel: Mapped[int] = mapped_column(Integer, nullable=False, default=0, server_default="0")
    honors_mvp: Mapped[int] = mapped_column(Integer, nullable=False, default=0, server_default="0")
