"""duels table model."""

from __future__ import annotations

import uuid
from datetime import datetime

from sqlalchemy import CheckConstraint, DateTime, Enum, ForeignKey, String, func
from sqlalchemy.orm import Mapped, mapped_column

from models.base import Base


class Duel(Base):
    """Head-to-head rivalry attached to one match (at most one per match)."""

    __tablename__ = "duels"
    __table_args__ = (
        CheckConstraint("challenger_id <> rival_id", name="ck_duels_distinct_players"),
    )

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    match_id: Mapped[str] = mapped_column(ForeignKey("matches.id"), nullable=False, unique=True)
    challenger_id: Mapped[str] = mapped_column(ForeignKey("users.id"), nullable=False)
    rival_id: Mapped[str] = mapped_column(ForeignKey("users.id"), nullable=False)
    status: Mapped[str] = mapped_column(
        Enum(
            "PENDING",
            "ACTIVE",
            "COMPLETED",
            "DRAW",
            name="duel_status",
            native_enum=False,
        ),
        nullable=False,
        default="PENDING",
    )
    winner_id: Mapped[str | None] = mapped_column(ForeignKey("users.id"), nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=False),
        nullable=False,
        server_default=func.now(),
    )
    resolved_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=False), nullable=True)
