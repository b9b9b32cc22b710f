"""users table model."""

from __future__ import annotations

import uuid

from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column

from models.base import Base


class User(Base):
    """Player identity shown next to duels and standings."""

    __tablename__ = "users"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    username: Mapped[str | None] = mapped_column(String(64), nullable=True, unique=True)
    full_name: Mapped[str | None] = mapped_column(String(128), nullable=True)
    profile_photo_url: Mapped[str | None] = mapped_column(String(512), nullable=True)
