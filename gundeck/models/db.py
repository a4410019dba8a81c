"""
SQLAlchemy ORM models for persistent storage.

Card entries are stored as JSON snapshots that include the full card
record, so a stored deck stays analyzable if the catalog changes.
"""

from datetime import UTC, datetime
from typing import Any

from sqlalchemy import JSON, Boolean, DateTime, Float, ForeignKey, Integer, String, Text, func
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship


def _utcnow() -> datetime:
    return datetime.now(UTC)


class Base(DeclarativeBase):
    """Base class for all ORM models."""

    pass


class DeckDB(Base):
    """A saved deck with its current card list."""

    __tablename__ = "decks"

    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    name: Mapped[str] = mapped_column(String(255), index=True)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    author: Mapped[str | None] = mapped_column(String(255), index=True, nullable=True)
    is_public: Mapped[bool] = mapped_column(Boolean, default=False)
    tags: Mapped[list[str]] = mapped_column(JSON, default=list)

    # [{"card": {...}, "quantity": n}, ...]
    entries: Mapped[list[dict[str, Any]]] = mapped_column(JSON, default=list)

    wins: Mapped[int] = mapped_column(Integer, default=0)
    losses: Mapped[int] = mapped_column(Integer, default=0)
    # Users who liked the deck; the like count is its length
    liked_by: Mapped[list[str]] = mapped_column(JSON, default=list)
    allow_comments: Mapped[bool] = mapped_column(Boolean, default=True)
    allow_forks: Mapped[bool] = mapped_column(Boolean, default=True)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=_utcnow, server_default=func.now()
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=_utcnow, server_default=func.now(), onupdate=_utcnow
    )

    versions: Mapped[list["DeckVersionDB"]] = relationship(
        back_populates="deck", cascade="all, delete-orphan", order_by="DeckVersionDB.version"
    )
    games: Mapped[list["GameRecordDB"]] = relationship(
        back_populates="deck", cascade="all, delete-orphan", order_by="GameRecordDB.played_at"
    )

    def __repr__(self) -> str:
        return f"<DeckDB(id={self.id}, name={self.name})>"


class DeckVersionDB(Base):
    """A snapshot of a deck's card list."""

    __tablename__ = "deck_versions"

    id: Mapped[str] = mapped_column(String(100), primary_key=True)
    deck_id: Mapped[str] = mapped_column(
        String(64), ForeignKey("decks.id", ondelete="CASCADE"), index=True
    )
    version: Mapped[int] = mapped_column(Integer)
    name: Mapped[str] = mapped_column(String(255))
    entries: Mapped[list[dict[str, Any]]] = mapped_column(JSON, default=list)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    total_cards: Mapped[int] = mapped_column(Integer, default=0)
    market_value: Mapped[float] = mapped_column(Float, default=0.0)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=_utcnow, server_default=func.now()
    )

    deck: Mapped["DeckDB"] = relationship(back_populates="versions")

    def __repr__(self) -> str:
        return f"<DeckVersionDB(deck={self.deck_id}, version={self.version})>"


class GameRecordDB(Base):
    """A single game played with a deck."""

    __tablename__ = "game_records"

    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    deck_id: Mapped[str] = mapped_column(
        String(64), ForeignKey("decks.id", ondelete="CASCADE"), index=True
    )
    opponent: Mapped[str] = mapped_column(String(255))
    result: Mapped[str] = mapped_column(String(10))
    format: Mapped[str] = mapped_column(String(50), default="Standard")
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    played_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=_utcnow, server_default=func.now()
    )

    deck: Mapped["DeckDB"] = relationship(back_populates="games")

    def __repr__(self) -> str:
        return f"<GameRecordDB(deck={self.deck_id}, result={self.result})>"
