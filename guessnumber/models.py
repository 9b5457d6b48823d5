"""
SQLAlchemy ORM models.

Tables:
- stats: single-row scoreboard of round outcomes (no chat history is stored)
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from sqlalchemy import DateTime, Integer
from sqlalchemy.orm import Mapped, mapped_column

from .db import Base


# For simplicity: store exactly one row with id=1.
class Stats(Base):
    __tablename__ = "stats"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, default=1)

    rounds_started: Mapped[int] = mapped_column(Integer, default=0)
    system_wins: Mapped[int] = mapped_column(Integer, default=0)
    player_wins: Mapped[int] = mapped_column(Integer, default=0)
    stuck_rounds: Mapped[int] = mapped_column(Integer, default=0)

    # consecutive rounds the human won
    current_player_streak: Mapped[int] = mapped_column(Integer, default=0)
    best_player_streak: Mapped[int] = mapped_column(Integer, default=0)

    # how many guesses the solver needed when it won
    total_system_guesses_in_wins: Mapped[int] = mapped_column(Integer, default=0)
    fastest_system_win: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)

    updated_at: Mapped[datetime] = mapped_column(DateTime, nullable=False, default=datetime.utcnow)
