"""
DB-backed scoreboard.

Public methods:
- record_start() -> None
- record_outcome(outcome, system_guesses) -> None
- get_stats() -> StatsOut
- reset_stats() -> None

Routes call record_* after a session call produced a start or an ending event.
"""

from __future__ import annotations

import logging
from datetime import datetime

from sqlalchemy.orm import Session

from .models import Stats as StatsORM
from .schemas import StatsOut
from .types import Outcome

logger = logging.getLogger(__name__)


class DBStatsStore:
    def __init__(self, db: Session):
        self.db = db

    def _get_or_create_stats(self) -> StatsORM:
        stats = self.db.get(StatsORM, 1)
        if not stats:
            stats = StatsORM(
                id=1,
                rounds_started=0,
                system_wins=0,
                player_wins=0,
                stuck_rounds=0,
                current_player_streak=0,
                best_player_streak=0,
                total_system_guesses_in_wins=0,
                fastest_system_win=None,
                updated_at=datetime.utcnow(),
            )
            self.db.add(stats)
            self.db.commit()
            self.db.refresh(stats)
        return stats

    def record_start(self) -> None:
        stats = self._get_or_create_stats()
        stats.rounds_started += 1
        stats.updated_at = datetime.utcnow()
        self.db.commit()

    def record_outcome(self, outcome: Outcome, system_guesses: int) -> None:
        stats = self._get_or_create_stats()
        if outcome == "system_won":
            stats.system_wins += 1
            stats.current_player_streak = 0
            stats.total_system_guesses_in_wins += system_guesses
            if stats.fastest_system_win is None or system_guesses < stats.fastest_system_win:
                stats.fastest_system_win = system_guesses
        elif outcome == "player_won":
            stats.player_wins += 1
            stats.current_player_streak += 1
            if stats.current_player_streak > stats.best_player_streak:
                stats.best_player_streak = stats.current_player_streak
        elif outcome == "stuck":
            # Contradictory feedback: nobody won, streak is untouched
            stats.stuck_rounds += 1
        else:
            raise ValueError(f"Unknown outcome: {outcome!r}")

        stats.updated_at = datetime.utcnow()
        self.db.commit()
        logger.info("recorded outcome %s", outcome)

    def get_stats(self) -> StatsOut:
        stats = self._get_or_create_stats()
        avg = (stats.total_system_guesses_in_wins / stats.system_wins) if stats.system_wins > 0 else None
        return StatsOut(
            rounds_started=stats.rounds_started,
            system_wins=stats.system_wins,
            player_wins=stats.player_wins,
            stuck_rounds=stats.stuck_rounds,
            current_player_streak=stats.current_player_streak,
            best_player_streak=stats.best_player_streak,
            average_system_guesses_to_win=avg,
            fastest_system_win=stats.fastest_system_win,
        )

    def reset_stats(self) -> None:
        stats = self._get_or_create_stats()
        stats.rounds_started = 0
        stats.system_wins = 0
        stats.player_wins = 0
        stats.stuck_rounds = 0
        stats.current_player_streak = 0
        stats.best_player_streak = 0
        stats.total_system_guesses_in_wins = 0
        stats.fastest_system_win = None
        stats.updated_at = datetime.utcnow()
        self.db.commit()
