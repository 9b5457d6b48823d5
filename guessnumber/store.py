"""
In-memory store
Holds live game sessions in memory, one per chat window.
Only outcome counters are persisted (see repository.py); the pool and
transcript of a running round live here and die with the process.

Every call returns the events plus a snapshot taken while the lock is held,
so callers never read a session another request is changing.
"""

import logging
import random
from dataclasses import dataclass
from threading import RLock
from time import monotonic, time
from typing import Callable, Dict, List, Optional, Tuple
from uuid import uuid4

from . import config
from .events import GameEvent, SystemGuessed
from .reveal import RevealQueue
from .session import GameSession, TranscriptEntry
from .types import Code, Outcome, Turn

logger = logging.getLogger(__name__)


@dataclass
class SessionRecord:
    id: str
    session: GameSession
    reveals: RevealQueue
    updated_at: float


@dataclass(frozen=True)
class SessionSnapshot:
    session_id: str
    phase: str
    turn: Optional[Turn]
    active: bool
    epoch: int
    current_guess: Optional[Code]
    candidates_left: int
    system_guesses: int
    player_guesses: int
    outcome: Optional[Outcome]
    secret: Optional[Code]
    transcript: Tuple[TranscriptEntry, ...]


def _snapshot(record: SessionRecord) -> SessionSnapshot:
    session = record.session
    return SessionSnapshot(
        session_id=record.id,
        phase=session.phase.value,
        turn=session.turn,
        active=session.active,
        epoch=session.epoch,
        current_guess=session.current_guess,
        candidates_left=session.pool.size,
        system_guesses=session.system_guess_count,
        player_guesses=session.player_guess_count,
        outcome=session.outcome,
        secret=session.secret,
        transcript=session.transcript,
    )


Played = Tuple[List[GameEvent], SessionSnapshot]


class SessionStore:
    def __init__(
        self,
        secret_factory: Optional[Callable[[], Code]] = None,
        reveal_clock: Callable[[], float] = monotonic,
        clock: Callable[[], float] = time,
        idle_timeout: Optional[float] = None,
    ) -> None:
        self._sessions: Dict[str, SessionRecord] = {}
        self._lock = RLock()
        self._secret_factory = secret_factory
        self._reveal_clock = reveal_clock
        self._clock = clock
        self._idle_timeout = idle_timeout if idle_timeout is not None else config.SESSION_IDLE_TIMEOUT

    def create(self) -> SessionRecord:
        new_id = str(uuid4())
        session = GameSession(rng=random.Random())
        reveals = RevealQueue(self._reveal_clock)
        record = SessionRecord(id=new_id, session=session, reveals=reveals, updated_at=self._clock())

        # Queue every system guess for a delayed "thinking" reveal
        def _schedule(event: GameEvent) -> None:
            if isinstance(event, SystemGuessed):
                first = session.system_guess_count == 1
                reveals.schedule(event, config.FIRST_GUESS_DELAY if first else config.NEXT_GUESS_DELAY)

        session.subscribe(_schedule)
        self.expire_idle()
        with self._lock:
            self._sessions[new_id] = record
        logger.info("session %s created", new_id)
        return record

    def snapshot(self, session_id: str) -> Optional[SessionSnapshot]:
        with self._lock:
            record = self._sessions.get(session_id)
            return _snapshot(record) if record else None

    def discard(self, session_id: str) -> bool:
        with self._lock:
            record = self._sessions.pop(session_id, None)
        if record is None:
            return False
        record.reveals.cancel_all()
        return True

    def expire_idle(self) -> List[str]:
        """Drop sessions nobody has touched for longer than the idle timeout."""
        cutoff = self._clock() - self._idle_timeout
        with self._lock:
            stale = [sid for sid, rec in self._sessions.items() if rec.updated_at < cutoff]
        for sid in stale:
            self.discard(sid)
        if stale:
            logger.info("expired %d idle session(s)", len(stale))
        return stale

    # --- calls into a session, serialised per store ---

    def start(self, session_id: str) -> Optional[Played]:
        # May hit the network: fetch before taking the lock
        secret = self._secret_factory() if self._secret_factory else None
        return self._run(session_id, lambda s: s.start(secret))

    def feedback(self, session_id: str, exact: int, misplaced: int) -> Optional[Played]:
        return self._run(session_id, lambda s: s.submit_feedback(exact, misplaced))

    def guess(self, session_id: str, attempt: str) -> Optional[Played]:
        return self._run(session_id, lambda s: s.submit_player_guess(attempt))

    def reset(self, session_id: str) -> Optional[Played]:
        return self._run(session_id, lambda s: s.reset())

    def reveal(self, session_id: str) -> Optional[List[SystemGuessed]]:
        with self._lock:
            record = self._sessions.get(session_id)
            if record is None:
                return None
            record.updated_at = self._clock()
            return record.reveals.due(record.session.epoch)

    def _run(self, session_id: str, action: Callable[[GameSession], List[GameEvent]]) -> Optional[Played]:
        with self._lock:
            record = self._sessions.get(session_id)
            if record is None:
                return None
            # Errors (ValidationError / TurnViolation) propagate to the caller
            events = action(record.session)
            record.updated_at = self._clock()
            return events, _snapshot(record)
