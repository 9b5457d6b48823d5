'''
Guess-the-4-Digit chat game API

Endpoints:
POST   /sessions                   -> open a chat session and start a round
GET    /sessions/{id}              -> read state & transcript
POST   /sessions/{id}/start        -> start a new round (after a win or reset)
POST   /sessions/{id}/feedback     -> score the system's guess
POST   /sessions/{id}/guess        -> guess the system's secret
POST   /sessions/{id}/reset        -> drop the round, back to idle
GET    /sessions/{id}/reveal       -> system guesses whose "thinking" delay is over
DELETE /sessions/{id}              -> close the session

Extras:
GET  /feedback-options            -> the 15 legal (exact, misplaced) pairs
GET  /stats                       -> scoreboard
POST /stats/reset                 -> reset scoreboard
'''

import logging
from typing import Callable, List, Optional

from fastapi import FastAPI, HTTPException, Depends
from fastapi.middleware.cors import CORSMiddleware

from . import config
from .random_client import fetch_code
from .db import get_db                  # SQLAlchemy Session dependency
from .repository import DBStatsStore    # DB-backed scoreboard
from .bootstrap_db import create_all    # dev-only: create tables
from .engine import describe, feedback_options
from .errors import TurnViolation, ValidationError
from .events import GameEvent, PlayerWon, Stuck, SystemWon
from .session import Phase
from .store import Played, SessionSnapshot, SessionStore
from .types import CODE_LENGTH, Code

from .schemas import (
    EventOut,
    FeedbackOption,
    FeedbackRequest,
    GuessRequest,
    SessionState,
    StatsOut,
    TranscriptEntryOut,
    TurnResponse,
)

logging.basicConfig(
    level=config.LOG_LEVEL,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

app = FastAPI(title="Guess-the-4-Digit Chat API", version="1.0.0")

# Allow everything in dev so the docs and front-end work easily
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"]
)

# --- Dev convenience: auto-create tables locally ---
if config.APP_ENV == "local":
    @app.on_event("startup")
    def _dev_create_tables():
        create_all()


def _new_secret() -> Code:
    # Looked up at call time so tests can patch main.fetch_code
    return fetch_code(CODE_LENGTH)


store = SessionStore(secret_factory=_new_secret)

# Small factory so routes get a per-request scoreboard (bound to the current DB session)
def get_stats_store(session = Depends(get_db)) -> DBStatsStore:
    return DBStatsStore(session)

# ---------------- Helpers ----------------

def _to_events(events: List[GameEvent]) -> List[EventOut]:
    out = []
    for event in events:
        data = event.to_dict()
        kind = data.pop("kind")
        epoch = data.pop("epoch")
        out.append(EventOut(kind=kind, epoch=epoch, data=data))
    return out

def _to_state(snap: SessionSnapshot) -> SessionState:
    # Keep the secret hidden until the player can no longer use it
    won = snap.phase == Phase.IDLE.value and snap.outcome in ("system_won", "player_won")
    return SessionState(
        session_id=snap.session_id,
        phase=snap.phase,
        turn=snap.turn,
        active=snap.active,
        epoch=snap.epoch,
        current_guess=snap.current_guess,
        candidates_left=snap.candidates_left,
        system_guesses=snap.system_guesses,
        player_guesses=snap.player_guesses,
        outcome=snap.outcome,
        secret=snap.secret if won else None,
        transcript=[
            TranscriptEntryOut(id=m.id, sender=m.sender, text=m.text) for m in snap.transcript
        ],
    )

def _record_outcomes(stats: DBStatsStore, snap: SessionSnapshot, events: List[GameEvent]) -> None:
    for event in events:
        if isinstance(event, SystemWon):
            stats.record_outcome("system_won", snap.system_guesses)
        elif isinstance(event, PlayerWon):
            stats.record_outcome("player_won", snap.system_guesses)
        elif isinstance(event, Stuck):
            stats.record_outcome("stuck", snap.system_guesses)

def _play(action: Callable[[], Optional[Played]], stats: DBStatsStore) -> TurnResponse:
    try:
        played = action()
    except ValidationError as ve:
        raise HTTPException(status_code=400, detail=ve.message)
    except TurnViolation as tv:
        raise HTTPException(status_code=409, detail=tv.message)
    if played is None:
        raise HTTPException(status_code=404, detail="Session not found")

    events, snap = played
    _record_outcomes(stats, snap, events)
    return TurnResponse(events=_to_events(events), state=_to_state(snap))

# ---------------- Routes ----------------

@app.post("/sessions", response_model=TurnResponse, summary="Open a session and start a round")
def open_session(stats: DBStatsStore = Depends(get_stats_store)) -> TurnResponse:
    record = store.create()
    response = _play(lambda: store.start(record.id), stats)
    stats.record_start()
    return response

@app.get("/sessions/{session_id}", response_model=SessionState, summary="Get current session state")
def get_session(session_id: str) -> SessionState:
    snap = store.snapshot(session_id)
    if not snap:
        raise HTTPException(status_code=404, detail="Session not found")
    return _to_state(snap)

@app.post("/sessions/{session_id}/start", response_model=TurnResponse, summary="Start a new round")
def start_round(session_id: str, stats: DBStatsStore = Depends(get_stats_store)) -> TurnResponse:
    response = _play(lambda: store.start(session_id), stats)
    stats.record_start()
    return response

@app.post("/sessions/{session_id}/feedback", response_model=TurnResponse, summary="Score the system's guess")
def submit_feedback(
    session_id: str,
    payload: FeedbackRequest,
    stats: DBStatsStore = Depends(get_stats_store),
) -> TurnResponse:
    return _play(lambda: store.feedback(session_id, payload.exact, payload.misplaced), stats)

@app.post("/sessions/{session_id}/guess", response_model=TurnResponse, summary="Guess the system's secret")
def submit_guess(
    session_id: str,
    payload: GuessRequest,
    stats: DBStatsStore = Depends(get_stats_store),
) -> TurnResponse:
    return _play(lambda: store.guess(session_id, payload.guess), stats)

@app.post("/sessions/{session_id}/reset", response_model=TurnResponse, summary="Reset the session")
def reset_session(session_id: str, stats: DBStatsStore = Depends(get_stats_store)) -> TurnResponse:
    return _play(lambda: store.reset(session_id), stats)

@app.get("/sessions/{session_id}/reveal", response_model=List[EventOut], summary="System guesses ready to show")
def reveal_guesses(session_id: str) -> List[EventOut]:
    ready = store.reveal(session_id)
    if ready is None:
        raise HTTPException(status_code=404, detail="Session not found")
    return _to_events(ready)

@app.delete("/sessions/{session_id}", summary="Close a session")
def close_session(session_id: str) -> dict:
    if not store.discard(session_id):
        raise HTTPException(status_code=404, detail="Session not found")
    return {"message": "Session closed."}

@app.get("/feedback-options", response_model=List[FeedbackOption], summary="Legal feedback choices")
def get_feedback_options() -> List[FeedbackOption]:
    return [
        FeedbackOption(exact=f.exact, misplaced=f.misplaced, label=describe(f))
        for f in feedback_options()
    ]

@app.get("/stats", response_model=StatsOut, summary="Get scoreboard")
def get_stats(stats: DBStatsStore = Depends(get_stats_store)) -> StatsOut:
    return stats.get_stats()

@app.post("/stats/reset", summary="Reset the scoreboard")
def reset_stats(stats: DBStatsStore = Depends(get_stats_store)) -> dict:
    stats.reset_stats()
    return {"message": "Stats reset."}
