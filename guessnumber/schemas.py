"""
Explicit validation & Pydantic models
- Models are used to validate and serialize/deserialize data
  exchanged between the client and server.
- Defines the structure of API requests and responses.
"""

from typing import Any, Dict, List, Literal, Optional
from pydantic import BaseModel, Field, field_validator

Phase = Literal["idle", "system_thinking", "awaiting_feedback", "awaiting_player_guess", "stuck"]

# 1. Player's score for the system's latest guess
class FeedbackRequest(BaseModel):
    exact: int = Field(..., description="Digits in the right place (0-4)")
    misplaced: int = Field(..., description="Right digits in the wrong place (0-4)")

    @field_validator("exact", "misplaced")
    @classmethod
    def validate_range(cls, value: int) -> int:
        """
        We only check that each number is between 0 and 4.
        The "exact + misplaced <= 4" rule is checked by the game session,
        which rejects it with a 400.
        """
        if value < 0 or value > 4:
            raise ValueError("Each feedback number must be between 0 and 4 inclusive.")
        return value

    model_config = {
        "json_schema_extra": {
            "examples": [
                {"exact": 1, "misplaced": 2},
                {"exact": 4, "misplaced": 0},  # you got it
            ]
        }
    }

# 2. Player's guess at the system secret
class GuessRequest(BaseModel):
    guess: str = Field(
        ..., description="Four digits 0-9 as a string; leading zeros count (\"0007\")."
    )

    model_config = {"json_schema_extra": {"examples": [{"guess": "0123"}]}}

# 3. One chat line
class TranscriptEntryOut(BaseModel):
    id: int = Field(..., description="Message number within this round")
    sender: Literal["bot", "user", "center"] = Field(..., description="Who said it")
    text: str = Field(..., description="Plain text of the message")

# 4. One core event (system_guessed, prompt_player_turn, ...)
class EventOut(BaseModel):
    kind: str = Field(..., description="Event type")
    epoch: int = Field(..., description="Session epoch the event belongs to")
    data: Dict[str, Any] = Field(default_factory=dict, description="Event fields (code, secret, reason, ...)")

# 5. Overall session state; the secret only shows once the round is won
class SessionState(BaseModel):
    session_id: str = Field(..., description="Unique ID for the chat session")
    phase: Phase = Field(..., description="Where the round is")
    turn: Optional[Literal["system", "player"]] = Field(None, description="Whose move it is")
    active: bool = Field(..., description="Whether a round is running")
    epoch: int = Field(..., description="Increments on every start/reset")
    current_guess: Optional[str] = Field(None, description="System guess waiting for feedback")
    candidates_left: int = Field(..., description="Codes still consistent with the feedback")
    system_guesses: int = Field(..., description="Guesses the system made this round")
    player_guesses: int = Field(..., description="Guesses the player made this round")
    outcome: Optional[Literal["system_won", "player_won", "stuck"]] = Field(None, description="How the round ended")
    secret: Optional[str] = Field(None, description="System secret (only revealed after a win)")
    transcript: List[TranscriptEntryOut] = Field(..., description="Chat so far")

# 6. Result of a call: events it produced + state after it
class TurnResponse(BaseModel):
    events: List[EventOut] = Field(..., description="Events emitted by this call, in order")
    state: SessionState = Field(..., description="State after the call")

# 7. Legal feedback choices for the picker
class FeedbackOption(BaseModel):
    exact: int
    misplaced: int
    label: str

# 8. Scoreboard
class StatsOut(BaseModel):
    rounds_started: int = Field(..., description="Total rounds started")
    system_wins: int = Field(..., description="Rounds the solver won")
    player_wins: int = Field(..., description="Rounds the human won")
    stuck_rounds: int = Field(..., description="Rounds ended by contradictory feedback")

    current_player_streak: int = Field(..., description="Current consecutive player wins")
    best_player_streak: int = Field(..., description="Best consecutive player wins")

    average_system_guesses_to_win: Optional[float] = Field(
        None, description="Average guesses the solver needed in its wins"
    )
    fastest_system_win: Optional[int] = Field(
        None, description="Fewest guesses the solver needed to win"
    )
