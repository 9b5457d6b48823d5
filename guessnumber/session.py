"""
Turn-based game session (no HTTP, no storage).

One round goes:
  start -> system guesses -> player scores it -> player guesses my secret
        -> system guesses again -> ... until someone hits 4 exact.

Phases:
  IDLE                   no round running (never started, won, or reset)
  SYSTEM_THINKING        system committed to picking a guess
  AWAITING_FEEDBACK      system guess shown, waiting for the player's score
  AWAITING_PLAYER_GUESS  player's turn to guess the system secret
  STUCK                  feedback contradicted itself; only reset leaves it

Every call returns the events it produced and also hands them to listeners.
Calls made in the wrong phase emit TurnRejected and raise TurnViolation;
malformed input raises ValidationError. Neither changes any state.
"""

import logging
import random
from dataclasses import dataclass
from enum import Enum
from typing import Callable, List, Optional, Tuple

from .engine import describe, is_valid_code, is_valid_feedback, is_win, score
from .errors import NoCandidatesLeft, TurnViolation, ValidationError
from .events import (
    GameEvent,
    PlayerGuessScored,
    PlayerWon,
    PromptPlayerTurn,
    Stuck,
    SystemGuessed,
    SystemWon,
    TurnRejected,
)
from .pool import CandidatePool
from .types import CODE_LENGTH, Code, Feedback, Outcome, Sender, Turn

logger = logging.getLogger(__name__)

Listener = Callable[[GameEvent], None]


class Phase(str, Enum):
    IDLE = "idle"
    SYSTEM_THINKING = "system_thinking"
    AWAITING_FEEDBACK = "awaiting_feedback"
    AWAITING_PLAYER_GUESS = "awaiting_player_guess"
    STUCK = "stuck"


@dataclass(frozen=True)
class TranscriptEntry:
    id: int
    sender: Sender
    text: str


class GameSession:
    def __init__(
        self,
        rng: Optional[random.Random] = None,
        secret_factory: Optional[Callable[[], Code]] = None,
    ) -> None:
        self._rng = rng or random.Random()
        self._secret_factory = secret_factory or self._random_secret
        self._pool = CandidatePool(self._rng)
        self._listeners: List[Listener] = []
        self._outbox: List[GameEvent] = []
        # Bumped on every start/reset; tags events so stale reveals can be dropped
        self._epoch = 0
        self._clear_round()

    def _random_secret(self) -> Code:
        return str(self._rng.randrange(10 ** CODE_LENGTH)).zfill(CODE_LENGTH)

    def _clear_round(self) -> None:
        self._secret: Optional[Code] = None
        self._phase = Phase.IDLE
        self._outcome: Optional[Outcome] = None
        self._current_guess: Optional[Code] = None
        self._transcript: List[TranscriptEntry] = []
        self._next_message_id = 1
        self._system_guess_count = 0
        self._player_guess_count = 0
        self._pool.reset()

    # --- listeners ---

    def subscribe(self, listener: Listener) -> None:
        self._listeners.append(listener)

    def unsubscribe(self, listener: Listener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    # --- read-only state ---

    @property
    def phase(self) -> Phase:
        return self._phase

    @property
    def turn(self) -> Optional[Turn]:
        if self._phase in (Phase.SYSTEM_THINKING, Phase.AWAITING_FEEDBACK):
            return "system"
        if self._phase is Phase.AWAITING_PLAYER_GUESS:
            return "player"
        return None

    @property
    def active(self) -> bool:
        return self._phase not in (Phase.IDLE, Phase.STUCK)

    @property
    def epoch(self) -> int:
        return self._epoch

    @property
    def secret(self) -> Optional[Code]:
        return self._secret

    @property
    def outcome(self) -> Optional[Outcome]:
        return self._outcome

    @property
    def current_guess(self) -> Optional[Code]:
        """The system guess waiting for feedback, if any."""
        return self._current_guess

    @property
    def transcript(self) -> Tuple[TranscriptEntry, ...]:
        return tuple(self._transcript)

    @property
    def pool(self) -> CandidatePool:
        return self._pool

    @property
    def system_guess_count(self) -> int:
        return self._system_guess_count

    @property
    def player_guess_count(self) -> int:
        return self._player_guess_count

    # --- calls in ---

    def start(self, secret: Optional[Code] = None) -> List[GameEvent]:
        """Begin a round. `secret` is fetched up front by callers that do I/O for it."""
        self._outbox = []
        if self._phase is not Phase.IDLE:
            self._reject(f"Cannot start while the game is {self._phase.value}; reset first.")

        self._epoch += 1
        self._clear_round()
        if secret is None:
            secret = self._secret_factory()
        if not is_valid_code(secret):
            raise ValueError(f"invalid secret code: {secret!r}")
        self._secret = secret
        logger.info("round started (epoch %d)", self._epoch)

        self._say(
            "bot",
            "Hello! I will start by guessing your 4-digit secret. "
            "Tell me how close I am after each guess.",
        )
        self._system_turn()
        return self._flush()

    def submit_feedback(self, exact: int, misplaced: int) -> List[GameEvent]:
        self._outbox = []
        if not self.active or self._phase is not Phase.AWAITING_FEEDBACK:
            self._reject("Not waiting for feedback right now.")
        if not is_valid_feedback(exact, misplaced):
            raise ValidationError(
                f"Feedback must be two whole numbers >= 0 adding up to at most {CODE_LENGTH}."
            )

        feedback = Feedback(exact, misplaced)
        guess = self._current_guess
        self._current_guess = None
        self._say("user", f"Feedback for {guess}: {describe(feedback)}")

        if is_win(feedback):
            self._say("bot", f"Yay, I guessed it! Your secret is {guess}. I win.")
            self._finish("system_won", f"System wins! My secret was {self._secret}.")
            self._emit(SystemWon(guess, epoch=self._epoch))
            return self._flush()

        self._pool.apply_feedback(guess, feedback)
        if self._pool.available_count == 0:
            # Nothing can be consistent any more; no point handing the player a turn
            logger.warning("feedback %s for %s left no candidates", tuple(feedback), guess)
            self._go_stuck()
            return self._flush()

        self._phase = Phase.AWAITING_PLAYER_GUESS
        self._say("bot", "Ok, now it's your turn. Please type a guess at my secret.")
        self._emit(PromptPlayerTurn(epoch=self._epoch))
        return self._flush()

    def submit_player_guess(self, code: str) -> List[GameEvent]:
        self._outbox = []
        if not self.active or self._phase is not Phase.AWAITING_PLAYER_GUESS:
            self._reject("Not your turn yet.")

        guess = code.strip() if isinstance(code, str) else code
        if not is_valid_code(guess):
            raise ValidationError("Enter a valid 4-digit guess (0-9 allowed).")

        self._player_guess_count += 1
        self._say("user", f"I guess: {guess}")

        feedback = score(self._secret, guess)
        if is_win(feedback):
            self._say("bot", f"Correct! You guessed my secret ({self._secret}). You win!")
            self._finish("player_won", "Player wins!")
            self._emit(PlayerWon(self._secret, epoch=self._epoch))
            return self._flush()

        self._say("bot", f"Nope: {describe(feedback)}. My turn to guess now.")
        self._emit(PlayerGuessScored(guess, feedback.exact, feedback.misplaced, epoch=self._epoch))
        self._system_turn()
        return self._flush()

    def reset(self) -> List[GameEvent]:
        """Valid from any phase. Drops secret, pool, tried guesses and transcript."""
        self._outbox = []
        self._epoch += 1
        self._clear_round()
        logger.info("session reset (epoch %d)", self._epoch)
        return self._flush()

    # --- internals ---

    def _system_turn(self) -> None:
        self._phase = Phase.SYSTEM_THINKING
        try:
            guess = self._pool.pick_guess()
        except NoCandidatesLeft:
            self._go_stuck()
            return

        self._current_guess = guess
        self._system_guess_count += 1
        self._phase = Phase.AWAITING_FEEDBACK
        self._say("bot", f"I guess: {guess}")
        self._emit(SystemGuessed(guess, epoch=self._epoch))

    def _go_stuck(self) -> None:
        self._phase = Phase.STUCK
        self._outcome = "stuck"
        self._current_guess = None
        self._say("bot", "I have no candidates left; the feedback seems inconsistent. Please reset the game.")
        self._emit(Stuck(epoch=self._epoch))

    def _finish(self, outcome: Outcome, text: str) -> None:
        self._phase = Phase.IDLE
        self._outcome = outcome
        self._current_guess = None
        self._say("center", f"{text} Click Reset to play again.")
        logger.info(
            "round over: %s after %d system / %d player guesses",
            outcome, self._system_guess_count, self._player_guess_count,
        )

    def _reject(self, reason: str) -> None:
        logger.warning("rejected in phase %s: %s", self._phase.value, reason)
        self._emit(TurnRejected(reason, epoch=self._epoch))
        self._flush()
        raise TurnViolation(reason)

    def _say(self, sender: Sender, text: str) -> None:
        self._transcript.append(TranscriptEntry(self._next_message_id, sender, text))
        self._next_message_id += 1

    def _emit(self, event: GameEvent) -> None:
        self._outbox.append(event)
        for listener in list(self._listeners):
            listener(event)

    def _flush(self) -> List[GameEvent]:
        events, self._outbox = self._outbox, []
        return events
