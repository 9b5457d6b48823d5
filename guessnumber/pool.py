"""
Candidate pool: the solver's belief state.

- remaining: every code still consistent with all feedback so far
- tried: codes the solver already guessed (never offered twice)

The strategy is "random consistent candidate": guess uniformly among the
untried codes that still fit the history. Not optimal in expected guesses,
but simple and hard to predict.
"""

import logging
import random
from typing import FrozenSet, List, Optional, Set, Tuple

from .engine import all_codes, score
from .errors import NoCandidatesLeft
from .types import Code, Feedback

logger = logging.getLogger(__name__)


class CandidatePool:
    def __init__(self, rng: Optional[random.Random] = None) -> None:
        self._rng = rng or random.Random()
        self._remaining: List[Code] = []
        self._tried: Set[Code] = set()
        self.reset()

    def reset(self) -> None:
        """Back to all 10,000 codes, nothing tried."""
        self._remaining = all_codes()
        self._tried = set()

    def pick_guess(self) -> Code:
        available = [c for c in self._remaining if c not in self._tried]
        if not available:
            raise NoCandidatesLeft()

        guess = self._rng.choice(available)
        self._tried.add(guess)
        logger.debug("picked %s out of %d available codes", guess, len(available))
        return guess

    def apply_feedback(self, guess: Code, feedback: Feedback) -> None:
        """Keep only codes that would have produced this exact feedback for `guess`."""
        before = len(self._remaining)
        # New list on purpose: the old one is never edited in place
        self._remaining = [c for c in self._remaining if score(c, guess) == feedback]
        logger.debug("feedback %s for %s: %d -> %d candidates", tuple(feedback), guess, before, len(self._remaining))

    # --- read-only views ---

    @property
    def size(self) -> int:
        return len(self._remaining)

    @property
    def remaining(self) -> Tuple[Code, ...]:
        return tuple(self._remaining)

    @property
    def tried(self) -> FrozenSet[Code]:
        return frozenset(self._tried)

    @property
    def available_count(self) -> int:
        return sum(1 for c in self._remaining if c not in self._tried)
