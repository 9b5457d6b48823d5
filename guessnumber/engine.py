"""
Pure game logic (no HTTP, no storage).
We compute two feedback numbers for each guess:
- exact: how many positions are exactly correct (right digit, right place)
- misplaced: how many more digits match once the exact ones are taken out,
  bounded by how often each digit appears on both sides

Repeated digits are allowed in the secret and in guesses.
"""

from typing import List

from .types import CODE_LENGTH, Code, Feedback

ALL_DIGITS = "0123456789"


def score(secret: Code, guess: Code) -> Feedback:
    """
    Example:
      secret = "1123"
      guess  = "1111"
      exact     = 2  (positions 0 and 1)
      misplaced = 0  (leftover secret digits {2,3}, leftover guess digits {1,1})

    Both codes must already be valid; this is checked upstream.
    """

    exact = 0
    # One bucket per digit value 0..9, only for positions that did not match
    secret_counts = [0] * 10
    guess_counts = [0] * 10

    for i in range(CODE_LENGTH):
        if secret[i] == guess[i]:
            exact += 1
        else:
            secret_counts[int(secret[i])] += 1
            guess_counts[int(guess[i])] += 1

    # Overlap is the sum of the smaller count for each digit
    misplaced = 0
    for digit in range(10):
        misplaced += min(secret_counts[digit], guess_counts[digit])

    return Feedback(exact, misplaced)


def is_win(feedback: Feedback) -> bool:
    return feedback.exact == CODE_LENGTH


def is_valid_code(value: object) -> bool:
    """Exactly 4 characters, each one of 0-9 (no unicode digits, no signs)."""
    if not isinstance(value, str) or len(value) != CODE_LENGTH:
        return False
    return all(ch in ALL_DIGITS for ch in value)


def is_valid_feedback(exact: object, misplaced: object) -> bool:
    # bool is an int subclass; True/False are not scores
    for value in (exact, misplaced):
        if isinstance(value, bool) or not isinstance(value, int):
            return False
        if value < 0:
            return False
    return exact + misplaced <= CODE_LENGTH


def all_codes() -> List[Code]:
    """Every code from "0000" to "9999", in order."""
    return [str(n).zfill(CODE_LENGTH) for n in range(10 ** CODE_LENGTH)]


def feedback_options() -> List[Feedback]:
    """
    The 15 legal (exact, misplaced) pairs, in the order a picker offers them:
    exact ascending, then misplaced ascending.
    """
    options = []
    for exact in range(CODE_LENGTH + 1):
        for misplaced in range(CODE_LENGTH - exact + 1):
            options.append(Feedback(exact, misplaced))
    return options


def describe(feedback: Feedback) -> str:
    return f"{feedback.exact} exact, {feedback.misplaced} misplaced"
