"""
Gameplay conditions raised by the core.
None of these are crashes: routes turn them into 4xx responses and the
session turns NoCandidatesLeft into a Stuck event.
"""


class GameError(Exception):
    """Base class for every condition the game core reports."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(GameError):
    """Malformed guess or feedback. Rejected with no state change."""


class TurnViolation(GameError):
    """An action submitted outside the phase where it is allowed."""


class NoCandidatesLeft(GameError):
    """Every consistent code has been tried: the feedback contradicts itself."""

    def __init__(self, message: str = "No candidates left; the feedback seems inconsistent."):
        super().__init__(message)
