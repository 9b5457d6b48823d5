"""
Events the session emits for the presentation layer to render.
Every event carries the epoch it was issued under, so a late delayed reveal
from before a reset can be recognised and dropped.
"""

from dataclasses import asdict, dataclass
from typing import ClassVar, Union

from .types import Code


class _Event:
    kind: ClassVar[str] = ""

    def to_dict(self) -> dict:
        return {"kind": self.kind, **asdict(self)}


@dataclass(frozen=True)
class SystemGuessed(_Event):
    kind: ClassVar[str] = "system_guessed"
    code: Code
    epoch: int = 0


@dataclass(frozen=True)
class PromptPlayerTurn(_Event):
    kind: ClassVar[str] = "prompt_player_turn"
    epoch: int = 0


@dataclass(frozen=True)
class PlayerGuessScored(_Event):
    kind: ClassVar[str] = "player_guess_scored"
    code: Code
    exact: int
    misplaced: int
    epoch: int = 0


@dataclass(frozen=True)
class SystemWon(_Event):
    kind: ClassVar[str] = "system_won"
    secret: Code  # the player's secret, i.e. the winning guess
    epoch: int = 0


@dataclass(frozen=True)
class PlayerWon(_Event):
    kind: ClassVar[str] = "player_won"
    secret: Code  # the system's secret
    epoch: int = 0


@dataclass(frozen=True)
class Stuck(_Event):
    kind: ClassVar[str] = "stuck"
    epoch: int = 0


@dataclass(frozen=True)
class TurnRejected(_Event):
    kind: ClassVar[str] = "turn_rejected"
    reason: str
    epoch: int = 0


GameEvent = Union[
    SystemGuessed,
    PromptPlayerTurn,
    PlayerGuessScored,
    SystemWon,
    PlayerWon,
    Stuck,
    TurnRejected,
]
