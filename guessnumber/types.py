"""
Labels for clarity.
"""

from typing import Literal, NamedTuple

CODE_LENGTH = 4
Code = str  # 4 digit string, leading zeros kept ("0007")
Turn = Literal["system", "player"]
Sender = Literal["bot", "user", "center"]
Outcome = Literal["system_won", "player_won", "stuck"]


class Feedback(NamedTuple):
    exact: int      # right digit, right place
    misplaced: int  # right digit, wrong place (after exact ones are removed)
