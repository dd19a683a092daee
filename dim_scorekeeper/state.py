# dim_scorekeeper/state.py
from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional
import enum

from .cards import Suit


class RoundPhase(enum.Enum):
    BIDDING = "bidding"
    BIDS_PENDING = "bids_pending"
    HANDS = "hands"
    HANDS_PENDING = "hands_pending"
    COMPLETE = "complete"


class GamePhase(enum.Enum):
    NOT_STARTED = "not_started"
    IN_PROGRESS = "in_progress"
    COMPLETE = "complete"


@dataclass
class RoundState:
    number: int
    suit: Suit
    dealer: int
    # One slot per seat; None means the value has not been entered yet.
    bets: List[Optional[int]]
    hands: List[Optional[int]]
    scores: List[int]
    is_complete: bool = False
    # Transient: re-derived from bets/hands/is_complete on load.
    phase: RoundPhase = RoundPhase.BIDDING

    @property
    def num_players(self) -> int:
        return len(self.bets)


@dataclass
class GameState:
    player_names: List[str]
    rounds: List[RoundState] = field(default_factory=list)
    current_round_index: int = 0

    @property
    def num_players(self) -> int:
        return len(self.player_names)

    @property
    def max_round_number(self) -> int:
        """Round count the game was configured with (the first round's trick count)."""
        return len(self.rounds)
