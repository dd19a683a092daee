# dim_scorekeeper/agents/base.py
from __future__ import annotations

from typing import Any, Dict, Protocol, runtime_checkable


@runtime_checkable
class DimAgent(Protocol):
    """
    Interface for anything that fills in bets and hand counts for a seat.

    `observation` is a JSON-like dict containing:
      - game-level info (round index, trick count, dealer, trump)
      - player info
      - the bets and hands entered so far
      - "legal_values": the values the engine will accept from this seat
    """

    def choose_bet(self, observation: Dict[str, Any]) -> int:
        """Return a bet taken from observation["legal_values"]."""

        raise NotImplementedError

    def choose_hands(self, observation: Dict[str, Any]) -> int:
        """Return the number of tricks this seat took."""

        raise NotImplementedError
