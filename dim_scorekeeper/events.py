# dim_scorekeeper/events.py
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Protocol, runtime_checkable
import enum
import logging

from .state import GameState

logger = logging.getLogger(__name__)


class GameEvent(enum.Enum):
    BET_PLACED = "bet"
    BETS_CONFIRMED = "confirm"
    ROUND_COMPLETED = "complete"
    GAME_WON = "win"


@dataclass(frozen=True)
class EngineView:
    """Everything a presentation layer needs after a state change."""

    game_state: GameState
    active_round_index: int
    bets_confirmed: bool
    hands_confirmed: bool
    turn_holder: Optional[int]
    error: Optional[str]


@runtime_checkable
class AudioSink(Protocol):
    """Receives fire-and-forget notifications of game events."""

    def play(self, event: GameEvent) -> None:
        raise NotImplementedError


@runtime_checkable
class Observer(Protocol):
    """Receives the engine's view after every operation."""

    def update(self, view: EngineView) -> None:
        raise NotImplementedError


class LoggingAudioSink:
    """Stand-in for sound playback that only records what would be played."""

    def __init__(self, enabled: bool = True) -> None:
        self.enabled = enabled

    def play(self, event: GameEvent) -> None:
        if not self.enabled:
            return
        logger.info("Sound cue: %s", event.value)
