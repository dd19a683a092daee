# dim_scorekeeper/persistence.py
"""
Local snapshot of the game in progress.

The whole GameState is stored as one JSON document keyed by STORAGE_KEY.
Only bets, hands, scores and completion flags are written; phases, the
turn-holder and confirmation flags are recomputed by the engine on load.
"""
from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional

from .cards import suit_from_str, suit_to_str
from .state import GameState, RoundState

logger = logging.getLogger(__name__)

STORAGE_KEY = "cardGameState"
SCHEMA_VERSION = 1


def _slot_from_json(value: Any) -> Optional[int]:
    # Older snapshots marked unset slots with -1.
    if value is None or int(value) < 0:
        return None
    return int(value)


def _round_to_dict(round_state: RoundState) -> Dict[str, Any]:
    return {
        "number": round_state.number,
        "suit": suit_to_str(round_state.suit),
        "bets": list(round_state.bets),
        "hands": list(round_state.hands),
        "scores": list(round_state.scores),
        "dealer": round_state.dealer,
        "isComplete": round_state.is_complete,
    }


def _round_from_dict(d: Dict[str, Any]) -> RoundState:
    return RoundState(
        number=int(d["number"]),
        suit=suit_from_str(d["suit"]),
        dealer=int(d["dealer"]),
        bets=[_slot_from_json(v) for v in d["bets"]],
        hands=[_slot_from_json(v) for v in d["hands"]],
        scores=[int(v) for v in d.get("scores", [])] or [0] * len(d["bets"]),
        is_complete=bool(d.get("isComplete", False)),
    )


def game_to_dict(game_state: GameState, active_round_index: int) -> Dict[str, Any]:
    return {
        "schema_version": SCHEMA_VERSION,
        "players": game_state.num_players,
        "playerNames": list(game_state.player_names),
        "currentRound": active_round_index,
        "rounds": [_round_to_dict(r) for r in game_state.rounds],
    }


def game_from_dict(d: Dict[str, Any]) -> GameState:
    names: List[str] = [str(n) for n in d["playerNames"]]
    if int(d.get("players", len(names))) != len(names):
        raise ValueError("Snapshot player count does not match player names")
    rounds = [_round_from_dict(r) for r in d["rounds"]]
    for round_state in rounds:
        if round_state.num_players != len(names) or len(round_state.hands) != len(names):
            raise ValueError(
                f"Round {round_state.number} does not have one slot per player"
            )
    return GameState(
        player_names=names,
        rounds=rounds,
        current_round_index=int(d.get("currentRound", 0)),
    )


class SnapshotStore:
    """Best-effort JSON snapshot of the current game in a directory."""

    def __init__(self, directory: str | Path, key: str = STORAGE_KEY) -> None:
        self.path = Path(directory) / f"{key}.json"

    def save(self, game_state: GameState, active_round_index: int) -> None:
        data = game_to_dict(game_state, active_round_index)
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = self.path.with_suffix(".tmp")
        tmp_path.write_text(json.dumps(data, ensure_ascii=False), encoding="utf-8")
        tmp_path.replace(self.path)
        logger.debug("Saved snapshot to %s", self.path)

    def load(self) -> Optional[GameState]:
        """Return the saved game, or None when there is none or it is unreadable."""
        if not self.path.exists():
            return None
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
            return game_from_dict(data)
        except (OSError, ValueError, KeyError, TypeError) as exc:
            logger.warning("Ignoring unreadable snapshot %s: %s", self.path, exc)
            return None

    def clear(self) -> None:
        if self.path.exists():
            self.path.unlink()
            logger.info("Removed snapshot %s", self.path)
