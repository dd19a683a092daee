# dim_scorekeeper/autoplay.py
from __future__ import annotations

import logging
from typing import Any, Dict, List

from . import rules
from .agents.base import DimAgent
from .engine import RoundEngine
from .state import GameState, RoundPhase

logger = logging.getLogger(__name__)


def build_observation(
    engine: RoundEngine, player: int, phase: str
) -> Dict[str, Any]:
    round_state = engine.active_round
    if phase == "bidding":
        legal = engine.legal_bets(player)
    else:
        legal = engine.legal_hands(player)
    return {
        "phase": phase,
        "game": {
            "round_index": engine.active_round_index,
            "number": round_state.number,
            "num_players": engine.game_state.num_players,
            "dealer": round_state.dealer,
            "suit": round_state.suit.name,
        },
        "player": {
            "id": player,
            "name": engine.name_of(player),
            "score": engine.total_score(player),
        },
        "bets": list(round_state.bets),
        "hands": list(round_state.hands),
        "legal_values": legal,
    }


def play_round(engine: RoundEngine, agents: List[DimAgent]) -> None:
    """Drive the active round to completion using only engine operations."""
    round_index = engine.active_round_index
    round_state = engine.active_round

    if round_state.phase in (RoundPhase.BIDDING, RoundPhase.BIDS_PENDING):
        while engine.turn_holder is not None:
            seat = engine.turn_holder
            obs = build_observation(engine, seat, "bidding")
            engine.submit_bet(round_index, seat, agents[seat].choose_bet(obs))
        if not rules.bets_valid(round_state):
            # A revised earlier bet made the total hit the trick count;
            # the last bidder picks again from the bets still allowed.
            last = rules.last_bidder(round_state, engine.game_state.max_round_number)
            obs = build_observation(engine, last, "bidding")
            engine.submit_bet(round_index, last, agents[last].choose_bet(obs))
        engine.confirm_bets(round_index)

    if round_state.phase == RoundPhase.HANDS:
        for seat in range(engine.game_state.num_players):
            if round_state.hands[seat] is not None:
                continue
            obs = build_observation(engine, seat, "hands")
            engine.submit_hands(round_index, seat, agents[seat].choose_hands(obs))

    engine.confirm_hands(round_index)


def play_game(engine: RoundEngine, agents: List[DimAgent]) -> GameState:
    """Play every remaining round and return the final GameState."""
    if len(agents) != engine.game_state.num_players:
        raise ValueError("Need exactly one agent per player")

    while not engine.is_game_complete():
        round_index = engine.active_round_index
        play_round(engine, agents)
        logger.info(
            "Finished round %d/%d (%d tricks)",
            round_index + 1,
            len(engine.game_state.rounds),
            engine.game_state.rounds[round_index].number,
        )
    return engine.game_state
