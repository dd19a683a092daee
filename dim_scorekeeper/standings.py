# dim_scorekeeper/standings.py
from __future__ import annotations

import pandas as pd

from .rules import total_score
from .state import GameState


def _round_label(round_state) -> str:
    return f"{round_state.number} {round_state.suit}"


def score_table(game_state: GameState) -> pd.DataFrame:
    """
    Score sheet: one row per round (labelled by trick count and trump), one
    column per player, followed by a Total row.

    Cells show "bet/hands score" for completed rounds, the bet alone while a
    round is in progress, and stay empty otherwise.
    """
    rows = {}
    for round_state in game_state.rounds:
        cells = []
        for pid in range(game_state.num_players):
            bet = round_state.bets[pid]
            taken = round_state.hands[pid]
            if round_state.is_complete:
                cells.append(f"{bet}/{taken} {round_state.scores[pid]}")
            elif bet is not None and taken is not None:
                cells.append(f"{bet}/{taken}")
            elif bet is not None:
                cells.append(f"{bet}/-")
            else:
                cells.append("")
        rows[_round_label(round_state)] = cells

    rows["Total"] = [
        str(total_score(game_state, pid)) for pid in range(game_state.num_players)
    ]
    return pd.DataFrame.from_dict(
        rows, orient="index", columns=game_state.player_names
    )


def running_totals(game_state: GameState) -> pd.DataFrame:
    """Cumulative score per player after each completed round."""
    scores = pd.DataFrame(
        [r.scores for r in game_state.rounds if r.is_complete],
        columns=game_state.player_names,
        index=[r.number for r in game_state.rounds if r.is_complete],
    )
    scores.index.name = "round"
    return scores.cumsum()
