# dim_scorekeeper/game_log.py
from __future__ import annotations

import csv
from typing import Any, Dict, List, Optional

from .state import GameState

FIELDNAMES = [
    "game_id",
    "round_index",
    "number",
    "suit",
    "dealer",
    "player_id",
    "player_name",
    "bet",
    "hands",
    "score",
    "total_score",
]


def build_round_score_rows(
    game_state: GameState,
    game_id: Optional[str] = None,
) -> List[Dict[str, Any]]:
    """
    Build a list of rows summarizing per-round scores for CSV export.

    Each row corresponds to (round, player) and has keys in FIELDNAMES. Rounds
    that are not complete yet are skipped so games in progress can still be
    exported.
    """
    running_scores = [0] * game_state.num_players
    rows: List[Dict[str, Any]] = []

    for round_index, round_state in enumerate(game_state.rounds):
        if not round_state.is_complete:
            continue

        for pid, name in enumerate(game_state.player_names):
            running_scores[pid] += round_state.scores[pid]
            rows.append(
                {
                    "game_id": game_id,
                    "round_index": round_index,
                    "number": round_state.number,
                    "suit": round_state.suit.name,
                    "dealer": round_state.dealer,
                    "player_id": pid,
                    "player_name": name,
                    "bet": round_state.bets[pid],
                    "hands": round_state.hands[pid],
                    "score": round_state.scores[pid],
                    "total_score": running_scores[pid],
                }
            )

    return rows


def write_round_scores_csv(
    game_state: GameState,
    path,
    game_id: Optional[str] = None,
) -> None:
    """
    Write per-round scores to a CSV file.

    `path` can be a string or any path-like object accepted by `open`.
    """
    rows = build_round_score_rows(game_state, game_id=game_id)

    with open(path, "w", newline="", encoding="utf-8") as f:
        writer = csv.DictWriter(f, fieldnames=FIELDNAMES)
        writer.writeheader()
        for row in rows:
            writer.writerow({field: row.get(field) for field in FIELDNAMES})
