# tests/test_game_log.py
import random

from dim_scorekeeper.agents import RandomDimAgent
from dim_scorekeeper.autoplay import play_game
from dim_scorekeeper.charts import plot_running_totals
from dim_scorekeeper.engine import RoundEngine
from dim_scorekeeper.game_log import (
    FIELDNAMES,
    build_round_score_rows,
    write_round_scores_csv,
)
from dim_scorekeeper.standings import running_totals, score_table


def _make_sample_game(num_players: int = 3, num_rounds: int = 4):
    names = [f"P{i}" for i in range(num_players)]
    engine = RoundEngine.new_game(num_players, num_rounds, names)
    agents = [RandomDimAgent(rng=random.Random(200 + i)) for i in range(num_players)]
    play_game(engine, agents)
    return engine


def test_build_round_score_rows_basic():
    engine = _make_sample_game()
    game_state = engine.game_state
    rows = build_round_score_rows(game_state, game_id="test-game")

    assert len(rows) == len(game_state.rounds) * game_state.num_players
    for field in FIELDNAMES:
        assert field in rows[0]

    # Last row per player carries the final total
    final = {}
    for row in rows:
        final[row["player_id"]] = row["total_score"]
    for pid in range(game_state.num_players):
        assert final[pid] == engine.total_score(pid)


def test_build_round_score_rows_skips_incomplete_rounds():
    engine = RoundEngine.new_game(2, 3, ["A", "B"])
    engine.submit_bet(0, 0, 1)
    engine.submit_bet(0, 1, 1)
    engine.confirm_bets(0)
    engine.submit_hands(0, 0, 2)
    engine.submit_hands(0, 1, 1)
    engine.confirm_hands(0)

    rows = build_round_score_rows(engine.game_state)
    assert len(rows) == 2
    assert rows[0]["number"] == 3
    assert rows[0]["suit"] == "SPADES"
    assert [r["score"] for r in rows] == [2, 11]


def test_write_round_scores_csv(tmp_path):
    engine = _make_sample_game()
    path = tmp_path / "scores.csv"

    write_round_scores_csv(engine.game_state, path, game_id="csv-game")

    contents = path.read_text(encoding="utf-8").strip().splitlines()
    assert len(contents) == 1 + 4 * 3
    header = contents[0].split(",")
    assert header == FIELDNAMES


def test_score_table_shape_and_totals():
    engine = _make_sample_game()
    table = score_table(engine.game_state)

    assert list(table.columns) == ["P0", "P1", "P2"]
    assert len(table.index) == 4 + 1
    assert table.index[-1] == "Total"
    assert table.loc["Total", "P1"] == str(engine.total_score(1))


def test_score_table_in_progress_cells():
    engine = RoundEngine.new_game(2, 2, ["A", "B"])
    engine.submit_bet(0, 0, 1)

    table = score_table(engine.game_state)
    first_row = table.iloc[0]
    assert first_row["A"] == "1/-"
    assert first_row["B"] == ""
    assert table.loc["Total", "A"] == "0"


def test_running_totals_are_cumulative():
    engine = _make_sample_game()
    totals = running_totals(engine.game_state)

    assert list(totals.index) == [4, 3, 2, 1]
    for pid, name in enumerate(engine.game_state.player_names):
        assert totals[name].iloc[-1] == engine.total_score(pid)


def test_plot_running_totals_writes_png(tmp_path):
    engine = _make_sample_game()
    path = plot_running_totals(engine.game_state, tmp_path / "charts" / "totals.png")

    assert path.exists()
    assert path.read_bytes()[:8] == b"\x89PNG\r\n\x1a\n"
