# tests/test_persistence.py
import json

from dim_scorekeeper.cards import Suit, suit_from_str
from dim_scorekeeper.engine import RoundEngine
from dim_scorekeeper.persistence import (
    STORAGE_KEY,
    SnapshotStore,
    game_from_dict,
    game_to_dict,
)
from dim_scorekeeper.state import RoundPhase


def _new_engine(tmp_path) -> RoundEngine:
    store = SnapshotStore(tmp_path)
    return RoundEngine.new_game(4, 3, ["A", "B", "C", "D"], store=store)


def test_snapshot_written_after_every_change(tmp_path):
    engine = _new_engine(tmp_path)
    path = tmp_path / f"{STORAGE_KEY}.json"
    assert path.exists()

    engine.submit_bet(0, 0, 2)
    data = json.loads(path.read_text(encoding="utf-8"))
    assert data["rounds"][0]["bets"] == [2, None, None, None]
    assert data["playerNames"] == ["A", "B", "C", "D"]
    assert data["currentRound"] == 0
    # Transient flags are not persisted
    assert "phase" not in data["rounds"][0]


def test_load_recomputes_turn_holder(tmp_path):
    engine = _new_engine(tmp_path)
    engine.submit_bet(0, 0, 1)
    engine.submit_bet(0, 1, 0)

    loaded = RoundEngine.load(SnapshotStore(tmp_path))
    assert loaded is not None
    assert loaded.active_round.bets == [1, 0, None, None]
    assert loaded.active_round.phase == RoundPhase.BIDDING
    assert loaded.turn_holder == 2


def test_load_mid_hands_and_next_round(tmp_path):
    engine = _new_engine(tmp_path)
    for seat, bet in enumerate([1, 1, 1, 2]):
        engine.submit_bet(0, seat, bet)
    engine.confirm_bets(0)
    for seat, taken in enumerate([1, 1, 1, 0]):
        engine.submit_hands(0, seat, taken)
    engine.confirm_hands(0)
    engine.submit_bet(1, 1, 1)
    engine.submit_bet(1, 2, 0)
    engine.submit_bet(1, 3, 0)
    engine.submit_bet(1, 0, 0)
    engine.confirm_bets(1)
    engine.submit_hands(1, 0, 1)

    loaded = RoundEngine.load(SnapshotStore(tmp_path))
    assert loaded.active_round_index == 1
    assert loaded.game_state.rounds[0].is_complete
    assert loaded.game_state.rounds[0].phase == RoundPhase.COMPLETE
    assert loaded.game_state.rounds[0].scores == [11, 11, 11, 0]
    assert loaded.active_round.phase == RoundPhase.HANDS
    assert loaded.bets_confirmed
    assert loaded.turn_holder is None
    assert loaded.total_score(0) == 11


def test_load_with_all_bets_asks_for_confirmation(tmp_path):
    engine = _new_engine(tmp_path)
    for seat, bet in enumerate([1, 1, 1, 2]):
        engine.submit_bet(0, seat, bet)
    engine.confirm_bets(0)

    loaded = RoundEngine.load(SnapshotStore(tmp_path))
    assert loaded.active_round.phase == RoundPhase.BIDS_PENDING
    assert not loaded.bets_confirmed
    loaded.confirm_bets(0)
    assert loaded.bets_confirmed


def test_load_clears_hands_recorded_without_bets(tmp_path):
    engine = _new_engine(tmp_path)
    data = game_to_dict(engine.game_state, 0)
    data["rounds"][0]["bets"] = [1, -1, -1, -1]
    data["rounds"][0]["hands"] = [1, -1, -1, -1]
    (tmp_path / f"{STORAGE_KEY}.json").write_text(json.dumps(data), encoding="utf-8")

    loaded = RoundEngine.load(SnapshotStore(tmp_path))
    assert loaded.active_round.bets == [1, None, None, None]
    assert loaded.active_round.hands == [None] * 4
    assert loaded.turn_holder == 1


def test_game_dict_round_trip_preserves_rounds(tmp_path):
    engine = _new_engine(tmp_path)
    engine.submit_bet(0, 0, 3)
    game = game_from_dict(game_to_dict(engine.game_state, 0))

    assert game.player_names == ["A", "B", "C", "D"]
    assert [r.number for r in game.rounds] == [3, 2, 1]
    assert [r.suit for r in game.rounds] == [Suit.SPADES, Suit.HEARTS, Suit.DIAMONDS]
    assert [r.dealer for r in game.rounds] == [3, 0, 1]
    assert game.rounds[0].bets == [3, None, None, None]


def test_missing_or_corrupt_snapshot_loads_nothing(tmp_path):
    store = SnapshotStore(tmp_path)
    assert store.load() is None
    assert RoundEngine.load(store) is None

    store.path.write_text("{not json", encoding="utf-8")
    assert store.load() is None

    store.clear()
    assert not store.path.exists()


def test_failed_save_does_not_block_operation(tmp_path):
    class FailingStore(SnapshotStore):
        def save(self, game_state, active_round_index):
            raise OSError("disk full")

    engine = RoundEngine.new_game(
        2, 2, ["A", "B"], store=FailingStore(tmp_path)
    )
    engine.submit_bet(0, 0, 1)
    assert engine.active_round.bets == [1, None]
    assert engine.error is None


def test_suit_from_str_accepts_names_and_symbols():
    assert suit_from_str("HEARTS") == Suit.HEARTS
    assert suit_from_str("♥") == Suit.HEARTS
    assert suit_from_str("♠️") == Suit.SPADES
    assert suit_from_str("NT") == Suit.NO_TRUMP


def test_load_snapshot_with_symbol_suits(tmp_path):
    data = {
        "players": 2,
        "playerNames": ["A", "B"],
        "currentRound": 0,
        "rounds": [
            {
                "number": 2,
                "suit": "♠️",
                "bets": [1, -1],
                "hands": [-1, -1],
                "scores": [0, 0],
                "dealer": 1,
                "isComplete": False,
            },
            {
                "number": 1,
                "suit": "♥️",
                "bets": [-1, -1],
                "hands": [-1, -1],
                "scores": [0, 0],
                "dealer": 0,
                "isComplete": False,
            },
        ],
    }
    (tmp_path / f"{STORAGE_KEY}.json").write_text(
        json.dumps(data, ensure_ascii=False), encoding="utf-8"
    )

    loaded = RoundEngine.load(SnapshotStore(tmp_path))
    assert loaded is not None
    assert [r.suit for r in loaded.game_state.rounds] == [Suit.SPADES, Suit.HEARTS]
    assert loaded.active_round.bets == [1, None]
    assert loaded.turn_holder == 1
