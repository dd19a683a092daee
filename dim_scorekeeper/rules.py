# dim_scorekeeper/rules.py
from __future__ import annotations

from typing import List, Optional

from .cards import trump_for_round
from .state import GamePhase, GameState, RoundPhase, RoundState


def build_rounds(player_count: int, round_count: int) -> List[RoundState]:
    """
    Build the ordered rounds of a new game, highest trick count first.

    - Trick counts run from round_count down to 1.
    - Trump indicators cycle through the suits, starting with Spades.
    - The last seated player deals the first round; after that the deal
      starts again at seat 0 and moves one seat per round.
    """
    rounds: List[RoundState] = []
    for number in range(round_count, 0, -1):
        k = round_count - number
        dealer = player_count - 1 if k == 0 else (k - 1) % player_count
        rounds.append(
            RoundState(
                number=number,
                suit=trump_for_round(round_count, number),
                dealer=dealer,
                bets=[None] * player_count,
                hands=[None] * player_count,
                scores=[0] * player_count,
            )
        )
    return rounds


# ---------------------------------------------------------------------------
# Bidding
# ---------------------------------------------------------------------------


def starting_seat(round_state: RoundState, max_round_number: int) -> int:
    """
    Seat that bids first in the round.

    Normally the player left of the dealer; the round dealing the configured
    maximum number of cards always starts at seat 0.
    """
    if round_state.number == max_round_number:
        return 0
    return (round_state.dealer + 1) % round_state.num_players


def bidding_order(round_state: RoundState, max_round_number: int) -> List[int]:
    num_players = round_state.num_players
    start = starting_seat(round_state, max_round_number)
    return [(start + offset) % num_players for offset in range(num_players)]


def last_bidder(round_state: RoundState, max_round_number: int) -> int:
    """Seat immediately before the starting seat; bids last and is restricted."""
    return bidding_order(round_state, max_round_number)[-1]


def next_bidder(round_state: RoundState, max_round_number: int) -> Optional[int]:
    """First seat in bidding order without a bet, or None once every bet is in."""
    for seat in bidding_order(round_state, max_round_number):
        if round_state.bets[seat] is None:
            return seat
    return None


def may_bid(round_state: RoundState, player: int, max_round_number: int) -> bool:
    """
    Return True if `player` may enter a bet right now.

    Walking the bidding order, the player must be reached before the first
    seat that still lacks a bet. That admits the turn-holder, earlier bidders
    amending their bet, and everyone once all bets are in.
    """
    for seat in bidding_order(round_state, max_round_number):
        if seat == player:
            return True
        if round_state.bets[seat] is None:
            return False
    return False


def other_bets_total(round_state: RoundState, player: int) -> int:
    return sum(
        bet
        for seat, bet in enumerate(round_state.bets)
        if seat != player and bet is not None
    )


def forbidden_bet(
    round_state: RoundState, player: int, max_round_number: int
) -> Optional[int]:
    """
    The one bid the last bidder may not make: the value that would make the
    bids total exactly the round's trick count. None for every other seat and
    when the value falls outside 0..number.
    """
    if player != last_bidder(round_state, max_round_number):
        return None
    value = round_state.number - other_bets_total(round_state, player)
    if 0 <= value <= round_state.number:
        return value
    return None


def legal_bets(
    round_state: RoundState, player: int, max_round_number: int
) -> List[int]:
    forbidden = forbidden_bet(round_state, player, max_round_number)
    return [v for v in range(round_state.number + 1) if v != forbidden]


def all_bets_set(round_state: RoundState) -> bool:
    return all(bet is not None for bet in round_state.bets)


def bets_valid(round_state: RoundState) -> bool:
    """All bets entered and their total differs from the trick count."""
    if not all_bets_set(round_state):
        return False
    return sum(round_state.bets) != round_state.number


# ---------------------------------------------------------------------------
# Hand recording
# ---------------------------------------------------------------------------


def hands_total(round_state: RoundState) -> int:
    return sum(h for h in round_state.hands if h is not None)


def all_hands_set(round_state: RoundState) -> bool:
    return all(h is not None for h in round_state.hands)


def legal_hands(round_state: RoundState, player: int) -> List[int]:
    """
    Hand counts `player` may record.

    The last player without a count must take exactly what is left; anyone
    else may take 0 up to the remaining tricks.
    """
    assigned = sum(
        h
        for seat, h in enumerate(round_state.hands)
        if seat != player and h is not None
    )
    remaining = round_state.number - assigned
    unassigned_others = sum(
        1
        for seat, h in enumerate(round_state.hands)
        if seat != player and h is None
    )
    if remaining < 0:
        return []
    if unassigned_others == 0:
        return [remaining]
    return list(range(remaining + 1))


# ---------------------------------------------------------------------------
# Scoring and progression
# ---------------------------------------------------------------------------


def score_round(round_state: RoundState) -> List[int]:
    """
    Score a round:

    - Exact bid: 10 + tricks taken
    - Otherwise: tricks taken
    """
    scores: List[int] = []
    for bet, taken in zip(round_state.bets, round_state.hands):
        if taken is None or bet is None:
            raise ValueError("Cannot score a round with missing bets or hands")
        scores.append(10 + taken if taken == bet else taken)
    return scores


def derive_phase(round_state: RoundState) -> RoundPhase:
    """Recompute the round's phase from its bets, hands and completion flag."""
    if round_state.is_complete:
        return RoundPhase.COMPLETE
    if not all_bets_set(round_state):
        return RoundPhase.BIDDING
    if all(h is None for h in round_state.hands):
        return RoundPhase.BIDS_PENDING
    if all_hands_set(round_state) and hands_total(round_state) == round_state.number:
        return RoundPhase.HANDS_PENDING
    return RoundPhase.HANDS


def active_round_index(game_state: GameState) -> int:
    """First round not yet complete, or the last round when all are."""
    for index, round_state in enumerate(game_state.rounds):
        if not round_state.is_complete:
            return index
    return len(game_state.rounds) - 1


def is_game_complete(game_state: GameState) -> bool:
    return all(r.is_complete for r in game_state.rounds)


def game_phase(game_state: GameState) -> GamePhase:
    if is_game_complete(game_state):
        return GamePhase.COMPLETE
    started = any(
        r.is_complete or any(b is not None for b in r.bets)
        for r in game_state.rounds
    )
    return GamePhase.IN_PROGRESS if started else GamePhase.NOT_STARTED


def total_score(game_state: GameState, player: int) -> int:
    return sum(r.scores[player] for r in game_state.rounds)


def winning_players(game_state: GameState) -> List[int]:
    """Every player tied at the highest total; empty until the game is over."""
    if not is_game_complete(game_state):
        return []
    totals = [total_score(game_state, p) for p in range(game_state.num_players)]
    best = max(totals)
    return [p for p, total in enumerate(totals) if total == best]


# ---------------------------------------------------------------------------
# Hint text shown next to a player's entry
# ---------------------------------------------------------------------------


def describe_bet_restriction(
    round_state: RoundState, player: int, max_round_number: int
) -> Optional[str]:
    if player != last_bidder(round_state, max_round_number):
        return None
    value = round_state.number - other_bets_total(round_state, player)
    if value < 0:
        return "You can bet anything because everyone has over bet!"
    return f"Cannot bet {value}"


def _hands_word(n: int) -> str:
    return "hand" if n == 1 else "hands"


def describe_hand_options(round_state: RoundState, player: int) -> str:
    options = legal_hands(round_state, player)
    if not options:
        return "No hands left to record"
    if len(options) == 1:
        return f"Must record {options[0]} {_hands_word(options[0])}"
    if len(options) == 2:
        return f"Must record {options[0]} or {options[1]} {_hands_word(options[1])}"
    if len(options) == 3:
        return (
            f"Must record {options[0]}, {options[1]}, or {options[2]} "
            f"{_hands_word(options[2])}"
        )
    return f"Record 0-{options[-1]} hands"
