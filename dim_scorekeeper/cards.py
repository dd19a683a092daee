# dim_scorekeeper/cards.py
from __future__ import annotations

from typing import List
import enum


class Suit(enum.Enum):
    SPADES = "♠"
    HEARTS = "♥"
    DIAMONDS = "♦"
    CLUBS = "♣"
    NO_TRUMP = "NT"

    def __str__(self) -> str:
        return self.value


# Trump indicators rotate through the suits in declaration order.
SUIT_CYCLE: List[Suit] = list(Suit)


def trump_for_round(round_count: int, number: int) -> Suit:
    """Trump indicator for the round dealing `number` cards in a `round_count` game."""
    return SUIT_CYCLE[(round_count - number) % len(SUIT_CYCLE)]


def suit_to_str(suit: Suit) -> str:
    """Convert a Suit to a JSON-serializable string."""
    return suit.name


def suit_from_str(name: str) -> Suit:
    """
    Convert a string back into a Suit.

    Accepts the member name ("SPADES") or the symbol ("♠", also with the
    emoji variation selector older snapshots carry).
    """
    if name in Suit.__members__:
        return Suit[name]
    return Suit(name.replace("\ufe0f", ""))
