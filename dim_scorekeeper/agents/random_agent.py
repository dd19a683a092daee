# dim_scorekeeper/agents/random_agent.py
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict
import random

from .base import DimAgent


@dataclass
class RandomDimAgent(DimAgent):
    """
    Baseline seat used for simulations:

    - choose_bet: aims for roughly an even share of the tricks, with jitter,
      falling back to a random legal bet when the aim is forbidden.
    - choose_hands: pick uniformly among the legal hand counts.
    """

    rng: random.Random

    def choose_bet(self, observation: Dict[str, Any]) -> int:
        legal = observation["legal_values"]
        tricks = observation["game"]["number"]
        num_players = observation["game"]["num_players"]

        expected = round(tricks / num_players)
        low = max(0, expected - 1)
        high = min(tricks, expected + 1)
        bet = self.rng.randint(low, high)
        if bet in legal:
            return bet
        return self.rng.choice(legal)

    def choose_hands(self, observation: Dict[str, Any]) -> int:
        return self.rng.choice(observation["legal_values"])
