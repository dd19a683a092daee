# dim_scorekeeper/engine.py
from __future__ import annotations

import logging
from typing import Iterable, List, Optional, Sequence

from . import rules
from .errors import (
    CapacityExceeded,
    DimError,
    IllegalValue,
    InconsistentState,
    OutOfPhase,
    TurnViolation,
    ValidationError,
)
from .events import AudioSink, EngineView, GameEvent, Observer
from .persistence import SnapshotStore
from .state import GameState, RoundPhase, RoundState

logger = logging.getLogger(__name__)

_BIDDING_PHASES = (RoundPhase.BIDDING, RoundPhase.BIDS_PENDING)
_HAND_PHASES = (RoundPhase.HANDS, RoundPhase.HANDS_PENDING)


def initialize_game(
    player_count: int, round_count: int, names: Sequence[str]
) -> GameState:
    """Validate the setup input and build a fresh GameState."""
    if player_count < 2:
        raise ValidationError("A game needs at least 2 players")
    if round_count < 1:
        raise ValidationError("A game needs at least 1 round")
    trimmed = [name.strip() for name in names]
    if len(trimmed) != player_count:
        raise ValidationError(
            f"Expected {player_count} player names, got {len(trimmed)}"
        )
    if any(not name for name in trimmed):
        raise ValidationError("All player names must be filled in")

    return GameState(
        player_names=trimmed,
        rounds=rules.build_rounds(player_count, round_count),
        current_round_index=0,
    )


class RoundEngine:
    """
    Owns a GameState and applies every rule of the game to it.

    Operations run synchronously and either apply completely or raise a
    DimError. The raised message is also kept in `error` until the next
    successful operation. After each change a snapshot is saved and the
    observers receive a fresh EngineView; failures in those collaborators
    are logged and never undo the change.
    """

    def __init__(
        self,
        game_state: GameState,
        *,
        store: Optional[SnapshotStore] = None,
        audio: Optional[AudioSink] = None,
        observers: Optional[Iterable[Observer]] = None,
    ) -> None:
        self.game_state = game_state
        self.store = store
        self.audio = audio
        self.observers: List[Observer] = list(observers or [])
        self.error: Optional[str] = None
        self._derive_transients()

    # -------------------------------------------------------------------------
    # Construction
    # -------------------------------------------------------------------------

    @classmethod
    def new_game(
        cls,
        player_count: int,
        round_count: int,
        names: Sequence[str],
        **collaborators,
    ) -> "RoundEngine":
        engine = cls(initialize_game(player_count, round_count, names), **collaborators)
        logger.info(
            "New game: %d players, %d rounds (%s)",
            player_count,
            round_count,
            ", ".join(engine.game_state.player_names),
        )
        engine._commit()
        return engine

    @classmethod
    def load(cls, store: SnapshotStore, **collaborators) -> Optional["RoundEngine"]:
        """Resume the game saved in `store`, or return None if there is none."""
        game_state = store.load()
        if game_state is None:
            return None
        engine = cls(game_state, store=store, **collaborators)
        logger.info(
            "Resumed game at round %d/%d",
            engine.active_round_index + 1,
            len(game_state.rounds),
        )
        return engine

    def _derive_transients(self) -> None:
        """Rebuild phases from bets/hands/completion alone."""
        for round_state in self.game_state.rounds:
            round_state.phase = rules.derive_phase(round_state)
            if round_state.phase == RoundPhase.BIDDING and any(
                h is not None for h in round_state.hands
            ):
                # Hands cannot exist before bets are in.
                logger.warning(
                    "Clearing hands recorded before bets in round %d",
                    round_state.number,
                )
                round_state.hands = [None] * round_state.num_players
        self.game_state.current_round_index = self.active_round_index

    # -------------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------------

    @property
    def active_round_index(self) -> int:
        return rules.active_round_index(self.game_state)

    @property
    def active_round(self) -> RoundState:
        return self.game_state.rounds[self.active_round_index]

    @property
    def turn_holder(self) -> Optional[int]:
        """Seat expected to bid next, or None outside the bidding phase."""
        round_state = self.active_round
        if round_state.phase != RoundPhase.BIDDING:
            return None
        return rules.next_bidder(round_state, self.game_state.max_round_number)

    @property
    def bets_confirmed(self) -> bool:
        return self.active_round.phase in (
            RoundPhase.HANDS,
            RoundPhase.HANDS_PENDING,
            RoundPhase.COMPLETE,
        )

    @property
    def hands_confirmed(self) -> bool:
        return self.active_round.phase == RoundPhase.COMPLETE

    def name_of(self, player: int) -> str:
        return self.game_state.player_names[player]

    def legal_bets(self, player: int) -> List[int]:
        return rules.legal_bets(
            self.active_round, player, self.game_state.max_round_number
        )

    def legal_hands(self, player: int) -> List[int]:
        return rules.legal_hands(self.active_round, player)

    def is_game_complete(self) -> bool:
        return rules.is_game_complete(self.game_state)

    def total_score(self, player: int) -> int:
        return rules.total_score(self.game_state, player)

    def winning_players(self) -> List[int]:
        return rules.winning_players(self.game_state)

    def view(self) -> EngineView:
        return EngineView(
            game_state=self.game_state,
            active_round_index=self.active_round_index,
            bets_confirmed=self.bets_confirmed,
            hands_confirmed=self.hands_confirmed,
            turn_holder=self.turn_holder,
            error=self.error,
        )

    # -------------------------------------------------------------------------
    # Bidding
    # -------------------------------------------------------------------------

    def submit_bet(self, round_index: int, player: int, value: int) -> None:
        round_state = self._require_round(round_index, _BIDDING_PHASES, "enter bets")
        self._require_player(player)
        max_round_number = self.game_state.max_round_number

        if not rules.may_bid(round_state, player, max_round_number):
            holder = rules.next_bidder(round_state, max_round_number)
            raise self._fail(
                TurnViolation(f"It's {self.name_of(holder)}'s turn to bet", holder)
            )

        if value not in rules.legal_bets(round_state, player, max_round_number):
            if value == rules.forbidden_bet(round_state, player, max_round_number):
                message = (
                    f"{self.name_of(player)} cannot bet {value}: "
                    f"bets may not total {round_state.number}"
                )
            else:
                message = f"Bet must be between 0 and {round_state.number}"
            raise self._fail(IllegalValue(message))

        round_state.bets[player] = value
        holder = rules.next_bidder(round_state, max_round_number)
        round_state.phase = (
            RoundPhase.BIDS_PENDING if holder is None else RoundPhase.BIDDING
        )
        logger.debug(
            "Round %d: %s bets %d (next: %s)",
            round_state.number,
            self.name_of(player),
            value,
            self.name_of(holder) if holder is not None else "confirmation",
        )
        self._emit(GameEvent.BET_PLACED)
        self._succeed()

    def confirm_bets(self, round_index: int) -> None:
        round_state = self._require_round(round_index, _BIDDING_PHASES, "confirm bets")

        if not rules.all_bets_set(round_state):
            round_state.phase = RoundPhase.BIDDING
            raise self._fail(
                InconsistentState("All bets must be entered before confirming"),
                state_changed=True,
            )
        if not rules.bets_valid(round_state):
            round_state.phase = RoundPhase.BIDDING
            raise self._fail(
                InconsistentState(
                    f"Bets may not total {round_state.number}; please re-enter the bets"
                ),
                state_changed=True,
            )

        round_state.phase = RoundPhase.HANDS
        logger.info(
            "Round %d: bets confirmed %s", round_state.number, round_state.bets
        )
        self._emit(GameEvent.BETS_CONFIRMED)
        self._succeed()

    def cancel_bets_confirmation(self, round_index: int) -> None:
        round_state = self._require_round(
            round_index, _BIDDING_PHASES, "cancel bet confirmation"
        )
        round_state.phase = RoundPhase.BIDDING
        self._succeed()

    # -------------------------------------------------------------------------
    # Hand recording
    # -------------------------------------------------------------------------

    def submit_hands(self, round_index: int, player: int, value: int) -> None:
        round_state = self._require_round(round_index, _HAND_PHASES, "record hands")
        self._require_player(player)

        if not rules.all_bets_set(round_state):
            round_state.hands = [None] * round_state.num_players
            round_state.phase = RoundPhase.BIDDING
            raise self._fail(
                InconsistentState(
                    "Cannot record hands because bets are missing. "
                    "Please re-enter all bets."
                ),
                state_changed=True,
            )

        if not 0 <= value <= round_state.number:
            raise self._fail(
                IllegalValue(f"Hands must be between 0 and {round_state.number}")
            )

        legal = rules.legal_hands(round_state, player)
        if value not in legal:
            others = rules.hands_total(round_state) - (round_state.hands[player] or 0)
            if others + value > round_state.number:
                round_state.hands[player] = None
                round_state.phase = RoundPhase.HANDS
                raise self._fail(
                    CapacityExceeded(f"Total hands cannot exceed {round_state.number}"),
                    state_changed=True,
                )
            raise self._fail(
                IllegalValue(rules.describe_hand_options(round_state, player))
            )

        round_state.hands[player] = value
        if (
            rules.all_hands_set(round_state)
            and rules.hands_total(round_state) == round_state.number
        ):
            round_state.phase = RoundPhase.HANDS_PENDING
        else:
            round_state.phase = RoundPhase.HANDS
        logger.debug(
            "Round %d: %s took %d", round_state.number, self.name_of(player), value
        )
        self._succeed()

    def confirm_hands(self, round_index: int) -> None:
        round_state = self._require_round(
            round_index, (RoundPhase.HANDS_PENDING,), "confirm hands"
        )
        if not (
            rules.all_bets_set(round_state)
            and rules.all_hands_set(round_state)
            and rules.hands_total(round_state) == round_state.number
        ):
            round_state.phase = rules.derive_phase(round_state)
            raise self._fail(
                InconsistentState(
                    f"Hands must be recorded for everyone and total {round_state.number}"
                ),
                state_changed=True,
            )

        round_state.scores = rules.score_round(round_state)
        round_state.is_complete = True
        round_state.phase = RoundPhase.COMPLETE
        logger.info(
            "Round %d complete: scores %s", round_state.number, round_state.scores
        )
        self._emit(GameEvent.ROUND_COMPLETED)

        next_index = round_index + 1
        if next_index < len(self.game_state.rounds):
            next_round = self.game_state.rounds[next_index]
            next_round.phase = rules.derive_phase(next_round)
            self.game_state.current_round_index = next_index
        else:
            winners = self.winning_players()
            logger.info(
                "Game complete; winner(s): %s",
                ", ".join(self.name_of(p) for p in winners),
            )
            self._emit(GameEvent.GAME_WON)
        self._succeed()

    def cancel_hands_confirmation(self, round_index: int) -> None:
        round_state = self._require_round(
            round_index, _HAND_PHASES, "cancel hand confirmation"
        )
        round_state.hands = [None] * round_state.num_players
        round_state.phase = RoundPhase.HANDS
        self._succeed()

    # -------------------------------------------------------------------------
    # Internals
    # -------------------------------------------------------------------------

    def _require_round(
        self,
        round_index: int,
        phases: Sequence[RoundPhase],
        action: str,
    ) -> RoundState:
        if self.is_game_complete():
            raise self._fail(OutOfPhase("The game is over"))
        if round_index != self.active_round_index:
            raise self._fail(
                OutOfPhase(
                    f"Round {round_index + 1} is not the active round "
                    f"(round {self.active_round_index + 1} is)"
                )
            )
        round_state = self.game_state.rounds[round_index]
        if round_state.phase not in phases:
            raise self._fail(
                OutOfPhase(
                    f"Cannot {action} during the "
                    f"{round_state.phase.value.replace('_', ' ')} phase"
                )
            )
        return round_state

    def _require_player(self, player: int) -> None:
        if not 0 <= player < self.game_state.num_players:
            raise self._fail(IllegalValue(f"There is no player in seat {player}"))

    def _succeed(self) -> None:
        self.error = None
        self._commit()

    def _fail(self, exc: DimError, *, state_changed: bool = False) -> DimError:
        self.error = exc.message
        logger.info("Rejected: %s", exc)
        if state_changed:
            self._save()
        self._notify()
        return exc

    def _commit(self) -> None:
        self._save()
        self._notify()

    def _save(self) -> None:
        if self.store is None:
            return
        try:
            self.store.save(self.game_state, self.active_round_index)
        except Exception as exc:
            logger.warning("Could not save snapshot: %s", exc)

    def _emit(self, event: GameEvent) -> None:
        if self.audio is None:
            return
        try:
            self.audio.play(event)
        except Exception as exc:
            logger.warning("Audio sink failed on %s: %s", event.value, exc)

    def _notify(self) -> None:
        view = self.view()
        for observer in self.observers:
            try:
                observer.update(view)
            except Exception as exc:
                logger.warning("Observer %r failed: %s", observer, exc)
