# dim_scorekeeper/cli.py
from __future__ import annotations

import argparse
import logging
import random
from typing import List, Optional

from . import rules
from .agents import RandomDimAgent
from .autoplay import play_game
from .engine import RoundEngine
from .errors import DimError
from .events import LoggingAudioSink
from .game_log import write_round_scores_csv
from .paths import DEFAULT_LOG_LEVEL, RESULTS_DIR, resolve_results_path
from .persistence import SnapshotStore
from .standings import score_table
from .state import RoundPhase

DEFAULT_NAMES = [
    "Fuzzy",
    "Duzzy",
    "Kasper",
    "Wesley",
    "Mili",
    "Tigger",
    "Tiger",
    "Goose",
    "Moose",
    "Fatty",
]
MIN_PLAYERS, MAX_PLAYERS = 2, 10
MIN_ROUNDS, MAX_ROUNDS = 1, 13

HELP_TEXT = """Commands:
  bet <player> <n>     enter a bet (player by seat number or name)
  hands <player> <n>   record the tricks a player took
  confirm              confirm the bets or the hands of the active round
  cancel               reopen bidding, or clear the recorded hands
  show                 print the score sheet and round status
  scores               print the total scores
  help                 print this help
  quit                 leave (the game is saved)"""


def parse_args(argv: List[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Keep score for a game of Dim at the table."
    )

    parser.add_argument(
        "--players",
        type=int,
        default=4,
        help="Number of players for a new game (default: 4).",
    )
    parser.add_argument(
        "--rounds",
        type=int,
        default=10,
        help="Number of rounds for a new game (default: 10).",
    )
    parser.add_argument(
        "--names",
        nargs="+",
        default=None,
        help="Player names in seating order (default: built-in names).",
    )
    parser.add_argument(
        "--new",
        action="store_true",
        help="Discard any saved game and start a new one.",
    )
    parser.add_argument(
        "--autoplay",
        action="store_true",
        help="Fill in every round with random legal bets and hands.",
    )
    parser.add_argument(
        "--seed",
        type=int,
        default=0,
        help="Random seed for --autoplay (default: 0).",
    )
    parser.add_argument(
        "--csv",
        type=str,
        default=None,
        help="Optional path for a per-round score CSV written on exit.",
    )
    parser.add_argument(
        "--chart",
        type=str,
        default=None,
        help="Optional path for a PNG chart of running totals written on exit.",
    )
    parser.add_argument(
        "--state-dir",
        type=str,
        default=None,
        help=f"Directory holding the saved game (default: {RESULTS_DIR}).",
    )
    parser.add_argument(
        "--no-sound",
        action="store_true",
        help="Do not log sound cues.",
    )
    parser.add_argument(
        "--log-level",
        type=str,
        default=DEFAULT_LOG_LEVEL,
        help="Logging level (DEBUG, INFO, WARNING, ...). Default: %(default)s.",
    )

    return parser.parse_args(argv)


# --------------------------------------------------------------------------- #
# Rendering                                                                   #
# --------------------------------------------------------------------------- #


def render_status(engine: RoundEngine) -> str:
    game_state = engine.game_state
    if engine.is_game_complete():
        winners = engine.winning_players()
        label = "Winner" if len(winners) == 1 else "Winners"
        return f"Game over. {label}: " + ", ".join(
            f"{engine.name_of(p)} ({engine.total_score(p)})" for p in winners
        )

    round_state = engine.active_round
    lines = [
        f"Round {engine.active_round_index + 1} of {len(game_state.rounds)}: "
        f"{round_state.number} tricks, trump {round_state.suit}, "
        f"dealer {engine.name_of(round_state.dealer)}"
    ]
    phase = round_state.phase
    if phase == RoundPhase.BIDDING:
        holder = engine.turn_holder
        if all(bet is None for bet in round_state.bets):
            lines.append("Don't forget to deal the cards!")
        if holder is None:
            lines.append("All bets are in; confirm or amend them.")
        else:
            lines.append(f"{engine.name_of(holder)} to bet.")
        last = rules.last_bidder(round_state, game_state.max_round_number)
        hint = rules.describe_bet_restriction(
            round_state, last, game_state.max_round_number
        )
        lines.append(f"{engine.name_of(last)} bets last: {hint}")
    elif phase == RoundPhase.BIDS_PENDING:
        lines.append("All bets are in. Type 'confirm' to lock them or 'cancel'.")
    elif phase == RoundPhase.HANDS:
        for seat in range(game_state.num_players):
            if round_state.hands[seat] is None:
                lines.append(
                    f"{engine.name_of(seat)}: "
                    f"{rules.describe_hand_options(round_state, seat)}"
                )
    elif phase == RoundPhase.HANDS_PENDING:
        lines.append("All hands are in. Type 'confirm' to score the round or 'cancel'.")

    if engine.error:
        lines.append(f"! {engine.error}")
    return "\n".join(lines)


def render(engine: RoundEngine) -> str:
    return score_table(engine.game_state).to_string() + "\n\n" + render_status(engine)


# --------------------------------------------------------------------------- #
# Commands                                                                    #
# --------------------------------------------------------------------------- #


def resolve_player(engine: RoundEngine, token: str) -> int:
    """Accept a 1-based seat number or a (case-insensitive) player name."""
    names = engine.game_state.player_names
    if token.isdigit():
        seat = int(token) - 1
        if 0 <= seat < len(names):
            return seat
        raise ValueError(f"No player in seat {token}")
    for seat, name in enumerate(names):
        if name.lower() == token.lower():
            return seat
    raise ValueError(f"Unknown player {token!r}")


def handle_command(engine: RoundEngine, line: str) -> str:
    """Apply one command line to the engine and return the text to print."""
    parts = line.split()
    if not parts:
        return ""
    command, args = parts[0].lower(), parts[1:]
    round_index = engine.active_round_index

    try:
        if command in ("bet", "hands"):
            if len(args) != 2:
                return f"Usage: {command} <player> <n>"
            player = resolve_player(engine, args[0])
            value = int(args[1])
            if command == "bet":
                engine.submit_bet(round_index, player, value)
            else:
                engine.submit_hands(round_index, player, value)
        elif command == "confirm":
            if engine.active_round.phase in (RoundPhase.HANDS, RoundPhase.HANDS_PENDING):
                engine.confirm_hands(round_index)
            else:
                engine.confirm_bets(round_index)
        elif command == "cancel":
            if engine.active_round.phase in (RoundPhase.HANDS, RoundPhase.HANDS_PENDING):
                engine.cancel_hands_confirmation(round_index)
            else:
                engine.cancel_bets_confirmation(round_index)
        elif command == "show":
            return render(engine)
        elif command == "scores":
            return "\n".join(
                f"{engine.name_of(p)}: {engine.total_score(p)}"
                for p in range(engine.game_state.num_players)
            )
        elif command == "help":
            return HELP_TEXT
        else:
            return f"Unknown command {command!r}; type 'help'."
    except DimError as exc:
        return f"! {exc.message}"
    except ValueError as exc:
        return f"! {exc}"

    return render_status(engine)


def _export(engine: RoundEngine, args: argparse.Namespace) -> None:
    if args.csv:
        csv_path = resolve_results_path(args.csv)
        write_round_scores_csv(engine.game_state, csv_path)
        logging.info("Wrote score sheet to %s", csv_path)
    if args.chart:
        # Imported lazily so the interactive shell does not pay for matplotlib.
        from .charts import plot_running_totals

        chart_path = plot_running_totals(
            engine.game_state, resolve_results_path(args.chart)
        )
        logging.info("Wrote chart to %s", chart_path)


def main(argv: List[str] | None = None) -> None:
    args = parse_args(argv)

    logging.basicConfig(
        level=getattr(logging, args.log_level.upper(), logging.WARNING),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )

    store = SnapshotStore(args.state_dir or RESULTS_DIR)
    audio = LoggingAudioSink(enabled=not args.no_sound)

    engine: Optional[RoundEngine] = None
    if args.new:
        store.clear()
    else:
        engine = RoundEngine.load(store, audio=audio)

    if engine is None:
        if not MIN_PLAYERS <= args.players <= MAX_PLAYERS:
            raise SystemExit(
                f"Dim needs between {MIN_PLAYERS} and {MAX_PLAYERS} players; "
                f"got {args.players}."
            )
        if not MIN_ROUNDS <= args.rounds <= MAX_ROUNDS:
            raise SystemExit(
                f"Dim is played over {MIN_ROUNDS} to {MAX_ROUNDS} rounds; "
                f"got {args.rounds}."
            )
        names = args.names or DEFAULT_NAMES[: args.players]
        try:
            engine = RoundEngine.new_game(
                args.players, args.rounds, names, store=store, audio=audio
            )
        except DimError as exc:
            raise SystemExit(exc.message)

    if args.autoplay:
        agents = [
            RandomDimAgent(rng=random.Random(args.seed * 1000 + i))
            for i in range(engine.game_state.num_players)
        ]
        play_game(engine, agents)
        print(render(engine))
        _export(engine, args)
        return

    print(render(engine))
    print("Type 'help' for commands.")
    while True:
        try:
            line = input("> ")
        except EOFError:
            break
        if line.strip().lower() in ("quit", "exit"):
            break
        output = handle_command(engine, line)
        if output:
            print(output)

    _export(engine, args)


if __name__ == "__main__":
    main()
