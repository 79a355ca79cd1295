"""Command-line interface for Sevens."""

from __future__ import annotations

import argparse
import logging
import time
from dataclasses import replace
from typing import TYPE_CHECKING

from sevens_engine.config import GameConfig
from sevens_engine.move_generator import claim_candidates
from sevens_engine.state import TurnPhase, create_initial_state

if TYPE_CHECKING:
    from sevens_engine.moves import Move
    from sevens_engine.state import GameState
    from simulation.session import GameSession

HUMAN_SEAT = 0


def format_state(state: GameState, show_all_hands: bool = False, viewer: int | None = None) -> str:
    """Format game state for display."""
    lines = []

    lines.append("=" * 60)
    lines.append(f"Round {state.round} | Phase: {state.phase.name}")
    lines.append("=" * 60)

    lines.append("Board: " + " | ".join(str(seq) for seq in state.board.values()))
    if state.joker_declarations:
        declared = ", ".join(f"{d.rank.symbol}{d.suit.symbol}" for d in state.joker_declarations)
        lines.append(f"Wilds played as: {declared}")

    for i, player in enumerate(state.players):
        prefix = "→ " if i == state.current_player_index else "  "
        lines.append(f"\n{prefix}{player.name} (score {player.score})")
        lines.append("-" * 40)

        if show_all_hands or i == viewer:
            hand_str = ", ".join(str(c) for c in player.hand) or "(empty)"
            lines.append(f"  Hand: {hand_str} [{player.hand_points} pts]")
        else:
            lines.append(f"  Hand: [{len(player.hand)} cards]")

        if player.melds:
            melds_str = "  ".join(" ".join(str(c) for c in meld) for meld in player.melds)
            lines.append(f"  Melds: {melds_str}")

    top = state.top_discard
    lines.append(f"\nDeck: {len(state.deck)} cards | Discard: {top if top else '(empty)'}")

    if state.last_round is not None and state.phase in (TurnPhase.ROUND_OVER, TurnPhase.GAME_OVER):
        result = state.last_round
        knocker = state.players[result.knocker_index].name
        outcome = "undercut!" if result.undercut else "stands"
        lines.append(f"\n{knocker} knocked and {outcome} Round points: {list(result.round_points)}")

    if state.is_game_over:
        lines.append("\n" + "=" * 60)
        lines.append(f"GAME OVER - {state.players[state.winner].name} wins!")
        lines.append("=" * 60)

    return "\n".join(lines)


def format_moves(moves: list[Move]) -> str:
    """Format available moves for display."""
    lines = ["Available moves:"]
    for i, move in enumerate(moves):
        lines.append(f"  {i + 1}. {move}")
    return "\n".join(lines)


def _prompt_move(moves: list[Move]) -> Move | None:
    """Ask for a move number; None means quit."""
    print(f"\n{format_moves(moves)}")
    while True:
        choice = input("\nYour move: ").strip()
        if choice.lower() == "q":
            return None
        try:
            move_idx = int(choice) - 1
        except ValueError:
            print("Please enter a valid number or 'q' to quit")
            continue
        if 0 <= move_idx < len(moves):
            return moves[move_idx]
        print(f"Please enter a number 1-{len(moves)}")


def _answered_in_time(session: GameSession, elapsed: float) -> bool:
    """Count ``elapsed`` seconds off the claim window; False if it ran out."""
    state = session.state
    session.tick(elapsed)
    if session.state is state:
        return True
    print("Too slow, the claim window has closed.")
    return False


def play_interactive(config: GameConfig, hints: bool = False) -> None:
    """Play as seat 0 against heuristic bots."""
    from simulation.session import GameSession
    from strategies.heuristic import HeuristicStrategy
    from strategies.llm.advisor import StrategyAdvisor

    state = create_initial_state(config, human_seats=(HUMAN_SEAT,))
    strategies = [None if i == HUMAN_SEAT else HeuristicStrategy() for i in range(config.player_count)]
    advisor = StrategyAdvisor.from_env() if hints else None
    session = GameSession(state=state, strategies=strategies, advisor=advisor)

    print("\nWelcome to Sevens!")
    print(f"You are {state.players[HUMAN_SEAT].name}. Type the number of a move to play.")
    print("Type 'q' to quit.\n")

    while not session.state.is_game_over:
        state = session.state

        if state.phase == TurnPhase.ROUND_OVER:
            print(format_state(state, show_all_hands=True))
            input("\nPress Enter for the next round...")
            session.start_next_round()
            continue

        claim_open = session.claim_seconds_left is not None
        if session.is_human_turn or (claim_open and HUMAN_SEAT in claim_candidates(state)):
            print(format_state(state, viewer=HUMAN_SEAT))
            if hints and session.is_human_turn:
                print(f"\nHint: {session.request_hint(HUMAN_SEAT)}")
            if claim_open:
                print(
                    f"\nClaim {state.pending_claim.card}? "
                    f"{session.claim_seconds_left:.0f}s to answer."
                )
            moves = [
                m for m in session.legal_moves
                if getattr(m, "player", HUMAN_SEAT) == HUMAN_SEAT
            ]
            started = time.monotonic()
            move = _prompt_move(moves)
            if move is None:
                print("Goodbye!")
                return
            if claim_open and not _answered_in_time(session, time.monotonic() - started):
                continue
            result = session.submit(move)
            if not result.accepted:
                print(f"Illegal move: {result.message}")
            continue

        if not session.step():
            break

    print(format_state(session.state, show_all_hands=True))


def simulate(config: GameConfig, num_games: int, seed: int) -> None:
    """Run heuristic-only games and print a summary."""
    from simulation.runner import run_batch
    from strategies.heuristic import HeuristicStrategy

    strategies = [HeuristicStrategy() for _ in range(config.player_count)]
    print(f"\nRunning {num_games} games with {config.player_count} heuristic players")

    results = run_batch(strategies, num_games, start_seed=seed, config=config)

    wins = [sum(1 for r in results if r.winner == i) for i in range(config.player_count)]
    unfinished = sum(1 for r in results if r.winner is None)
    avg_rounds = sum(r.rounds for r in results) / len(results)
    avg_moves = sum(r.move_count for r in results) / len(results)
    avg_duration = sum(r.duration_ms for r in results) / len(results)

    print("\nResults:")
    for i, count in enumerate(wins):
        print(f"  Seat {i} wins: {count} ({100*count/num_games:.1f}%)")
    print(f"  Unfinished: {unfinished}")
    print(f"  Average rounds: {avg_rounds:.1f}")
    print(f"  Average moves: {avg_moves:.1f}")
    print(f"  Average duration: {avg_duration:.2f}ms")


def show(config: GameConfig) -> None:
    """Print a freshly dealt table with every hand visible."""
    print(format_state(create_initial_state(config), show_all_hands=True))


def main(argv: list[str] | None = None) -> None:
    """Main entry point for the CLI."""
    parser = argparse.ArgumentParser(description="Sevens card game engine")
    parser.add_argument(
        "--log-level",
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level",
    )
    parser.add_argument("--env-file", help="Read SEVENS_* settings from this .env file")
    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    play_parser = subparsers.add_parser("play", help="Play against heuristic bots")
    play_parser.add_argument("--players", type=int, help="Number of seats (2-6)")
    play_parser.add_argument("--seed", type=int, help="Random seed")
    play_parser.add_argument("--hints", action="store_true", help="Ask the advisor for hints")

    sim_parser = subparsers.add_parser("simulate", help="Run bot-only games")
    sim_parser.add_argument("--players", type=int, help="Number of seats (2-6)")
    sim_parser.add_argument("--games", type=int, default=100, help="Number of games")
    sim_parser.add_argument("--seed", type=int, default=42, help="Random seed")

    show_parser = subparsers.add_parser("show", help="Deal a table and print it")
    show_parser.add_argument("--players", type=int, help="Number of seats (2-6)")
    show_parser.add_argument("--seed", type=int, help="Random seed")

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if args.command is None:
        parser.print_help()
        return

    config = GameConfig.from_env(args.env_file)
    overrides = {}
    if args.players is not None:
        overrides["player_count"] = args.players
    if args.seed is not None:
        overrides["seed"] = args.seed
    config = replace(config, **overrides)

    if args.command == "play":
        play_interactive(config, hints=args.hints)
    elif args.command == "simulate":
        simulate(config, num_games=args.games, seed=args.seed)
    elif args.command == "show":
        show(config)


if __name__ == "__main__":
    main()
