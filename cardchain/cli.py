"""
Cardchain CLI - Command-line interface for the engine.

Usage:
    cardchain cards                                    Print the card catalog
    cardchain resolve <game.json> [--actions a.json]   Resolve a queued turn
    cardchain outcome <game.json>                      Predict combat outcome
    cardchain animate <game.json>                      Build the combat timeline

Game files hold a Game.to_dict() snapshot. Action files hold a JSON list in
the ledger's encoding, e.g. [{"PlayCard": {"hand_index": 0, "slot_index": 1}}, "EndTurn"].
Every command prints JSON to stdout.
"""

import argparse
import json
import sys

from .catalog import CardCatalog, CatalogError, catalog_to_records, default_catalog, load_catalog
from .config import CARDCHAIN_CATALOG, configure_logging
from .engine_core.state import Game, game_from_dict
from .engine_core.action import action_from_dict
from .engine_core.reducer import resolve_turn
from .engine_core.analysis import analyze_outcome
from .engine_core.animation import create_combat_animations


def main(argv=None):
    """Main CLI entry point. Returns the process exit code."""
    parser = argparse.ArgumentParser(
        description="Cardchain - turn resolution engine for the lane card game",
        prog="cardchain",
    )
    parser.add_argument(
        "--catalog",
        default=CARDCHAIN_CATALOG,
        help="Path to a JSON card catalog (default: built-in cards)",
    )
    parser.add_argument("--log-level", default=None, help="Logging level")
    subparsers = parser.add_subparsers(dest="command", help="Commands")

    subparsers.add_parser("cards", help="Print the card catalog")

    resolve_parser = subparsers.add_parser("resolve", help="Resolve a queued turn")
    resolve_parser.add_argument("game_file", help="Path to game snapshot")
    resolve_parser.add_argument("--actions", help="Path to action list (default: just EndTurn)")
    resolve_parser.add_argument("--player", type=int, default=None, help="Submitting seat (0 or 1)")

    outcome_parser = subparsers.add_parser("outcome", help="Predict combat outcome")
    outcome_parser.add_argument("game_file", help="Path to game snapshot")

    animate_parser = subparsers.add_parser("animate", help="Build the combat animation timeline")
    animate_parser.add_argument("game_file", help="Path to game snapshot")

    args = parser.parse_args(argv)
    configure_logging(args.log_level)

    commands = {
        "cards": cmd_cards,
        "resolve": cmd_resolve,
        "outcome": cmd_outcome,
        "animate": cmd_animate,
    }
    command = commands.get(args.command)
    if command is None:
        parser.print_help()
        return 1

    try:
        catalog = load_catalog(args.catalog) if args.catalog else default_catalog()
        return command(args, catalog)
    except (OSError, CatalogError, ValueError, KeyError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


def _read_json(path):
    with open(path, "r", encoding="utf-8") as f:
        return json.load(f)


def _load_game(path) -> Game:
    return game_from_dict(_read_json(path))


def _emit(data) -> None:
    print(json.dumps(data, indent=2))


def cmd_cards(args, catalog: CardCatalog) -> int:
    """Print the card catalog."""
    _emit(catalog_to_records(catalog))
    return 0


def cmd_resolve(args, catalog: CardCatalog) -> int:
    """Resolve a queued turn."""
    game = _load_game(args.game_file)
    raw_actions = _read_json(args.actions) if args.actions else ["EndTurn"]
    actions = [action_from_dict(a) for a in raw_actions]

    result = resolve_turn(game, actions, catalog, player_idx=args.player)
    _emit({
        "success": result.success,
        "applied": result.applied,
        "error": result.error.to_dict() if result.error else None,
        "changes": result.changes,
        "game": result.new_state.to_dict(),
    })
    if not result.success:
        print(f"Error: {result.error_code.value}", file=sys.stderr)
        return 1
    return 0


def cmd_outcome(args, catalog: CardCatalog) -> int:
    """Predict combat outcome."""
    report = analyze_outcome(_load_game(args.game_file), catalog)
    _emit(report.to_dict())
    return 0


def cmd_animate(args, catalog: CardCatalog) -> int:
    """Build the combat animation timeline."""
    sequence = create_combat_animations(_load_game(args.game_file), catalog)
    _emit(sequence.to_dict())
    return 0


if __name__ == "__main__":
    sys.exit(main())
