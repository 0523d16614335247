"""
Posse CLI - Command-line interface for the server.

Usage:
    posse serve [--host HOST] [--port PORT]   Run the HTTP API
    posse catalog                             Print characters, roles and deck
    posse deal --players N                    Deal a sample table
"""

import argparse
import sys
from collections import Counter


def main():
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        description="Posse - Bang! game session server",
        prog="posse",
    )
    subparsers = parser.add_subparsers(dest="command", help="Commands")

    # Serve command
    serve_parser = subparsers.add_parser("serve", help="Run the HTTP API")
    serve_parser.add_argument("--host", default="127.0.0.1", help="Bind address")
    serve_parser.add_argument("--port", type=int, default=3001, help="Port")

    # Catalog command
    subparsers.add_parser("catalog", help="Print the card catalog")

    # Deal command
    deal_parser = subparsers.add_parser("deal", help="Deal a sample table")
    deal_parser.add_argument("--players", type=int, default=4, help="Number of players (4-7)")
    deal_parser.add_argument("--seed", type=int, default=None, help="Shuffle seed")

    args = parser.parse_args()

    if args.command == "serve":
        cmd_serve(args)
    elif args.command == "catalog":
        cmd_catalog(args)
    elif args.command == "deal":
        cmd_deal(args)
    else:
        parser.print_help()
        sys.exit(1)


def cmd_serve(args):
    """Run the API with uvicorn."""
    import uvicorn

    from .api.app import create_app
    from .config import Settings, setup_logging

    try:
        settings = Settings.from_env()
    except ValueError as e:
        print(f"Error: {e}")
        sys.exit(1)

    setup_logging(settings.log_level)
    app = create_app(settings=settings)
    uvicorn.run(app, host=args.host, port=args.port, log_level=settings.log_level.lower())


def cmd_catalog(args):
    """Print characters, role table and deck composition."""
    from .games.bang.cards import CHARACTERS, DECK_TEMPLATE, ROLE_TABLE, deck_cards

    print("Characters:")
    for character in CHARACTERS:
        print(f"  {character.name:<16} {character.base_life} life")

    print("\nRoles:")
    for count, roles in ROLE_TABLE.items():
        tally = Counter(r.value for r in roles)
        print(f"  {count} players: " + ", ".join(f"{n}x {name}" for name, n in tally.items()))

    print(f"\nDeck ({len(deck_cards())} cards):")
    for template in DECK_TEMPLATE:
        prints = " ".join(f"{rank}{suit.value[0].upper()}" for rank, suit in template.prints)
        print(f"  {template.name:<14} {template.color.value:<5} {prints}")


def cmd_deal(args):
    """Deal a sample table without storing anything."""
    import random

    from .engine_core.state import Identity
    from .errors import PosseError
    from .games.bang.setup import deal_players

    users = [Identity(id=i, name=f"Player {i}") for i in range(1, args.players + 1)]
    try:
        players, remainder = deal_players(users, random.Random(args.seed))
    except PosseError as e:
        print(f"Error: {e.message}")
        sys.exit(1)

    for player in players:
        marker = "*" if player.is_active else " "
        print(
            f"{marker} {player.name}: {player.role.name.value:<8} "
            f"{player.character.name:<16} life {player.life}"
        )
        for card in player.cards_in_hand:
            print(f"      {card.label}")
    print(f"\n{len(remainder)} cards left in the draw pile")


if __name__ == "__main__":
    main()
