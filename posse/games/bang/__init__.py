"""
Bang! - The base game

Bang! is a social deduction card game set in the Wild West.
Key mechanics:
- Hidden roles: one Sheriff (revealed), Deputies, Bandits, a Renegade
- Characters give each player a base life (+1 for the Sheriff)
- Players start with as many cards in hand as they have life
- The Sheriff takes the first turn

This module contains:
- Card catalog (characters, role table, 80-card deck)
- Setup (deck engine, role assignment, start-of-game deal)
"""

from .cards import (
    CHARACTERS,
    DECK_TEMPLATE,
    DECK_SIZE,
    MIN_PLAYERS,
    MAX_PLAYERS,
    ROLE_TABLE,
    get_character,
    roles_for,
)
from .setup import Assignment, assign, build_deck, deal, deal_players, shuffle_deck, starting_life

__all__ = [
    "CHARACTERS",
    "DECK_TEMPLATE",
    "DECK_SIZE",
    "MIN_PLAYERS",
    "MAX_PLAYERS",
    "ROLE_TABLE",
    "get_character",
    "roles_for",
    "Assignment",
    "assign",
    "build_deck",
    "deal",
    "deal_players",
    "shuffle_deck",
    "starting_life",
]
