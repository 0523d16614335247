"""
Bang! Game Setup - Deck building, dealing and role assignment.

This module handles:
- Building a fresh 80-card deck instance
- Shuffling (no seed is persisted; tests may inject a random.Random)
- Destructive dealing from the front of a shared deck
- Mapping a player count to roles, characters and life totals
- The complete start-of-game deal

Assignment is positional: roles[i] and characters[i] go to the i-th joined
user, in the order the users are stored on the game. Join order therefore
decides who gets which shuffled role.
"""

from __future__ import annotations
from dataclasses import dataclass
import logging
import random
from typing import Sequence

from ...engine_core.state import Card, Character, Identity, PlayerState, Role, RoleName
from ...errors import CatalogExhausted, InsufficientCards
from .cards import CHARACTERS, deck_cards, roles_for

logger = logging.getLogger("posse.games.bang.setup")


@dataclass
class Assignment:
    """Roles and characters for one table, index-aligned."""
    roles: list[Role]
    characters: list[Character]

    def seats(self) -> list[tuple[Role, Character]]:
        """Ordered (role, character) pairs, one per seat."""
        return list(zip(self.roles, self.characters))


def build_deck() -> list[Card]:
    """Return a fresh copy of the canonical deck in catalog order."""
    return deck_cards()


def shuffle_deck(deck: list[Card], rng: random.Random | None = None) -> list[Card]:
    """Shuffle a deck in place and return it."""
    (rng or random.Random()).shuffle(deck)
    return deck


def deal(deck: list[Card], count: int) -> tuple[list[Card], list[Card]]:
    """
    Remove `count` cards from the front of `deck`.

    The deck is consumed: after the call it holds only the remainder, so
    successive deals from one deck never hand out the same card twice.

    Returns:
        (hand, remainder) where remainder is the same list object as deck

    Raises:
        InsufficientCards: if the deck holds fewer than `count` cards
    """
    if count < 0:
        raise ValueError("Cannot deal a negative number of cards")
    if len(deck) < count:
        raise InsufficientCards(count, len(deck))

    hand = deck[:count]
    del deck[:count]
    return hand, deck


def assign(player_count: int, rng: random.Random | None = None) -> Assignment:
    """
    Compute roles and characters for a table of `player_count` players.

    Roles are the fixed multiset for the count (exactly one Sheriff) in
    shuffled order; characters are distinct, drawn without replacement.

    Raises:
        UnsupportedPlayerCount: outside 4-7 players
        CatalogExhausted: fewer characters than players
    """
    rng = rng or random.Random()

    roles = roles_for(player_count)
    rng.shuffle(roles)

    if len(CHARACTERS) < player_count:
        raise CatalogExhausted(player_count, len(CHARACTERS))
    characters = rng.sample(list(CHARACTERS), player_count)

    return Assignment(roles=roles, characters=characters)


def starting_life(role: Role, character: Character) -> int:
    """Base life of the character, +1 for the Sheriff."""
    if role.name == RoleName.SHERIFF:
        return character.base_life + 1
    return character.base_life


def deal_players(
    joined: Sequence[Identity],
    rng: random.Random | None = None,
) -> tuple[list[PlayerState], list[Card]]:
    """
    Deal a whole table.

    Builds and shuffles a deck, assigns roles and characters to `joined`
    in order, and deals each player as many cards as their starting life.
    The Sheriff starts revealed and active.

    Returns:
        (players, undealt cards)
    """
    rng = rng or random.Random()

    assignment = assign(len(joined), rng)
    deck = shuffle_deck(build_deck(), rng)

    players = []
    for user, (role, character) in zip(joined, assignment.seats()):
        life = starting_life(role, character)
        hand, deck = deal(deck, life)
        is_sheriff = role.name == RoleName.SHERIFF
        players.append(PlayerState(
            name=user.name,
            role=role,
            character=character,
            life=life,
            is_revealed=is_sheriff,
            is_active=is_sheriff,
            cards_in_hand=hand,
        ))

    logger.debug(
        "Dealt %d players, %d cards left in the draw pile",
        len(players), len(deck),
    )
    return players, deck
