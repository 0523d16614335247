"""
Bang! Cards - Static catalog for the base game.

This module contains:
- The 16 base-game characters with their base life
- The role table for 4-7 players
- The 80-card deck template (63 brown, 17 blue)

Everything here is read-only. Deck instances are built from the template
by the setup module, never by mutating these lists.
"""

from __future__ import annotations
from dataclasses import dataclass

from ...engine_core.state import Card, CardColor, Character, Role, RoleName, Suit
from ...errors import UnsupportedPlayerCount


MIN_PLAYERS = 4
MAX_PLAYERS = 7
DECK_SIZE = 80


# ============================================================================
# Characters
# ============================================================================

CHARACTERS: tuple[Character, ...] = (
    Character(name="Bart Cassidy", base_life=4),
    Character(name="Black Jack", base_life=4),
    Character(name="Calamity Janet", base_life=4),
    Character(name="El Gringo", base_life=3),
    Character(name="Jesse Jones", base_life=4),
    Character(name="Jourdonnais", base_life=4),
    Character(name="Kit Carlson", base_life=4),
    Character(name="Lucky Duke", base_life=4),
    Character(name="Paul Regret", base_life=3),
    Character(name="Pedro Ramirez", base_life=4),
    Character(name="Rose Doolan", base_life=4),
    Character(name="Sid Ketchum", base_life=4),
    Character(name="Slab the Killer", base_life=4),
    Character(name="Suzy Lafayette", base_life=4),
    Character(name="Vulture Sam", base_life=4),
    Character(name="Willy the Kid", base_life=4),
)


def get_character(name: str) -> Character | None:
    """Look up a character by name."""
    for character in CHARACTERS:
        if character.name == name:
            return character
    return None


# ============================================================================
# Roles
# ============================================================================

# Seats are filled in this order; a table of N players uses the first N.
ROLE_SEQUENCE: tuple[RoleName, ...] = (
    RoleName.SHERIFF,
    RoleName.RENEGADE,
    RoleName.BANDIT,
    RoleName.BANDIT,
    RoleName.DEPUTY,
    RoleName.BANDIT,
    RoleName.DEPUTY,
)

ROLE_TABLE: dict[int, tuple[RoleName, ...]] = {
    count: ROLE_SEQUENCE[:count]
    for count in range(MIN_PLAYERS, MAX_PLAYERS + 1)
}


def roles_for(player_count: int) -> list[Role]:
    """
    Get the role multiset for a player count (unshuffled).

    Raises:
        UnsupportedPlayerCount: outside 4-7 players
    """
    names = ROLE_TABLE.get(player_count)
    if names is None:
        raise UnsupportedPlayerCount(player_count)
    return [Role(name=name) for name in names]


# ============================================================================
# Deck template
# ============================================================================

@dataclass(frozen=True)
class CardTemplate:
    """One entry of the deck template: a card name and its suit/rank prints."""
    key: str
    name: str
    color: CardColor
    prints: tuple[tuple[str, Suit], ...]


S, H, D, C = Suit.SPADES, Suit.HEARTS, Suit.DIAMONDS, Suit.CLUBS
BROWN, BLUE = CardColor.BROWN, CardColor.BLUE

_NUMBERS = ("2", "3", "4", "5", "6", "7", "8", "9", "10", "J", "Q", "K", "A")


def _run(suit: Suit, first: str, last: str) -> tuple[tuple[str, Suit], ...]:
    """A consecutive run of ranks in one suit, inclusive."""
    start, end = _NUMBERS.index(first), _NUMBERS.index(last)
    return tuple((rank, suit) for rank in _NUMBERS[start:end + 1])


DECK_TEMPLATE: tuple[CardTemplate, ...] = (
    # Brown cards
    CardTemplate("bang", "Bang!", BROWN, (
        ("A", S), ("Q", H), ("K", H), ("A", H),
        *_run(D, "2", "A"),
        *_run(C, "2", "9"),
    )),
    CardTemplate("missed", "Missed!", BROWN, (
        *_run(C, "10", "A"),
        *_run(S, "2", "8"),
    )),
    CardTemplate("beer", "Beer", BROWN, _run(H, "6", "J")),
    CardTemplate("panic", "Panic!", BROWN, (("J", H), ("Q", H), ("A", H), ("8", D))),
    CardTemplate("cat_balou", "Cat Balou", BROWN, (("K", H), ("9", D), ("10", D), ("J", D))),
    CardTemplate("stagecoach", "Stagecoach", BROWN, (("9", S), ("9", S))),
    CardTemplate("wells_fargo", "Wells Fargo", BROWN, (("3", H),)),
    CardTemplate("gatling", "Gatling", BROWN, (("10", H),)),
    CardTemplate("duel", "Duel", BROWN, (("J", S), ("8", C), ("Q", D))),
    CardTemplate("indians", "Indians!", BROWN, (("K", D), ("A", D))),
    CardTemplate("general_store", "General Store", BROWN, (("9", C), ("Q", S))),
    CardTemplate("saloon", "Saloon", BROWN, (("5", H),)),
    # Blue cards
    CardTemplate("barrel", "Barrel", BLUE, (("Q", S), ("K", S))),
    CardTemplate("scope", "Scope", BLUE, (("A", S),)),
    CardTemplate("mustang", "Mustang", BLUE, (("8", H), ("9", H))),
    CardTemplate("jail", "Jail", BLUE, (("J", S), ("10", S), ("4", H))),
    CardTemplate("dynamite", "Dynamite", BLUE, (("2", H),)),
    CardTemplate("volcanic", "Volcanic", BLUE, (("10", S), ("10", C))),
    CardTemplate("schofield", "Schofield", BLUE, (("J", C), ("Q", C), ("K", S))),
    CardTemplate("remington", "Remington", BLUE, (("K", C),)),
    CardTemplate("rev_carabine", "Rev. Carabine", BLUE, (("A", C),)),
    CardTemplate("winchester", "Winchester", BLUE, (("8", S),)),
)


def deck_cards() -> list[Card]:
    """Expand the template into fresh card instances, in catalog order."""
    cards = []
    for template in DECK_TEMPLATE:
        for i, (rank, suit) in enumerate(template.prints, start=1):
            cards.append(Card(
                card_id=f"{template.key}_{i:02d}",
                name=template.name,
                suit=suit,
                rank=rank,
                color=template.color,
            ))
    return cards


def get_template(name: str) -> CardTemplate | None:
    """Look up a deck template entry by card name."""
    for template in DECK_TEMPLATE:
        if template.name == name:
            return template
    return None
