"""
Game State - Session, player and card containers.

Design principles:
- Plain dataclasses: validated and serialized by pydantic TypeAdapters in the store
- Serializable: every field round-trips through JSON
- Owned: players exist only inside their game and die with it
- Copy-on-write: transitions mutate a clone and persist it in one go
"""

from __future__ import annotations
from dataclasses import dataclass, field
from copy import deepcopy
from enum import Enum
import time


class GamePhase(str, Enum):
    """Lifecycle phases of a game session."""
    RECRUITING = "recruiting"  # Accepting join requests
    ACTIVE = "active"  # Dealt out, turn actions allowed
    FINISHED = "finished"  # Terminal


class RoleName(str, Enum):
    """Hidden win-condition affiliations."""
    SHERIFF = "Sheriff"
    DEPUTY = "Deputy"
    RENEGADE = "Renegade"
    BANDIT = "Bandit"


class Suit(str, Enum):
    SPADES = "spades"
    HEARTS = "hearts"
    DIAMONDS = "diamonds"
    CLUBS = "clubs"


class CardColor(str, Enum):
    """Brown cards are played and discarded, blue cards stay in play."""
    BROWN = "brown"
    BLUE = "blue"


class Zone(str, Enum):
    """Named card locations."""
    HAND = "hand"
    INVENTORY = "inventory"
    PLAYED = "played"
    COMMUNITY = "community"
    USED = "used"
    UNUSED = "unused"

    @property
    def is_player_zone(self) -> bool:
        return self in PLAYER_ZONES


PLAYER_ZONES = frozenset({Zone.HAND, Zone.INVENTORY, Zone.PLAYED})


@dataclass
class Identity:
    """A registered account as seen by the game (never carries credentials)."""
    id: int
    name: str


@dataclass
class Character:
    """Character archetype with its base life."""
    name: str
    base_life: int


@dataclass
class Role:
    name: RoleName


@dataclass
class Card:
    """
    A card instance.

    card_id is unique per instance; the base deck holds several cards with
    the same name, suit and rank (two Stagecoach 9 of spades).
    """
    card_id: str
    name: str
    suit: Suit
    rank: str
    color: CardColor = CardColor.BROWN

    @property
    def label(self) -> str:
        return f"{self.name} ({self.rank} of {self.suit.value})"


@dataclass
class PlayerState:
    """A seated player. Created at start, destroyed with the game."""
    name: str
    role: Role
    character: Character
    life: int
    is_revealed: bool = False
    is_active: bool = False
    cards_in_hand: list[Card] = field(default_factory=list)
    inventory_cards: list[Card] = field(default_factory=list)
    played_cards: list[Card] = field(default_factory=list)

    @property
    def is_sheriff(self) -> bool:
        return self.role.name == RoleName.SHERIFF

    @property
    def max_life(self) -> int:
        """Starting life: the character's base life, +1 for the Sheriff."""
        return self.character.base_life + (1 if self.is_sheriff else 0)

    @property
    def is_alive(self) -> bool:
        return self.life > 0

    def zone(self, zone: Zone) -> list[Card]:
        """Get the card list backing one of this player's zones."""
        if zone == Zone.HAND:
            return self.cards_in_hand
        if zone == Zone.INVENTORY:
            return self.inventory_cards
        if zone == Zone.PLAYED:
            return self.played_cards
        raise KeyError(f"{zone.value} is not a player zone")

    def all_cards(self) -> list[Card]:
        return self.cards_in_hand + self.inventory_cards + self.played_cards


@dataclass
class LogEntry:
    """One line of the game's action log."""
    actor: str
    action: str
    message: str
    timestamp: float = field(default_factory=time.time)


@dataclass
class GameState:
    """
    A game session.

    Invariants:
    - admin never appears in requests
    - an identity is in at most one of requests / joined_users
    - players are only populated once the game has started, and
      requests / joined_users are empty from then on
    - all player zones plus the session piles hold exactly one deck
    """
    id: int
    admin: str
    phase: GamePhase = GamePhase.RECRUITING
    joined_users: list[Identity] = field(default_factory=list)
    requests: list[Identity] = field(default_factory=list)
    players: list[PlayerState] = field(default_factory=list)
    community_cards: list[Card] = field(default_factory=list)
    used_cards: list[Card] = field(default_factory=list)
    unused_cards: list[Card] = field(default_factory=list)
    logs: list[LogEntry] = field(default_factory=list)
    created_at: float = field(default_factory=time.time)

    @property
    def has_started(self) -> bool:
        return self.phase != GamePhase.RECRUITING

    @property
    def is_active(self) -> bool:
        return self.phase == GamePhase.ACTIVE

    @property
    def is_finished(self) -> bool:
        return self.phase == GamePhase.FINISHED

    @property
    def active_player(self) -> PlayerState | None:
        for p in self.players:
            if p.is_active:
                return p
        return None

    def get_player(self, name: str) -> PlayerState | None:
        """Get a seated player by name."""
        for p in self.players:
            if p.name == name:
                return p
        return None

    def find_request(self, user_id: int) -> Identity | None:
        for user in self.requests:
            if user.id == user_id:
                return user
        return None

    def find_joined(self, name: str) -> Identity | None:
        for user in self.joined_users:
            if user.name == name:
                return user
        return None

    def is_known(self, name: str) -> bool:
        """Check if name is already pending or joined."""
        return any(u.name == name for u in self.requests) or self.find_joined(name) is not None

    def pile(self, zone: Zone) -> list[Card]:
        """Get the card list backing a session-level pile."""
        if zone == Zone.COMMUNITY:
            return self.community_cards
        if zone == Zone.USED:
            return self.used_cards
        if zone == Zone.UNUSED:
            return self.unused_cards
        raise KeyError(f"{zone.value} is not a session pile")

    def all_cards(self) -> list[Card]:
        """Every card in the game, player zones first."""
        cards: list[Card] = []
        for p in self.players:
            cards.extend(p.all_cards())
        return cards + self.community_cards + self.used_cards + self.unused_cards

    def log(self, actor: str, action: str, message: str) -> LogEntry:
        entry = LogEntry(actor=actor, action=action, message=message)
        self.logs.append(entry)
        return entry

    def clone(self) -> GameState:
        """Deep copy the state."""
        return deepcopy(self)
