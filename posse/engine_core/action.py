"""
Action System - In-game turn actions, payloads, and results.

Actions are a tagged variant:
1. CHANGE_LIFE: +1 / -1 life on a player
2. MOVE_CARD: move one card between named zones
3. REVEAL_ROLE: reveal the actor's own role
4. END_TURN: pass the turn to the next living player
5. FINISH: end the game

All in-game state changes flow through actions and the reducer.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum

from .state import GameState, Zone


class ActionType(str, Enum):
    """Types of in-game actions."""
    CHANGE_LIFE = "change_life"
    MOVE_CARD = "move_card"
    REVEAL_ROLE = "reveal_role"
    END_TURN = "end_turn"
    FINISH = "finish"


@dataclass
class ActionPayload:
    """
    Payload for an action - contains the action parameters.

    Different action types use different fields; the reducer validates
    the fields its handler needs.
    """
    # Life changes
    target_player: str | None = None
    delta: int = 0

    # Card moves
    from_zone: Zone | None = None
    from_player: str | None = None
    card_index: int = 0
    to_zone: Zone | None = None
    to_player: str | None = None


@dataclass
class Action:
    """
    A complete action to be applied to a game.

    Actions are:
    - Validated before application
    - Applied atomically by the reducer
    - Logged to the game's action log
    """
    action_type: ActionType
    actor: str
    payload: ActionPayload = field(default_factory=ActionPayload)

    @classmethod
    def change_life(cls, actor: str, target_player: str, delta: int) -> Action:
        """Factory for life change action."""
        return cls(
            action_type=ActionType.CHANGE_LIFE,
            actor=actor,
            payload=ActionPayload(target_player=target_player, delta=delta),
        )

    @classmethod
    def move_card(
        cls,
        actor: str,
        from_zone: Zone,
        to_zone: Zone,
        card_index: int = 0,
        from_player: str | None = None,
        to_player: str | None = None,
    ) -> Action:
        """Factory for card move action."""
        return cls(
            action_type=ActionType.MOVE_CARD,
            actor=actor,
            payload=ActionPayload(
                from_zone=from_zone,
                from_player=from_player,
                card_index=card_index,
                to_zone=to_zone,
                to_player=to_player,
            ),
        )

    @classmethod
    def reveal(cls, actor: str) -> Action:
        """Factory for role reveal action."""
        return cls(action_type=ActionType.REVEAL_ROLE, actor=actor)

    @classmethod
    def end_turn(cls, actor: str) -> Action:
        """Factory for end turn action."""
        return cls(action_type=ActionType.END_TURN, actor=actor)

    @classmethod
    def finish(cls, actor: str) -> Action:
        """Factory for finish action."""
        return cls(action_type=ActionType.FINISH, actor=actor)


@dataclass
class ActionResult:
    """
    Result of applying an action.

    Contains:
    - The new state (a clone; the input state is never mutated)
    - Human-readable changes, also written to the game log
    """
    new_state: GameState
    changes: list[str] = field(default_factory=list)
    changed: bool = True
