"""
Engine Core - Game state and turn action handling.

The engine is the runtime that:
1. Holds GameState (session, players, card piles, log)
2. Models turn actions as a tagged variant
3. Validates and applies actions via the reducer
"""

from .state import (
    Card,
    CardColor,
    Character,
    GamePhase,
    GameState,
    Identity,
    LogEntry,
    PlayerState,
    Role,
    RoleName,
    Suit,
    Zone,
)
from .action import Action, ActionType, ActionPayload, ActionResult
from .reducer import Reducer, apply_action, winning_side

__all__ = [
    "Card",
    "CardColor",
    "Character",
    "GamePhase",
    "GameState",
    "Identity",
    "LogEntry",
    "PlayerState",
    "Role",
    "RoleName",
    "Suit",
    "Zone",
    "Action",
    "ActionType",
    "ActionPayload",
    "ActionResult",
    "Reducer",
    "apply_action",
    "winning_side",
]
