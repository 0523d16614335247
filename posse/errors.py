"""
Posse errors - Categorical exception hierarchy.

Every failure a transition can produce belongs to one category. The API layer
maps the category's error code to an HTTP status; nothing below the API layer
knows about HTTP.

Categories:
- UNAUTHORIZED: no or invalid identity
- FORBIDDEN: authenticated but not permitted
- NOT_FOUND: session, player or request absent
- CONFLICT: identity name already registered
- INVALID_STATE: transition not allowed in the current state
- INVALID_INPUT: malformed payload
- PERSISTENCE_FAILURE: load/save collaborator failure (safe to retry)
"""

from __future__ import annotations
from enum import Enum


class ErrorCode(str, Enum):
    """Machine-readable error codes."""
    UNAUTHORIZED = "UNAUTHORIZED"
    FORBIDDEN = "FORBIDDEN"
    SESSION_NOT_FOUND = "SESSION_NOT_FOUND"
    PLAYER_NOT_FOUND = "PLAYER_NOT_FOUND"
    REQUEST_NOT_FOUND = "REQUEST_NOT_FOUND"
    NAME_TAKEN = "NAME_TAKEN"
    INVALID_STATE = "INVALID_STATE"
    INVALID_PLAYER_COUNT = "INVALID_PLAYER_COUNT"
    UNSUPPORTED_PLAYER_COUNT = "UNSUPPORTED_PLAYER_COUNT"
    INSUFFICIENT_CARDS = "INSUFFICIENT_CARDS"
    CATALOG_EXHAUSTED = "CATALOG_EXHAUSTED"
    INVALID_INPUT = "INVALID_INPUT"
    PERSISTENCE_FAILURE = "PERSISTENCE_FAILURE"


class PosseError(Exception):
    """Base exception for all Posse errors."""
    error_code: ErrorCode = ErrorCode.INVALID_STATE
    retryable: bool = False

    def __init__(self, message: str, **details):
        self.message = message
        self.details = details
        super().__init__(message)


class Unauthorized(PosseError):
    """Raised when the caller has no valid identity."""
    error_code = ErrorCode.UNAUTHORIZED


class Forbidden(PosseError):
    """Raised when an authenticated caller may not perform the transition."""
    error_code = ErrorCode.FORBIDDEN


class NotFound(PosseError):
    """Base for absent sessions, players and requests."""
    error_code = ErrorCode.SESSION_NOT_FOUND


class SessionNotFound(NotFound):
    error_code = ErrorCode.SESSION_NOT_FOUND

    def __init__(self, game_id: int):
        self.game_id = game_id
        super().__init__(f"Game {game_id} not found", game_id=game_id)


class PlayerNotFound(NotFound):
    error_code = ErrorCode.PLAYER_NOT_FOUND

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Player {name!r} not found", name=name)


class RequestNotFound(NotFound):
    error_code = ErrorCode.REQUEST_NOT_FOUND

    def __init__(self, user_id: int):
        self.user_id = user_id
        super().__init__(f"No pending join request from user {user_id}", user_id=user_id)


class Conflict(PosseError):
    """Base for uniqueness violations."""
    error_code = ErrorCode.NAME_TAKEN


class NameTaken(Conflict):
    error_code = ErrorCode.NAME_TAKEN

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Name {name!r} is already registered", name=name)


class InvalidState(PosseError):
    """Raised when a transition is not allowed in the current state."""
    error_code = ErrorCode.INVALID_STATE


class InvalidPlayerCount(InvalidState):
    """Start attempted with a number of joined users outside 4..7."""
    error_code = ErrorCode.INVALID_PLAYER_COUNT

    def __init__(self, count: int, minimum: int, maximum: int):
        self.count = count
        super().__init__(
            f"A game needs {minimum}-{maximum} players, {count} joined",
            count=count,
            minimum=minimum,
            maximum=maximum,
        )


class UnsupportedPlayerCount(InvalidState):
    """Role assignment asked for a player count the role table does not cover."""
    error_code = ErrorCode.UNSUPPORTED_PLAYER_COUNT

    def __init__(self, count: int):
        self.count = count
        super().__init__(f"No role table for {count} players", count=count)


class InsufficientCards(InvalidState):
    error_code = ErrorCode.INSUFFICIENT_CARDS

    def __init__(self, requested: int, available: int):
        self.requested = requested
        self.available = available
        super().__init__(
            f"Cannot deal {requested} cards from a deck of {available}",
            requested=requested,
            available=available,
        )


class CatalogExhausted(InvalidState):
    error_code = ErrorCode.CATALOG_EXHAUSTED

    def __init__(self, requested: int, available: int):
        super().__init__(
            f"Catalog has {available} characters, {requested} requested",
            requested=requested,
            available=available,
        )


class InvalidInput(PosseError):
    """Raised for payloads that pass schema validation but make no sense."""
    error_code = ErrorCode.INVALID_INPUT


class PersistenceFailure(PosseError):
    """Raised when the persistence collaborator cannot load or save."""
    error_code = ErrorCode.PERSISTENCE_FAILURE
    retryable = True
