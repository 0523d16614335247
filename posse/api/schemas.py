"""
Pydantic Schemas for API - Request/response models for OpenAPI.

These models define the exact contract between clients and the server.
Every request body is validated here before any transition runs.

Error Codes (see posse.errors.ErrorCode):
- UNAUTHORIZED: missing, invalid or expired auth token
- FORBIDDEN: caller may not perform the transition
- SESSION_NOT_FOUND / PLAYER_NOT_FOUND / REQUEST_NOT_FOUND
- NAME_TAKEN: signup with a registered name
- INVALID_STATE / INVALID_PLAYER_COUNT: transition not allowed now
- INVALID_INPUT: payload makes no sense for this game
- PERSISTENCE_FAILURE: storage error, safe to retry
"""

from enum import Enum
from typing import Literal, Optional, Any
from pydantic import BaseModel, Field

from ..engine_core.state import CardColor, Suit, Zone
from ..errors import ErrorCode


# =============================================================================
# Enums
# =============================================================================

class GameStatus(str, Enum):
    """Game lifecycle status."""
    RECRUITING = "recruiting"
    ACTIVE = "active"
    FINISHED = "finished"


# =============================================================================
# Shared Models
# =============================================================================

class IdentityInfo(BaseModel):
    """A registered user."""
    id: int
    name: str

    model_config = {"from_attributes": True}


class CardInfo(BaseModel):
    """Card information for display."""
    card_id: str
    name: str
    suit: Suit
    rank: str
    color: CardColor

    model_config = {"from_attributes": True}


class CharacterInfo(BaseModel):
    name: str
    base_life: int

    model_config = {"from_attributes": True}


class PlayerInfo(BaseModel):
    """
    A seated player as seen by one viewer.

    `role` is null while the role is hidden from the viewer, and
    `cards_in_hand` is null for everyone but the viewer.
    """
    name: str
    role: Optional[str] = None
    character: CharacterInfo
    life: int
    max_life: int
    is_revealed: bool
    is_active: bool
    hand_count: int = 0
    cards_in_hand: Optional[list[CardInfo]] = None
    inventory_cards: list[CardInfo] = Field(default_factory=list)
    played_cards: list[CardInfo] = Field(default_factory=list)


class LogInfo(BaseModel):
    """One game log line."""
    actor: str
    action: str
    message: str
    timestamp: float

    model_config = {"from_attributes": True}


# =============================================================================
# Request Models
# =============================================================================

class SignupRequest(BaseModel):
    """Register a new account."""
    name: str = Field(..., min_length=3, description="Unique, case-sensitive name")
    password: str = Field(..., min_length=3)


class LoginRequest(BaseModel):
    """Exchange credentials for an auth token."""
    name: str = Field(..., min_length=3)
    password: str = Field(..., min_length=3)


class AuthorizeRequest(BaseModel):
    """Admin approves a pending join request."""
    user_id: int = Field(..., description="ID of the requesting user")


class LifeRequest(BaseModel):
    """Change a player's life by one point."""
    delta: Literal[-1, 1] = Field(..., description="+1 or -1")


class MoveCardRequest(BaseModel):
    """
    Move one card between zones.

    Player zones (hand, inventory, played) default to the caller when no
    player is given; community, used and unused are session piles.
    """
    from_zone: Zone
    to_zone: Zone
    card_index: int = Field(0, ge=0, description="Position in the source zone")
    from_player: Optional[str] = None
    to_player: Optional[str] = None


# =============================================================================
# Response Models
# =============================================================================

class ErrorResponse(BaseModel):
    """Standard error response."""
    error: str = Field(..., description="Human-readable error message")
    error_code: ErrorCode = Field(..., description="Machine-readable error code")
    details: Optional[dict[str, Any]] = Field(None, description="Additional error context")
    retryable: bool = False
    api_version: str = Field("v1", description="API version")


class SignupResponse(BaseModel):
    id: int
    name: str


class LoginResponse(BaseModel):
    token: str
    expires_in: int


class GameCreatedResponse(BaseModel):
    id: int


class GameResponse(BaseModel):
    """Complete game snapshot, redacted for the viewer."""
    id: int
    admin: str
    status: GameStatus
    has_started: bool
    joined_users: list[IdentityInfo] = Field(default_factory=list)
    requests: list[IdentityInfo] = Field(default_factory=list)
    players: list[PlayerInfo] = Field(default_factory=list)
    community_cards: list[CardInfo] = Field(default_factory=list)
    used_cards: list[CardInfo] = Field(default_factory=list)
    unused_count: int = 0
    logs: list[LogInfo] = Field(default_factory=list)
    created_at: float = 0.0
    api_version: str = "v1"


class GameSummary(BaseModel):
    """Short game description for listings."""
    id: int
    admin: str
    status: GameStatus
    has_started: bool
    joined_count: int = 0
    request_count: int = 0
    player_count: int = 0


class GameListResponse(BaseModel):
    games: list[GameSummary]
    count: int


class HealthResponse(BaseModel):
    """Health check response."""
    status: str
    service: str
    version: str
