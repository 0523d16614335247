"""
API Module - HTTP interface for game clients.

Clients:
1. Sign up and log in to get a token
2. Create games or request to join them
3. (Admin) authorize requests and start the game
4. Play: life changes, card moves, reveal, end turn, finish

Every snapshot is redacted for the caller.
"""

from .schemas import (
    # Requests
    SignupRequest,
    LoginRequest,
    AuthorizeRequest,
    LifeRequest,
    MoveCardRequest,
    # Responses
    SignupResponse,
    LoginResponse,
    GameCreatedResponse,
    GameResponse,
    GameListResponse,
    GameSummary,
    ErrorResponse,
    HealthResponse,
    # Shared
    GameStatus,
    PlayerInfo,
    CardInfo,
    IdentityInfo,
)
from .service import APIService, game_view
from .app import create_app

__all__ = [
    # Requests
    "SignupRequest",
    "LoginRequest",
    "AuthorizeRequest",
    "LifeRequest",
    "MoveCardRequest",
    # Responses
    "SignupResponse",
    "LoginResponse",
    "GameCreatedResponse",
    "GameResponse",
    "GameListResponse",
    "GameSummary",
    "ErrorResponse",
    "HealthResponse",
    # Shared
    "GameStatus",
    "PlayerInfo",
    "CardInfo",
    "IdentityInfo",
    # Service
    "APIService",
    "game_view",
    "create_app",
]
