"""
FastAPI Application - REST API for game clients.

Endpoints:
    POST   /api/v1/signup                          Register an account
    POST   /api/v1/login                           Get an auth token
    POST   /api/v1/games                           Create a game (caller is admin)
    GET    /api/v1/games                           List games
    GET    /api/v1/games/{id}                      Get a game snapshot
    POST   /api/v1/games/{id}/join                 Request to join
    POST   /api/v1/games/{id}/authorize            Admin approves a request
    DELETE /api/v1/games/{id}/players/{name}       Leave / kick
    POST   /api/v1/games/{id}/start                Admin deals the game
    POST   /api/v1/games/{id}/players/{name}/life  +1 / -1 life
    POST   /api/v1/games/{id}/move                 Move a card between zones
    POST   /api/v1/games/{id}/reveal               Reveal own role
    POST   /api/v1/games/{id}/end-turn             Pass the turn
    DELETE /api/v1/games/{id}/finish               End the game

The caller is identified by the `auth` header (token from /login).
All responses are JSON with explicit Pydantic schemas; failures use
ErrorResponse with a machine-readable error_code.

Run with: uvicorn posse.api.app:create_app --factory
"""

from typing import Annotated, Optional
import logging

from fastapi import FastAPI, Header, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .. import __version__
from ..auth import AccountService
from ..config import Settings
from ..errors import ErrorCode, PosseError
from ..session import JsonCollectionStore, SessionManager, SessionStore
from .schemas import (
    AuthorizeRequest,
    ErrorResponse,
    GameCreatedResponse,
    GameListResponse,
    GameResponse,
    HealthResponse,
    LifeRequest,
    LoginRequest,
    LoginResponse,
    MoveCardRequest,
    SignupRequest,
    SignupResponse,
)
from .service import APIService

logger = logging.getLogger("posse.api")

STATUS_CODES: dict[ErrorCode, int] = {
    ErrorCode.UNAUTHORIZED: 401,
    ErrorCode.FORBIDDEN: 403,
    ErrorCode.SESSION_NOT_FOUND: 404,
    ErrorCode.PLAYER_NOT_FOUND: 404,
    ErrorCode.REQUEST_NOT_FOUND: 404,
    ErrorCode.NAME_TAKEN: 409,
    ErrorCode.INVALID_STATE: 409,
    ErrorCode.INVALID_PLAYER_COUNT: 409,
    ErrorCode.UNSUPPORTED_PLAYER_COUNT: 409,
    ErrorCode.INSUFFICIENT_CARDS: 409,
    ErrorCode.CATALOG_EXHAUSTED: 409,
    ErrorCode.INVALID_INPUT: 400,
    ErrorCode.PERSISTENCE_FAILURE: 500,
}

AuthHeader = Annotated[Optional[str], Header(description="Token from /api/v1/login")]

ERROR_RESPONSES = {
    400: {"model": ErrorResponse, "description": "Malformed request"},
    401: {"model": ErrorResponse, "description": "Missing or invalid token"},
    403: {"model": ErrorResponse, "description": "Not permitted"},
    404: {"model": ErrorResponse, "description": "Game, player or request not found"},
    409: {"model": ErrorResponse, "description": "Not allowed in the current state"},
}


def build_service(settings: Settings) -> APIService:
    """Wire the service to JSON collections under settings.data_dir."""
    backend = JsonCollectionStore(settings.data_dir)
    return APIService(
        session_manager=SessionManager(
            store=SessionStore(backend),
            life_policy=settings.life_policy,
        ),
        accounts=AccountService(
            backend,
            secret=settings.secret,
            token_ttl=settings.token_ttl,
        ),
    )


def create_app(service: APIService | None = None, settings: Settings | None = None) -> FastAPI:
    """
    Create the FastAPI application.

    Args:
        service: Optional APIService instance (built from settings if not provided)
        settings: Optional Settings (read from the environment if not provided)

    Returns:
        FastAPI application instance
    """
    settings = settings or Settings.from_env()
    api_service = service or build_service(settings)

    app = FastAPI(
        title="Posse API",
        description="Bang! game sessions: join, authorize, deal and play.",
        version=__version__,
        docs_url="/api/docs",
        redoc_url="/api/redoc",
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.allowed_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # =========================================================================
    # Error handling
    # =========================================================================

    @app.exception_handler(PosseError)
    async def handle_posse_error(request: Request, exc: PosseError) -> JSONResponse:
        status_code = STATUS_CODES.get(exc.error_code, 400)
        if status_code >= 500:
            logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
        return JSONResponse(
            status_code=status_code,
            content=ErrorResponse(
                error=exc.message,
                error_code=exc.error_code,
                details=exc.details or None,
                retryable=exc.retryable,
            ).model_dump(mode="json"),
        )

    @app.exception_handler(RequestValidationError)
    async def handle_validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
        errors = [
            {"loc": [str(part) for part in e["loc"]], "msg": e["msg"], "type": e["type"]}
            for e in exc.errors()
        ]
        return JSONResponse(
            status_code=STATUS_CODES[ErrorCode.INVALID_INPUT],
            content=ErrorResponse(
                error="Invalid request",
                error_code=ErrorCode.INVALID_INPUT,
                details={"errors": errors},
            ).model_dump(mode="json"),
        )

    # =========================================================================
    # Account Endpoints
    # =========================================================================

    @app.post(
        "/api/v1/signup",
        response_model=SignupResponse,
        responses={409: {"model": ErrorResponse, "description": "Name taken"}},
        tags=["Accounts"],
        summary="Register an account",
    )
    def signup(body: SignupRequest) -> SignupResponse:
        return api_service.signup(body)

    @app.post(
        "/api/v1/login",
        response_model=LoginResponse,
        responses={401: {"model": ErrorResponse}},
        tags=["Accounts"],
        summary="Get an auth token",
    )
    def login(body: LoginRequest) -> LoginResponse:
        return api_service.login(body)

    # =========================================================================
    # Game Endpoints
    # =========================================================================

    @app.post(
        "/api/v1/games",
        response_model=GameCreatedResponse,
        responses=ERROR_RESPONSES,
        tags=["Games"],
        summary="Create a game",
    )
    def create_game(auth: AuthHeader = None) -> GameCreatedResponse:
        """Create a game. The caller becomes its admin."""
        return api_service.create_game(auth)

    @app.get(
        "/api/v1/games",
        response_model=GameListResponse,
        responses=ERROR_RESPONSES,
        tags=["Games"],
        summary="List games",
    )
    def list_games(auth: AuthHeader = None) -> GameListResponse:
        return api_service.list_games(auth)

    @app.get(
        "/api/v1/games/{game_id}",
        response_model=GameResponse,
        responses=ERROR_RESPONSES,
        tags=["Games"],
        summary="Get a game snapshot",
    )
    def get_game(game_id: int, auth: AuthHeader = None) -> GameResponse:
        """Hidden roles and other players' hands are redacted."""
        return api_service.get_game(auth, game_id)

    @app.post(
        "/api/v1/games/{game_id}/join",
        response_model=GameResponse,
        responses=ERROR_RESPONSES,
        tags=["Games"],
        summary="Request to join a game",
    )
    def join_game(game_id: int, auth: AuthHeader = None) -> GameResponse:
        """Idempotent. The admin joins directly, everyone else waits for approval."""
        return api_service.join(auth, game_id)

    @app.post(
        "/api/v1/games/{game_id}/authorize",
        response_model=GameResponse,
        responses=ERROR_RESPONSES,
        tags=["Games"],
        summary="Approve a join request",
    )
    def authorize(game_id: int, body: AuthorizeRequest, auth: AuthHeader = None) -> GameResponse:
        return api_service.authorize(auth, game_id, body)

    @app.delete(
        "/api/v1/games/{game_id}/players/{username}",
        response_model=GameResponse,
        responses=ERROR_RESPONSES,
        tags=["Games"],
        summary="Leave a game or remove a player",
    )
    def leave_game(game_id: int, username: str, auth: AuthHeader = None) -> GameResponse:
        return api_service.leave(auth, game_id, username)

    @app.post(
        "/api/v1/games/{game_id}/start",
        response_model=GameResponse,
        responses=ERROR_RESPONSES,
        tags=["Games"],
        summary="Deal the game",
    )
    def start_game(game_id: int, auth: AuthHeader = None) -> GameResponse:
        """Needs 4-7 joined players. Cannot be undone."""
        return api_service.start(auth, game_id)

    # =========================================================================
    # Turn Action Endpoints
    # =========================================================================

    @app.post(
        "/api/v1/games/{game_id}/players/{player_name}/life",
        response_model=GameResponse,
        responses=ERROR_RESPONSES,
        tags=["Actions"],
        summary="Change a player's life by one",
    )
    def change_life(
        game_id: int,
        player_name: str,
        body: LifeRequest,
        auth: AuthHeader = None,
    ) -> GameResponse:
        return api_service.change_life(auth, game_id, player_name, body)

    @app.post(
        "/api/v1/games/{game_id}/move",
        response_model=GameResponse,
        responses=ERROR_RESPONSES,
        tags=["Actions"],
        summary="Move a card between zones",
    )
    def move_card(game_id: int, body: MoveCardRequest, auth: AuthHeader = None) -> GameResponse:
        return api_service.move_card(auth, game_id, body)

    @app.post(
        "/api/v1/games/{game_id}/reveal",
        response_model=GameResponse,
        responses=ERROR_RESPONSES,
        tags=["Actions"],
        summary="Reveal your role",
    )
    def reveal(game_id: int, auth: AuthHeader = None) -> GameResponse:
        return api_service.reveal(auth, game_id)

    @app.post(
        "/api/v1/games/{game_id}/end-turn",
        response_model=GameResponse,
        responses=ERROR_RESPONSES,
        tags=["Actions"],
        summary="Pass the turn",
    )
    def end_turn(game_id: int, auth: AuthHeader = None) -> GameResponse:
        return api_service.end_turn(auth, game_id)

    @app.delete(
        "/api/v1/games/{game_id}/finish",
        response_model=GameResponse,
        responses=ERROR_RESPONSES,
        tags=["Actions"],
        summary="End the game",
    )
    def finish(game_id: int, auth: AuthHeader = None) -> GameResponse:
        """The admin can always finish; players once a side has won."""
        return api_service.finish(auth, game_id)

    # =========================================================================
    # Health Check
    # =========================================================================

    @app.get(
        "/health",
        response_model=HealthResponse,
        tags=["System"],
        summary="Health check",
    )
    def health_check() -> HealthResponse:
        """Health check endpoint for load balancers."""
        return HealthResponse(status="healthy", service="posse", version=__version__)

    return app
