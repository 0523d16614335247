"""
API Service - Business logic layer between API and engine.

The service:
1. Authenticates the caller from the auth token
2. Translates validated requests into session transitions
3. Redacts game snapshots for the caller

This layer is framework-agnostic (can be used with FastAPI, Flask, etc.).
Failures are raised as posse.errors exceptions; the transport maps them.
"""

from __future__ import annotations
from dataclasses import dataclass, field

from ..auth import AccountService
from ..engine_core.action import Action
from ..engine_core.state import Card, GameState, PlayerState
from ..session import SessionManager
from .schemas import (
    AuthorizeRequest,
    CardInfo,
    CharacterInfo,
    GameCreatedResponse,
    GameListResponse,
    GameResponse,
    GameStatus,
    GameSummary,
    IdentityInfo,
    LifeRequest,
    LoginRequest,
    LoginResponse,
    LogInfo,
    MoveCardRequest,
    PlayerInfo,
    SignupRequest,
    SignupResponse,
)


@dataclass
class APIService:
    """
    Main API service.

    Usage:
        service = APIService()

        service.signup(SignupRequest(name="alice", password="secret"))
        token = service.login(LoginRequest(name="alice", password="secret")).token

        game_id = service.create_game(token).id
        service.join(token, game_id)
    """
    session_manager: SessionManager = field(default_factory=SessionManager)
    accounts: AccountService = field(default_factory=AccountService)

    # =========================================================================
    # Accounts
    # =========================================================================

    def signup(self, request: SignupRequest) -> SignupResponse:
        identity = self.accounts.signup(request.name, request.password)
        return SignupResponse(id=identity.id, name=identity.name)

    def login(self, request: LoginRequest) -> LoginResponse:
        token = self.accounts.login(request.name, request.password)
        return LoginResponse(token=token, expires_in=self.accounts.token_ttl)

    # =========================================================================
    # Games
    # =========================================================================

    def create_game(self, token: str | None) -> GameCreatedResponse:
        actor = self.accounts.authenticate(token)
        game = self.session_manager.create_game(actor)
        return GameCreatedResponse(id=game.id)

    def get_game(self, token: str | None, game_id: int) -> GameResponse:
        actor = self.accounts.authenticate(token)
        return game_view(self.session_manager.get_game(game_id), actor.name)

    def list_games(self, token: str | None) -> GameListResponse:
        self.accounts.authenticate(token)
        games = [game_summary(g) for g in self.session_manager.list_games()]
        return GameListResponse(games=games, count=len(games))

    def join(self, token: str | None, game_id: int) -> GameResponse:
        actor = self.accounts.authenticate(token)
        return game_view(self.session_manager.request_join(game_id, actor), actor.name)

    def authorize(self, token: str | None, game_id: int, request: AuthorizeRequest) -> GameResponse:
        actor = self.accounts.authenticate(token)
        game = self.session_manager.authorize(game_id, actor, request.user_id)
        return game_view(game, actor.name)

    def leave(self, token: str | None, game_id: int, username: str) -> GameResponse:
        actor = self.accounts.authenticate(token)
        return game_view(self.session_manager.leave(game_id, actor, username), actor.name)

    def start(self, token: str | None, game_id: int) -> GameResponse:
        actor = self.accounts.authenticate(token)
        return game_view(self.session_manager.start(game_id, actor), actor.name)

    # =========================================================================
    # Turn actions
    # =========================================================================

    def change_life(
        self,
        token: str | None,
        game_id: int,
        player_name: str,
        request: LifeRequest,
    ) -> GameResponse:
        actor = self.accounts.authenticate(token)
        action = Action.change_life(actor.name, player_name, request.delta)
        return game_view(self.session_manager.act(game_id, action), actor.name)

    def move_card(self, token: str | None, game_id: int, request: MoveCardRequest) -> GameResponse:
        actor = self.accounts.authenticate(token)
        action = Action.move_card(
            actor.name,
            from_zone=request.from_zone,
            to_zone=request.to_zone,
            card_index=request.card_index,
            from_player=request.from_player,
            to_player=request.to_player,
        )
        return game_view(self.session_manager.act(game_id, action), actor.name)

    def reveal(self, token: str | None, game_id: int) -> GameResponse:
        actor = self.accounts.authenticate(token)
        game = self.session_manager.act(game_id, Action.reveal(actor.name))
        return game_view(game, actor.name)

    def end_turn(self, token: str | None, game_id: int) -> GameResponse:
        actor = self.accounts.authenticate(token)
        game = self.session_manager.act(game_id, Action.end_turn(actor.name))
        return game_view(game, actor.name)

    def finish(self, token: str | None, game_id: int) -> GameResponse:
        actor = self.accounts.authenticate(token)
        return game_view(self.session_manager.finish(game_id, actor), actor.name)


# =============================================================================
# Conversion Helpers
# =============================================================================

def _card_info(card: Card) -> CardInfo:
    return CardInfo(
        card_id=card.card_id,
        name=card.name,
        suit=card.suit,
        rank=card.rank,
        color=card.color,
    )


def _player_info(player: PlayerState, viewer: str) -> PlayerInfo:
    """Player as `viewer` may see them: own hand and revealed roles only."""
    is_self = player.name == viewer
    return PlayerInfo(
        name=player.name,
        role=player.role.name.value if (player.is_revealed or is_self) else None,
        character=CharacterInfo(
            name=player.character.name,
            base_life=player.character.base_life,
        ),
        life=player.life,
        max_life=player.max_life,
        is_revealed=player.is_revealed,
        is_active=player.is_active,
        hand_count=len(player.cards_in_hand),
        cards_in_hand=[_card_info(c) for c in player.cards_in_hand] if is_self else None,
        inventory_cards=[_card_info(c) for c in player.inventory_cards],
        played_cards=[_card_info(c) for c in player.played_cards],
    )


def game_view(game: GameState, viewer: str) -> GameResponse:
    """Convert a game to its API snapshot, redacted for `viewer`."""
    return GameResponse(
        id=game.id,
        admin=game.admin,
        status=GameStatus(game.phase.value),
        has_started=game.has_started,
        joined_users=[IdentityInfo(id=u.id, name=u.name) for u in game.joined_users],
        requests=[IdentityInfo(id=u.id, name=u.name) for u in game.requests],
        players=[_player_info(p, viewer) for p in game.players],
        community_cards=[_card_info(c) for c in game.community_cards],
        used_cards=[_card_info(c) for c in game.used_cards],
        unused_count=len(game.unused_cards),
        logs=[
            LogInfo(actor=e.actor, action=e.action, message=e.message, timestamp=e.timestamp)
            for e in game.logs
        ],
        created_at=game.created_at,
    )


def game_summary(game: GameState) -> GameSummary:
    return GameSummary(
        id=game.id,
        admin=game.admin,
        status=GameStatus(game.phase.value),
        has_started=game.has_started,
        joined_count=len(game.joined_users),
        request_count=len(game.requests),
        player_count=len(game.players),
    )
