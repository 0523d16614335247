"""
Session Manager - Game session lifecycle.

LIFECYCLE:
1. An authenticated user creates a game -> becomes its admin (RECRUITING)
2. Users request to join; the admin's own join is approved on the spot
3. The admin authorizes pending requests (requests -> joined_users)
4. Users may leave, the admin may kick joined users
5. The admin starts the game with 4-7 joined users (ACTIVE, irreversible):
   roles and characters are assigned in join order, hands are dealt
6. Turn actions go through the reducer until the game is finished (FINISHED)

Every transition is one SessionStore.update() call: the game is validated
and mutated on a private copy inside the game's critical section and
persisted once. A transition that fails leaves storage untouched.
"""

from __future__ import annotations
import logging
import random

from ..config import LifePolicy
from ..engine_core.action import Action
from ..engine_core.reducer import Reducer
from ..engine_core.state import GamePhase, GameState, Identity
from ..errors import Forbidden, InvalidPlayerCount, InvalidState, PlayerNotFound, RequestNotFound
from ..games.bang.cards import MAX_PLAYERS, MIN_PLAYERS
from ..games.bang.setup import deal_players
from .store import SessionStore

logger = logging.getLogger("posse.session")


class SessionManager:
    """
    Manages game sessions.

    Responsibilities:
    - Create games and arbitrate joins
    - Start games (deal)
    - Route turn actions to the reducer
    - List and look up games (reads never wait for writers' transitions)
    """

    def __init__(
        self,
        store: SessionStore | None = None,
        life_policy: LifePolicy = LifePolicy.REJECT,
        rng: random.Random | None = None,
    ):
        self.store = store or SessionStore()
        self.rng = rng or random.Random()
        self.reducer = Reducer(life_policy=life_policy, rng=self.rng)

    # =========================================================================
    # Reads
    # =========================================================================

    def get_game(self, game_id: int) -> GameState:
        """Get a game by ID. Raises SessionNotFound."""
        return self.store.get(game_id)

    def list_games(self) -> list[GameState]:
        """List every game."""
        return self.store.list_all()

    # =========================================================================
    # Transitions
    # =========================================================================

    def create_game(self, actor: Identity) -> GameState:
        """Create a new game administered by `actor`."""
        game = self.store.create(lambda game_id: GameState(id=game_id, admin=actor.name))
        logger.info("Game %s created by %s", game.id, actor.name)
        return game

    def request_join(self, game_id: int, actor: Identity) -> GameState:
        """
        Ask to join a game.

        Idempotent: asking again while pending or joined changes nothing.
        The admin is approved immediately.
        """
        def mutate(game: GameState) -> GameState | None:
            if game.is_known(actor.name):
                return None
            if game.has_started:
                raise InvalidState(f"Game {game_id} has already started")

            if actor.name == game.admin:
                game.joined_users.append(actor)
            else:
                game.requests.append(actor)
            return game

        game = self.store.update(game_id, mutate)
        logger.info("Game %s: join from %s", game_id, actor.name)
        return game

    def authorize(self, game_id: int, actor: Identity, user_id: int) -> GameState:
        """Admin approves a pending join request."""
        def mutate(game: GameState) -> GameState:
            self._require_admin(game, actor, "authorize players")
            if game.has_started:
                raise InvalidState(f"Game {game_id} has already started")

            user = game.find_request(user_id)
            if user is None:
                raise RequestNotFound(user_id)

            game.requests = [u for u in game.requests if u.id != user_id]
            game.joined_users.append(user)
            logger.info("Game %s: %s authorized %s", game_id, actor.name, user.name)
            return game

        return self.store.update(game_id, mutate)

    def leave(self, game_id: int, actor: Identity, target_name: str) -> GameState:
        """
        Remove a joined user.

        Users may remove themselves; the admin may remove anyone.
        Pending requests are not touched.
        """
        def mutate(game: GameState) -> GameState:
            if actor.name != target_name and actor.name != game.admin:
                logger.warning(
                    "Game %s: %s tried to remove %s", game_id, actor.name, target_name
                )
                raise Forbidden(f"{actor.name} cannot remove {target_name}")

            if game.find_joined(target_name) is None:
                raise PlayerNotFound(target_name)

            game.joined_users = [u for u in game.joined_users if u.name != target_name]
            logger.info("Game %s: %s left (removed by %s)", game_id, target_name, actor.name)
            return game

        return self.store.update(game_id, mutate)

    def start(self, game_id: int, actor: Identity) -> GameState:
        """
        Start the game: assign roles and characters, deal hands.

        Roles and characters are handed out in the stored order of
        joined_users. The Sheriff starts revealed and takes the first turn.
        """
        def mutate(game: GameState) -> GameState:
            self._require_admin(game, actor, "start the game")
            if game.has_started:
                raise InvalidState(f"Game {game_id} has already started")

            count = len(game.joined_users)
            if not MIN_PLAYERS <= count <= MAX_PLAYERS:
                logger.warning("Game %s: cannot start with %d players", game_id, count)
                raise InvalidPlayerCount(count, MIN_PLAYERS, MAX_PLAYERS)

            players, remainder = deal_players(game.joined_users, self.rng)

            game.requests = []
            game.players = players
            game.joined_users = []
            game.unused_cards = remainder
            game.phase = GamePhase.ACTIVE

            sheriff = next(p for p in players if p.is_sheriff)
            game.log(actor.name, "start", f"Game started with {count} players, {sheriff.name} is the Sheriff")
            return game

        game = self.store.update(game_id, mutate)
        logger.info("Game %s started", game_id)
        return game

    def act(self, game_id: int, action: Action) -> GameState:
        """Apply a turn action through the reducer."""
        def mutate(game: GameState) -> GameState | None:
            result = self.reducer.apply(game, action)
            return result.new_state if result.changed else None

        return self.store.update(game_id, mutate)

    def finish(self, game_id: int, actor: Identity) -> GameState:
        """End the game. Finishing a finished game is a no-op."""
        return self.act(game_id, Action.finish(actor.name))

    # =========================================================================
    # Helpers
    # =========================================================================

    @staticmethod
    def _require_admin(game: GameState, actor: Identity, what: str) -> None:
        if actor.name != game.admin:
            logger.warning("Game %s: %s tried to %s", game.id, actor.name, what)
            raise Forbidden(f"Only the admin can {what}")
