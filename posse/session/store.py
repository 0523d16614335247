"""
Session Store - Persistence collaborator and transactional updates.

The persistence layer only knows whole collections:
- load(name) -> list of JSON-ready dicts
- save(name, items) -> replaces the whole collection

On top of that, SessionStore gives the state machine a per-game
read-modify-write contract:

    store.update(game_id, mutate)

1. Check the game exists, then take its lock (held for the whole transition)
2. Load the collection, pick the game, hand a deep copy to `mutate`
3. Re-load the collection, replace only that game, save everything

Two transitions on the same game are serialized by the game lock.
Transitions on different games run independently but their collection
writes are serialized by the collection lock, and each write starts from a
fresh read, so no update to another game is ever overwritten.

Implementations:
- JsonCollectionStore: one JSON file per collection (production)
- MemoryCollectionStore: in-memory collections (testing)
"""

from __future__ import annotations
from pathlib import Path
from typing import Any, Callable, Protocol, TypeVar, runtime_checkable
import copy
import json
import logging
import os
import tempfile
import threading
import weakref

from pydantic import TypeAdapter, ValidationError

from ..engine_core.state import GameState
from ..errors import PersistenceFailure, SessionNotFound

logger = logging.getLogger("posse.store")

GAMES = "games"
USERS = "users"

T = TypeVar("T")


@runtime_checkable
class CollectionStore(Protocol):
    """
    Abstract whole-collection storage.

    Implementations raise PersistenceFailure when a collection cannot be
    read or written. A collection that was never saved loads as [].
    """

    def load(self, name: str) -> list[dict[str, Any]]:
        """Load every item of a collection."""
        ...

    def save(self, name: str, items: list[dict[str, Any]]) -> None:
        """Replace a collection with `items`."""
        ...


class JsonCollectionStore:
    """
    File-based collection storage using JSON.

    Features:
    - One `<name>.json` file per collection
    - Atomic writes (temp file in the same directory, then replace)
    """

    def __init__(self, data_dir: Path | str = "data"):
        self.data_dir = Path(data_dir)
        self.data_dir.mkdir(parents=True, exist_ok=True)

    def _path(self, name: str) -> Path:
        return self.data_dir / f"{name}.json"

    def load(self, name: str) -> list[dict[str, Any]]:
        path = self._path(name)
        if not path.exists():
            return []
        try:
            data = json.loads(path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as e:
            logger.error("Failed to load collection %s: %s", name, e)
            raise PersistenceFailure(f"Could not load {name}") from e
        if not isinstance(data, list):
            raise PersistenceFailure(f"Collection {name} is not a list")
        return data

    def save(self, name: str, items: list[dict[str, Any]]) -> None:
        path = self._path(name)
        try:
            fd, temp_path = tempfile.mkstemp(
                dir=self.data_dir,
                prefix=f".{name}_",
                suffix=".tmp",
            )
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as f:
                    json.dump(items, f, indent=2)
                Path(temp_path).replace(path)
            except Exception:
                Path(temp_path).unlink(missing_ok=True)
                raise
        except (OSError, TypeError, ValueError) as e:
            logger.error("Failed to save collection %s: %s", name, e)
            raise PersistenceFailure(f"Could not save {name}") from e


class MemoryCollectionStore:
    """
    In-memory collection storage for testing.

    Stores deep copies so callers can never alias stored data.
    """

    def __init__(self):
        self.collections: dict[str, list[dict[str, Any]]] = {}

    def load(self, name: str) -> list[dict[str, Any]]:
        return copy.deepcopy(self.collections.get(name, []))

    def save(self, name: str, items: list[dict[str, Any]]) -> None:
        self.collections[name] = copy.deepcopy(items)


class TypedCollection:
    """
    Typed view over one collection.

    Items are validated with a pydantic TypeAdapter on load and dumped to
    JSON-ready dicts on save.
    """

    def __init__(self, backend: CollectionStore, name: str, item_type: type[T]):
        self.backend = backend
        self.name = name
        self._adapter = TypeAdapter(list[item_type])
        self.lock = threading.RLock()

    def load(self) -> list:
        raw = self.backend.load(self.name)
        try:
            return self._adapter.validate_python(raw)
        except ValidationError as e:
            logger.error("Collection %s failed validation: %s", self.name, e)
            raise PersistenceFailure(f"Collection {self.name} is corrupt") from e

    def save(self, items: list) -> None:
        self.backend.save(self.name, self._adapter.dump_python(items, mode="json"))


class SessionStore:
    """
    Game persistence with per-game atomic updates.

    Usage:
        store = SessionStore(JsonCollectionStore("data"))

        game = store.create(lambda game_id: GameState(id=game_id, admin="alice"))

        def add_request(game):
            game.requests.append(user)
            return game

        store.update(game.id, add_request)
    """

    def __init__(self, backend: CollectionStore | None = None):
        self.games = TypedCollection(backend or MemoryCollectionStore(), GAMES, GameState)
        # A game's lock lives only while some transition holds a reference to it
        self._game_locks: weakref.WeakValueDictionary[int, threading.Lock] = (
            weakref.WeakValueDictionary()
        )
        self._locks_guard = threading.Lock()

    def _lock_for(self, game_id: int) -> threading.Lock:
        with self._locks_guard:
            lock = self._game_locks.get(game_id)
            if lock is None:
                lock = threading.Lock()
                self._game_locks[game_id] = lock
            return lock

    def get(self, game_id: int) -> GameState:
        """Load one game. Raises SessionNotFound."""
        with self.games.lock:
            games = self.games.load()
        for game in games:
            if game.id == game_id:
                return game
        raise SessionNotFound(game_id)

    def list_all(self) -> list[GameState]:
        """Load every game."""
        with self.games.lock:
            return self.games.load()

    def create(self, factory: Callable[[int], GameState]) -> GameState:
        """Append a new game built by `factory(next_id)`."""
        with self.games.lock:
            games = self.games.load()
            next_id = max((g.id for g in games), default=0) + 1
            game = factory(next_id)
            games.append(game)
            self.games.save(games)
        return game

    def update(
        self,
        game_id: int,
        mutate: Callable[[GameState], GameState | None],
    ) -> GameState:
        """
        Atomically read, modify and write back one game.

        `mutate` receives a private copy of the game. It returns the new
        game, or None to leave storage untouched (no-op transitions). If it
        raises, nothing is written.

        Returns:
            The stored game after the transition

        Raises:
            SessionNotFound: before any lock is taken for an unknown id
        """
        self.get(game_id)
        with self._lock_for(game_id):
            current = self.get(game_id)
            updated = mutate(current.clone())
            if updated is None:
                return current

            with self.games.lock:
                games = self.games.load()
                for i, game in enumerate(games):
                    if game.id == game_id:
                        games[i] = updated
                        break
                else:
                    raise SessionNotFound(game_id)
                self.games.save(games)
            return updated
