"""
Pytest fixtures for Posse tests.
"""

import random

import pytest

from posse.auth import AccountService
from posse.config import LifePolicy
from posse.engine_core.state import GameState, Identity
from posse.session import MemoryCollectionStore, SessionManager, SessionStore


@pytest.fixture
def users() -> list[Identity]:
    """Eight registered identities; the first one administers games."""
    names = ["alice", "bob", "carol", "dave", "erin", "frank", "grace", "heidi"]
    return [Identity(id=i, name=name) for i, name in enumerate(names, start=1)]


@pytest.fixture
def admin(users) -> Identity:
    return users[0]


@pytest.fixture
def backend() -> MemoryCollectionStore:
    return MemoryCollectionStore()


@pytest.fixture
def manager(backend) -> SessionManager:
    """Session manager over in-memory storage with a seeded shuffle."""
    return SessionManager(store=SessionStore(backend), rng=random.Random(1234))


@pytest.fixture
def accounts(backend) -> AccountService:
    return AccountService(backend, secret="test-secret", token_ttl=3600)


def recruit(manager: SessionManager, admin: Identity, others: list[Identity]) -> GameState:
    """Create a game with the admin and `others` all joined, in that order."""
    game = manager.create_game(admin)
    manager.request_join(game.id, admin)
    for user in others:
        manager.request_join(game.id, user)
        manager.authorize(game.id, admin, user.id)
    return manager.get_game(game.id)


@pytest.fixture
def recruiting_game(manager, admin, users) -> GameState:
    """A game with four joined users, not started."""
    return recruit(manager, admin, users[1:4])


@pytest.fixture
def started_game(manager, admin, recruiting_game) -> GameState:
    """A dealt four-player game."""
    return manager.start(recruiting_game.id, admin)


def make_manager(backend, life_policy: LifePolicy) -> SessionManager:
    return SessionManager(
        store=SessionStore(backend),
        life_policy=life_policy,
        rng=random.Random(99),
    )
