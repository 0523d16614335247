"""
Session Module - Game session lifecycle and storage.

A session is one table of Bang!:
- Created by an authenticated user, who becomes its admin
- Recruits players through admin-approved join requests
- Starts once, dealing roles, characters and cards
- Finishes on the admin's word or when a side has won

Sessions are persisted as one `games` collection. Every transition is a
single atomic read-modify-write of one game.
"""

from .manager import SessionManager
from .store import (
    CollectionStore,
    JsonCollectionStore,
    MemoryCollectionStore,
    SessionStore,
    TypedCollection,
)

__all__ = [
    "SessionManager",
    "CollectionStore",
    "JsonCollectionStore",
    "MemoryCollectionStore",
    "SessionStore",
    "TypedCollection",
]
