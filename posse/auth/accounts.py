"""
Accounts - Signup, login and request authentication.

Accounts live in the `users` collection. Only the account service ever
sees password hashes; everything else works with Identity (id + name).
"""

from __future__ import annotations
from dataclasses import dataclass
import hashlib
import hmac
import logging
import secrets

from ..engine_core.state import Identity
from ..errors import NameTaken, Unauthorized
from ..session.store import USERS, CollectionStore, MemoryCollectionStore, TypedCollection
from .tokens import issue_token, verify_token

logger = logging.getLogger("posse.auth")

# scrypt cost parameters
_N, _R, _P = 2 ** 14, 8, 1


@dataclass
class Account:
    """A registered user with credentials."""
    id: int
    name: str
    password_hash: str

    def identity(self) -> Identity:
        return Identity(id=self.id, name=self.name)


def hash_password(password: str) -> str:
    """Hash a password with a random salt."""
    salt = secrets.token_bytes(16)
    digest = hashlib.scrypt(password.encode(), salt=salt, n=_N, r=_R, p=_P)
    return f"scrypt${_N}${_R}${_P}${salt.hex()}${digest.hex()}"


def check_password(password: str, password_hash: str) -> bool:
    """Check a password against a stored hash."""
    try:
        scheme, n, r, p, salt, expected = password_hash.split("$")
    except ValueError:
        return False
    if scheme != "scrypt":
        return False
    digest = hashlib.scrypt(
        password.encode(), salt=bytes.fromhex(salt), n=int(n), r=int(r), p=int(p)
    )
    return hmac.compare_digest(digest.hex(), expected)


class AccountService:
    """
    Identity collaborator for the session server.

    Usage:
        accounts = AccountService(backend, secret="...")
        accounts.signup("alice", "hunter2")
        token = accounts.login("alice", "hunter2")
        identity = accounts.authenticate(token)
    """

    def __init__(
        self,
        backend: CollectionStore | None = None,
        secret: str = "posse-development-secret",
        token_ttl: int = 3600,
    ):
        self.users = TypedCollection(backend or MemoryCollectionStore(), USERS, Account)
        self.secret = secret
        self.token_ttl = token_ttl

    def _find(self, name: str) -> Account | None:
        with self.users.lock:
            accounts = self.users.load()
        for account in accounts:
            if account.name == name:
                return account
        return None

    def signup(self, name: str, password: str) -> Identity:
        """Register a new account. Raises NameTaken."""
        password_hash = hash_password(password)
        with self.users.lock:
            accounts = self.users.load()
            if any(a.name == name for a in accounts):
                raise NameTaken(name)
            account = Account(
                id=max((a.id for a in accounts), default=0) + 1,
                name=name,
                password_hash=password_hash,
            )
            accounts.append(account)
            self.users.save(accounts)

        logger.info("Account %s registered (id=%s)", name, account.id)
        return account.identity()

    def login(self, name: str, password: str) -> str:
        """Check credentials and issue a token. Raises Unauthorized."""
        account = self._find(name)
        if account is None or not check_password(password, account.password_hash):
            logger.warning("Failed login for %s", name)
            raise Unauthorized("Invalid name or password")
        return issue_token(account.name, self.secret, self.token_ttl)

    def authenticate(self, token: str | None) -> Identity:
        """Resolve a token to the identity of the caller. Raises Unauthorized."""
        if not token:
            raise Unauthorized("Missing auth token")

        name = verify_token(token, self.secret)
        if name is None:
            raise Unauthorized("Invalid or expired auth token")

        account = self._find(name)
        if account is None:
            raise Unauthorized("Unknown user")
        return account.identity()
