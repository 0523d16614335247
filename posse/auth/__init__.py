"""
Auth Module - Accounts and identity tokens.

Supplies the authenticated identity for every transition:
- signup: unique, case-sensitive names
- login: signed token, valid for one hour by default
- authenticate: token -> Identity, or Unauthorized
"""

from .accounts import Account, AccountService, check_password, hash_password
from .tokens import issue_token, verify_token

__all__ = [
    "Account",
    "AccountService",
    "check_password",
    "hash_password",
    "issue_token",
    "verify_token",
]
