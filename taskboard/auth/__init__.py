"""Authentication / authorization helpers.

Auth is intentionally lightweight:

- Two account partitions (users / admins) with pbkdf2 password hashes
- Opaque bearer tokens kept in an in-process session registry

Clients send `Authorization: Bearer <token>` on every protected call.
Tokens never expire and are forgotten when the process restarts.
"""

from .crud import ensure_seed_admin, login, provision, register
from .deps import AuthContext, Gate, bearer_token
from .sessions import Session, SessionRegistry

__all__ = [
    "AuthContext",
    "Gate",
    "Session",
    "SessionRegistry",
    "bearer_token",
    "ensure_seed_admin",
    "login",
    "provision",
    "register",
]
