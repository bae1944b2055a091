from __future__ import annotations

from contextlib import contextmanager
from dataclasses import dataclass
from typing import Any, Callable, Dict, Iterator, List, Optional

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from taskboard.errors import Forbidden, InternalError, InvalidToken, MissingToken
from taskboard.store import ROLE_ADMIN, Store

from .sessions import SessionRegistry


_bearer = HTTPBearer(auto_error=False)


@dataclass
class AuthContext:
    """Everything a handler needs to mutate the caller's record and save it.

    `partition` is the freshly loaded list that `account` belongs to;
    `writer()` rewrites that whole partition to disk.
    """

    account: Dict[str, Any]
    partition: List[Dict[str, Any]]
    role: str
    writer: Callable[[], None]


class Gate:
    def __init__(self, store: Store, sessions: SessionRegistry) -> None:
        self._store = store
        self._sessions = sessions

    @contextmanager
    def authenticate(self, token: Optional[str], require_role: Optional[str] = None) -> Iterator[AuthContext]:
        """Resolve a bearer token to the live account record.

        The session's partition stays locked for the duration of the `with`
        block, so load -> mutate -> writer() cannot interleave with another
        request touching the same partition.
        """
        if not token:
            raise MissingToken()

        session = self._sessions.resolve(token)
        if session is None:
            raise InvalidToken()

        role = session.role
        with self._store.locked(role):
            # Always re-read: the store is the source of truth, not the session.
            partition = self._store.load_partition(role)
            account = next((a for a in partition if a.get("id") == session.account_id), None)
            if account is None:
                raise InvalidToken()

            if require_role == ROLE_ADMIN and role != ROLE_ADMIN:
                raise Forbidden()

            if not isinstance(account.get("todos"), list):
                account["todos"] = []

            def writer() -> None:
                self._store.save_partition(role, partition)

            yield AuthContext(
                account=account,
                partition=partition,
                role=role,
                writer=writer,
            )


def bearer_token(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(_bearer),
) -> Optional[str]:
    """Extract the raw token from `Authorization: Bearer <token>`, if any."""
    if credentials is None or not credentials.credentials:
        return None
    return credentials.credentials


def _state(request: Request, name: str) -> Any:
    value = getattr(request.app.state, name, None)
    if value is None:
        raise InternalError()
    return value


def get_gate(request: Request) -> Gate:
    return _state(request, "gate")


def get_store(request: Request) -> Store:
    return _state(request, "store")


def get_sessions(request: Request) -> SessionRegistry:
    return _state(request, "sessions")
