"""In-memory session registry.

Tokens are opaque and carry no data; the account id and role stay
server-side. Sessions are never persisted and never expire: a token is valid
until the process exits. There is no logout/revocation.
"""

from __future__ import annotations

import secrets
import threading
from dataclasses import dataclass
from typing import Dict, Optional

from taskboard.util.time import now_ms


@dataclass(frozen=True)
class Session:
    token: str
    account_id: str
    role: str
    issued_at: int


class SessionRegistry:
    def __init__(self) -> None:
        self._data: Dict[str, Session] = {}
        self._lock = threading.Lock()

    def issue(self, account_id: str, role: str) -> str:
        token = secrets.token_urlsafe(32)
        rec = Session(token=token, account_id=account_id, role=role, issued_at=now_ms())
        with self._lock:
            self._data[token] = rec
        return token

    def resolve(self, token: str | None) -> Optional[Session]:
        if not token:
            return None
        with self._lock:
            return self._data.get(token)

    def __len__(self) -> int:
        with self._lock:
            return len(self._data)
