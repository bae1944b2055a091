from __future__ import annotations

import json
import os
import tempfile
import threading
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Dict, Iterator, List, Optional, Tuple

from taskboard.errors import StoreCorruptError, StoreError
from taskboard.util.normalization import normalize_email


ROLE_USER = "user"
ROLE_ADMIN = "admin"
ROLES: Tuple[str, ...] = (ROLE_USER, ROLE_ADMIN)

# Lock acquisition order for operations spanning both partitions.
_LOCK_ORDER = {ROLE_USER: 0, ROLE_ADMIN: 1}

_PARTITION_FILES = {
    ROLE_USER: "users.json",
    ROLE_ADMIN: "admins.json",
}


def _debug(msg: str) -> None:
    print(f"[store] {msg}")


def _check_role(role: str) -> str:
    if role not in _PARTITION_FILES:
        raise ValueError(f"unknown_role: {role!r}")
    return role


class Store:
    """Role-partitioned account storage backed by two JSON files.

    - `users.json` holds regular accounts, `admins.json` privileged ones.
    - Each file is a JSON array of full account records (todos embedded).
    - The whole file is the unit of persistence: callers load the partition,
      mutate it in memory and save it back.

    Concurrency:
    - One `threading.Lock` per partition. Callers doing read-modify-write
      must hold it from load to save (see `locked`).
    - Writes go to a temp file in the same directory and are swapped in with
      `os.replace`, so a reader never sees a half-written partition.
    """

    def __init__(self, data_dir: str | Path) -> None:
        self._dir = Path(data_dir)
        self._locks: Dict[str, threading.Lock] = {role: threading.Lock() for role in ROLES}

        self._dir.mkdir(parents=True, exist_ok=True)
        for role in ROLES:
            path = self.path_for(role)
            if not path.exists():
                self._write(path, [])
                _debug(f"Created empty {role} partition at {path}")

        # Fail fast on unreadable partitions instead of treating them as empty.
        counts = {role: len(self.load_partition(role)) for role in ROLES}
        _debug(f"Store ready dir={self._dir} users={counts[ROLE_USER]} admins={counts[ROLE_ADMIN]}")

    @property
    def data_dir(self) -> Path:
        return self._dir

    def path_for(self, role: str) -> Path:
        return self._dir / _PARTITION_FILES[_check_role(role)]

    # ---- locking ----

    @contextmanager
    def locked(self, *roles: str) -> Iterator[None]:
        """Hold the locks of the given partitions, acquired in a fixed order."""
        ordered = sorted({_check_role(r) for r in roles}, key=lambda r: _LOCK_ORDER[r])
        acquired: List[threading.Lock] = []
        try:
            for role in ordered:
                lk = self._locks[role]
                lk.acquire()
                acquired.append(lk)
            yield
        finally:
            for lk in reversed(acquired):
                lk.release()

    # ---- partitions ----

    def load_partition(self, role: str) -> List[Dict[str, Any]]:
        path = self.path_for(role)
        try:
            raw = path.read_text(encoding="utf-8")
        except OSError as e:
            raise StoreError(f"{role} partition unreadable: {e}") from e

        try:
            data = json.loads(raw)
        except json.JSONDecodeError as e:
            raise StoreCorruptError(f"{role} partition is not valid JSON: {e}") from e

        if not isinstance(data, list) or not all(isinstance(x, dict) for x in data):
            raise StoreCorruptError(f"{role} partition is not a list of accounts")
        return data

    def save_partition(self, role: str, accounts: List[Dict[str, Any]]) -> None:
        path = self.path_for(role)
        try:
            self._write(path, accounts)
        except (OSError, TypeError, ValueError) as e:
            raise StoreError(f"{role} partition write failed: {e}") from e

    @staticmethod
    def _write(path: Path, accounts: List[Dict[str, Any]]) -> None:
        payload = json.dumps(accounts, indent=2, ensure_ascii=False)
        fd, tmp = tempfile.mkstemp(prefix=".tmp_", suffix=".json", dir=str(path.parent))
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(payload)
                f.write("\n")
                f.flush()
                os.fsync(f.fileno())
            os.replace(tmp, path)
        finally:
            if os.path.exists(tmp):
                os.remove(tmp)

    # ---- lookups ----

    def find_by_email(self, email: str) -> Optional[Tuple[str, Dict[str, Any]]]:
        """Return (role, account) for the first account using this email.

        Case-insensitive across both partitions. Only meant for uniqueness
        checks; authorization always resolves accounts by id.
        """
        e = normalize_email(email)
        if not e:
            return None
        for role in ROLES:
            for account in self.load_partition(role):
                if normalize_email(account.get("email")) == e:
                    return role, account
        return None
