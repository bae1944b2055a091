from __future__ import annotations

from typing import Any, Dict, List, Optional, Tuple

from taskboard.config import Config
from taskboard.errors import EmailInUse, InvalidCredentials, ValidationError
from taskboard.store import ROLE_ADMIN, ROLE_USER, ROLES, Store
from taskboard.util.ids import new_id
from taskboard.util.normalization import (
    clean_name,
    is_valid_email,
    is_valid_password,
    normalize_email,
)
from taskboard.util.time import now_ms

from .security import hash_password, verify_password
from .sessions import SessionRegistry


def _debug(msg: str) -> None:
    print(f"[auth] {msg}")


def public_profile(account: Dict[str, Any]) -> Dict[str, Any]:
    d = dict(account)
    d.pop("passwordHash", None)
    d["todos"] = list(d.get("todos") or [])
    return d


def _validate_account_fields(name: Any, email: Any, password: Any) -> Tuple[str, str]:
    """Return (trimmed name, normalized email) or raise ValidationError."""
    display_name = clean_name(name)
    if display_name is None:
        raise ValidationError()
    if not is_valid_email(email):
        raise ValidationError()
    if not is_valid_password(password):
        raise ValidationError()
    return display_name, normalize_email(email)


def create_account(
    store: Store,
    *,
    name: Any,
    email: Any,
    password: Any,
    role: str = ROLE_USER,
) -> Dict[str, Any]:
    """Validate, hash and append a new account to the partition for `role`.

    Returns the stored record (including passwordHash).
    """
    if role not in ROLES:
        raise ValidationError()
    display_name, e = _validate_account_fields(name, email, password)

    # Hash before taking any lock; it is the slow part.
    password_hash = hash_password(password)

    # Both partitions stay locked so the uniqueness check and the append
    # cannot interleave with another creation.
    with store.locked(ROLE_USER, ROLE_ADMIN):
        if store.find_by_email(e) is not None:
            raise EmailInUse()

        account: Dict[str, Any] = {
            "id": new_id(),
            "name": display_name,
            "email": e,
            "passwordHash": password_hash,
            "role": role,
            "createdAt": now_ms(),
            "todos": [],
        }
        accounts = store.load_partition(role)
        accounts.append(account)
        store.save_partition(role, accounts)

    return account


def register(
    store: Store,
    sessions: SessionRegistry,
    *,
    name: Any,
    email: Any,
    password: Any,
) -> Tuple[str, Dict[str, Any]]:
    """Self-serve signup. Always creates a regular user and logs them in."""
    account = create_account(store, name=name, email=email, password=password, role=ROLE_USER)
    token = sessions.issue(account["id"], ROLE_USER)
    return token, public_profile(account)


def _find_for_login(store: Store, email: str) -> Optional[Tuple[str, Dict[str, Any]]]:
    # Regular users are checked first.
    for role in (ROLE_USER, ROLE_ADMIN):
        for account in store.load_partition(role):
            if normalize_email(account.get("email")) == email:
                return role, account
    return None


def login(
    store: Store,
    sessions: SessionRegistry,
    *,
    email: Any,
    password: Any,
) -> Tuple[str, Dict[str, Any]]:
    if not is_valid_email(email) or not is_valid_password(password):
        raise ValidationError()

    found = _find_for_login(store, normalize_email(email))
    if found is None:
        raise InvalidCredentials()

    role, account = found
    if not verify_password(password, str(account.get("passwordHash") or "")):
        raise InvalidCredentials()

    token = sessions.issue(account["id"], role)
    return token, public_profile(account)


def provision(
    store: Store,
    *,
    name: Any,
    email: Any,
    password: Any,
    role: Any = None,
) -> Dict[str, Any]:
    """Admin-side account creation. Does not issue a session."""
    chosen = ROLE_USER if role is None else role
    if chosen not in ROLES:
        raise ValidationError()
    account = create_account(store, name=name, email=email, password=password, role=chosen)
    _debug(f"Provisioned account id={account['id']} role={chosen}")
    return public_profile(account)


def overview(store: Store) -> Dict[str, List[Dict[str, Any]]]:
    return {
        "users": [public_profile(a) for a in store.load_partition(ROLE_USER)],
        "admins": [public_profile(a) for a in store.load_partition(ROLE_ADMIN)],
    }


def ensure_seed_admin(store: Store, cfg: Config) -> Optional[Dict[str, Any]]:
    """Create the configured seed admin if it does not exist yet.

    Controlled via environment variables (see Config):

    - ADMIN_EMAIL (default: owner@winery.board)
    - ADMIN_PASSWORD (default: wineryadmin)
    - ADMIN_NAME (default: Builder)

    Only the admins partition is checked. An existing account with the seed
    email is left untouched (its password hash is never rewritten).
    """
    email = normalize_email(cfg.ADMIN_EMAIL)
    password = cfg.ADMIN_PASSWORD or ""

    # If env explicitly clears these, don't create anything.
    if not email or not password:
        return None

    with store.locked(ROLE_ADMIN):
        admins = store.load_partition(ROLE_ADMIN)
        if any(normalize_email(a.get("email")) == email for a in admins):
            return None

        account: Dict[str, Any] = {
            "id": new_id(),
            "name": (cfg.ADMIN_NAME or "").strip() or "Admin",
            "email": email,
            "passwordHash": hash_password(password),
            "role": ROLE_ADMIN,
            "createdAt": now_ms(),
            "todos": [],
        }
        admins.append(account)
        store.save_partition(ROLE_ADMIN, admins)

    _debug(f"seeded admin {email}")
    return public_profile(account)
