"""Per-account todo list operations.

These functions only touch the account record handed to them (normally
`AuthContext.account`). Ownership is list membership: a todo id that belongs
to another account is simply not found here. Callers persist afterwards.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from taskboard.errors import NotFound, ValidationError
from taskboard.util.ids import new_id
from taskboard.util.normalization import LABEL_MAX_LEN, LABEL_MIN_LEN, clean_text
from taskboard.util.time import now_ms


def _todos(account: Dict[str, Any]) -> List[Dict[str, Any]]:
    todos = account.get("todos")
    if not isinstance(todos, list):
        todos = []
        account["todos"] = todos
    return todos


def list_todos(account: Dict[str, Any]) -> List[Dict[str, Any]]:
    return list(_todos(account))


def create_todo(account: Dict[str, Any], label: Any) -> Dict[str, Any]:
    clean = clean_text(label, min_len=LABEL_MIN_LEN, max_len=LABEL_MAX_LEN)
    if clean is None:
        raise ValidationError()

    todo = {
        "id": new_id(),
        "label": clean,
        "done": False,
        "createdAt": now_ms(),
    }
    # Newest first.
    account["todos"] = [todo] + _todos(account)
    return todo


def toggle_todo(account: Dict[str, Any], todo_id: str, done: Optional[bool] = None) -> Dict[str, Any]:
    """Set `done` explicitly, or flip it when `done` is None."""
    todo = next((t for t in _todos(account) if t.get("id") == todo_id), None)
    if todo is None:
        raise NotFound()
    todo["done"] = done if isinstance(done, bool) else not bool(todo.get("done"))
    return todo


def delete_todo(account: Dict[str, Any], todo_id: str) -> bool:
    before = _todos(account)
    after = [t for t in before if t.get("id") != todo_id]
    if len(after) == len(before):
        return False
    account["todos"] = after
    return True
