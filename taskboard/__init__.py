"""Taskboard - account and task-list backend.

The service is intentionally small:
- Accounts live in two JSON partitions (`users`, `admins`).
- Sessions are opaque bearer tokens held in process memory.
- Each account owns a private, newest-first list of todos.

See DESIGN.md for how the pieces fit together.
"""

__all__ = ["__version__"]

__version__ = "0.1.0"
