import os
from dataclasses import dataclass
from typing import List

from dotenv import load_dotenv

# Load a local .env file if present (no-op otherwise).
load_dotenv()


@dataclass(frozen=True)
class Config:
    """Runtime configuration.

    Defaults are read from the environment (or a .env file) at import time.
    Pass keyword arguments to override individual fields, e.g. in tests.

    Do not rely on the default seed admin password outside local development.
    """

    # -----------------
    # Server
    # -----------------
    API_HOST: str = os.environ.get("API_HOST", "0.0.0.0")
    PORT: int = int(os.environ.get("PORT", "4000"))

    # Comma-separated list of browser origins allowed to call the API.
    CLIENT_ORIGINS: str = os.environ.get(
        "CLIENT_ORIGINS",
        "http://localhost:5173,http://127.0.0.1:5173",
    )

    # -----------------
    # Storage
    # -----------------
    # Directory holding users.json and admins.json.
    DATA_DIR: str = os.environ.get("TASKBOARD_DATA_DIR", "./data")

    # -----------------
    # Seed admin
    # -----------------
    # Created on startup when no admin with this email exists yet.
    ADMIN_EMAIL: str = os.environ.get("ADMIN_EMAIL", "owner@winery.board")
    ADMIN_PASSWORD: str = os.environ.get("ADMIN_PASSWORD", "wineryadmin")
    ADMIN_NAME: str = os.environ.get("ADMIN_NAME", "Builder")

    def cors_origins(self) -> List[str]:
        return [o.strip() for o in (self.CLIENT_ORIGINS or "").split(",") if o.strip()]


def load_config() -> Config:
    return Config()
