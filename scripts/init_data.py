import sys
from pathlib import Path

# Ensure project root is on sys.path when running as a script
ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(ROOT))

from taskboard.auth.crud import ensure_seed_admin
from taskboard.config import load_config
from taskboard.store import Store


def main() -> None:
    cfg = load_config()
    store = Store(cfg.DATA_DIR)
    seeded = ensure_seed_admin(store, cfg)
    if seeded is None:
        print(f"Seed admin already present (or disabled): {cfg.ADMIN_EMAIL}")
    print(f"Data initialized: {store.data_dir}")


if __name__ == "__main__":
    main()
