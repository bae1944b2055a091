import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(ROOT))

import uvicorn

from taskboard.config import load_config


def main() -> None:
    cfg = load_config()
    uvicorn.run(
        "taskboard.api.server:create_app",
        factory=True,
        host=cfg.API_HOST,
        port=cfg.PORT,
        reload=False,
    )


if __name__ == "__main__":
    main()
