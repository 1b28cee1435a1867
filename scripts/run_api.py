# Use postponed evaluation of annotations so type hints don't require importing types at runtime.
from __future__ import annotations

# Allow running scripts without requiring an editable install (`pip install -e .`).
import sys
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parents[1]
SRC_PATH = PROJECT_ROOT / "src"
sys.path.insert(0, str(SRC_PATH))

import os

# `uvicorn` serves the FastAPI application as an ASGI server during local development.
import uvicorn

from indegoatlas.api.app import create_app
from indegoatlas.config.loader import load_config


def main() -> None:
    # Read the typed application config (source URLs, timezone, cache TTL, logging).
    config = load_config()

    app = create_app(config)

    host = os.getenv("INDEGOATLAS_HOST", "127.0.0.1")
    port = int(os.getenv("INDEGOATLAS_PORT", "8000"))
    timeout_keep_alive = int(os.getenv("INDEGOATLAS_TIMEOUT_KEEP_ALIVE", "75"))

    uvicorn.run(app, host=host, port=port, timeout_keep_alive=timeout_keep_alive)


if __name__ == "__main__":
    main()
