"""
ASGI Entry Point for the bragi-probe API.

This module exposes the `app` object required by ASGI servers (Uvicorn/Gunicorn).
It loads environment variables from `.env` before the application factory
runs, so settings read at import time see them.

Usage
-----
Run via the module entry point:
    $ python -m bragi_probe.api.server

Or via uvicorn directly:
    $ uvicorn bragi_probe.api.server:app --port 8080
"""

from pathlib import Path

import uvicorn
from dotenv import load_dotenv

from bragi_probe.api.app import create_app
from bragi_probe.core.settings import load_settings

# --------------------------------------------------------------------------- #
# Environment Setup
# --------------------------------------------------------------------------- #

load_dotenv(dotenv_path=Path(".env"))
load_settings.cache_clear()

# Factory invocation
app = create_app()


def main(host: str | None = None, port: int | None = None) -> None:
    """Serve the API with uvicorn, defaulting to the configured bind address."""
    settings = load_settings()
    uvicorn.run(
        "bragi_probe.api.server:app",
        host=host or settings.host,
        port=port or settings.port,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()
