"""Application entry point.

Usage:
    # Development with auto-reload
    uvicorn allergen_finder.main:app --reload

    # Installed console script
    allergen-finder
"""

from __future__ import annotations

import uvicorn

from allergen_finder.core.config import get_settings
from allergen_finder.factory import create_app


app = create_app()


def run() -> None:
    """Serve the application with uvicorn."""
    settings = get_settings()
    uvicorn.run(
        "allergen_finder.main:app",
        host=settings.server.host,
        port=settings.server.port,
        reload=settings.is_development,
        log_level=settings.logging.level.lower(),
    )


if __name__ == "__main__":
    run()
