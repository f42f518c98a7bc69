"""
HTTP entry point for Expense Tracker

Run with:
    uvicorn app.main:app --port 3000
or:
    python -m app.main

Requires AUTH_JWT_SECRET in the environment (or .env).
"""

import uvicorn

from expense_tracker.api import create_app
from expense_tracker.audit import get_logger
from expense_tracker.config import get_settings, validate_all_settings


logger = get_logger(__name__)

app = create_app()


def main():
    """Start the HTTP server."""
    settings = get_settings().app
    status = validate_all_settings()
    logger.info(
        "starting_server",
        host=settings.host,
        port=settings.port,
        environment=settings.app_environment,
        settings_ok=all(v for k, v in status.items() if not k.endswith("_error")),
    )
    uvicorn.run(app, host=settings.host, port=settings.port)


if __name__ == "__main__":
    main()
