# api/app.py
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from expense_tracker import __version__
from expense_tracker.api.errors import register_exception_handlers
from expense_tracker.api.routers import auth, categories, expenses, health
from expense_tracker.audit import configure_logging
from expense_tracker.orchestrator import AppComponents, create_app_components


def create_app(components: Optional[AppComponents] = None) -> FastAPI:
    """Build the HTTP application around a set of stores."""
    components = components or create_app_components()
    settings = components.app_settings
    configure_logging(settings.log_level)

    app = FastAPI(
        title="Expense Tracker API",
        version=__version__,
        debug=settings.debug_mode,
    )
    app.state.components = components

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    register_exception_handlers(app)

    # mount routers
    app.include_router(health.router)
    app.include_router(auth.router)
    app.include_router(categories.router)
    app.include_router(expenses.router)

    @app.get("/")
    def root():
        return {"name": "Expense Tracker API", "version": __version__, "ok": True}

    return app
