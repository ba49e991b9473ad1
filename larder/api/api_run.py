from contextlib import asynccontextmanager
import logging

from fastapi import FastAPI

from larder.api.routes import events, ingredients, meals, nutrition, pantry, recipes, shopping
from larder.infra.session import build_session

# Logging
logger = logging.getLogger(__name__)

ROUTERS = (ingredients, pantry, meals, recipes, shopping, nutrition, events)


def create_app(session=None) -> FastAPI:
    """
    Build the JSON API around one LarderSession.

    Without an explicit session, the file-backed one is built on startup
    from the configured data directory.
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        if getattr(app.state, "session", None) is None:
            app.state.session = build_session()
            logger.info("Larder session ready")
        yield
        app.state.session.changes.detach()

    app = FastAPI(title="Larder Pantry & Meal Planning API", lifespan=lifespan)
    app.state.session = session

    for module in ROUTERS:
        app.include_router(module.router)

    @app.get("/api/health")
    def health():
        current = app.state.session
        return {
            "status": "ok",
            "ingredients": len(current.catalog) if current else 0,
            "recipes": len(current.recipes) if current else 0,
        }

    return app


app = create_app()
