from apscheduler.schedulers.asyncio import AsyncIOScheduler
import logging
from fastapi import FastAPI
from contextlib import asynccontextmanager

from rps_server.load_settings import get_settings
from rps_server.models.settings_models import GameSettings
from rps_server.routers import game
from rps_server.session_registry import SessionRegistry

settings = get_settings()
logging.basicConfig(level=settings.log_level)


def create_app(
    registry: SessionRegistry | None = None, settings: GameSettings = settings
) -> FastAPI:
    """Build the application around a session registry

    Args:
        registry (SessionRegistry | None, optional): Registry shared by every request. Defaults to a new one.
        settings (GameSettings, optional): Defaults to the settings read from the environment.

    Returns:
        FastAPI: The application
    """
    if registry is None:
        registry = SessionRegistry(settings)
    scheduler = AsyncIOScheduler()

    @asynccontextmanager
    async def lifespan(app):
        """Start the idle session sweep. This function is called to start the server."""
        if settings.session_max_idle is not None:
            scheduler.add_job(
                registry.evict_idle,
                "interval",
                minutes=settings.sweep_interval_minutes,
            )
        scheduler.start()
        logging.info(f"Start Server: reissue_policy={settings.reissue_policy.value}")
        try:
            yield
        finally:
            scheduler.shutdown()
            logging.info("Stop Server")

    app = FastAPI(lifespan=lifespan)
    app.state.registry = registry
    app.state.settings = settings
    app.include_router(game.game_router)
    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("rps_server.main:app", host="0.0.0.0", port=8080)
