from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi_pagination import add_pagination

from app.config import get_settings
from app.core.app_state import state
from app.db import db_manager
from app.exceptions import TravelBuddyError
from app.infra.logging_config import LoggingConfig, get_logger
from app.routers import (
    buddies_router,
    chat_router,
    packages_router,
    places_router,
    plans_router,
    realtime,
)

logger = get_logger("main")


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("Starting %s", get_settings().app_name)
    yield
    # Let in-flight realtime deliveries finish before the loop goes away.
    await state.rooms.drain()
    logger.info("Shutdown complete")


def create_app(testing: bool = False) -> FastAPI:
    settings = get_settings()
    LoggingConfig()

    app = FastAPI(
        title="Travel Buddy API",
        description="Chat, buddy requests, rosters and proximity search",
        version="1.0.0",
        lifespan=lifespan,
    )

    origins = settings.cors_origin_list
    app.add_middleware(
        CORSMiddleware,
        allow_origins=origins,
        allow_credentials="*" not in origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(TravelBuddyError)
    async def travelbuddy_error_handler(request: Request, exc: TravelBuddyError):
        return JSONResponse(
            status_code=exc.status_code,
            content={"detail": exc.detail, "code": exc.code},
        )

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception):
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        return JSONResponse(
            status_code=500,
            content={"detail": "Internal server error", "code": "internal_error"},
        )

    app.include_router(chat_router.router)
    app.include_router(buddies_router.router)
    app.include_router(plans_router.router)
    app.include_router(packages_router.router)
    app.include_router(places_router.router)
    app.include_router(realtime.router)

    @app.get("/health", tags=["health"])
    def health():
        if testing:
            return {"status": "ok"}
        database = "ok" if db_manager.check_health() else "unavailable"
        return {"status": "ok", "database": database}

    add_pagination(app)
    return app


app = create_app()
