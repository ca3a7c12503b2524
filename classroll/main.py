from typing import Optional
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from contextlib import asynccontextmanager
import logging
import time

from .core.config import Settings, get_settings
from .core.database import Database
from .core.error_handlers import register_exception_handlers
from .core.logging import setup_logging
from .routers import admin, attendance, classes, health, sessions, students

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings = app.state.settings
    logger.info("Starting %s %s (%s)", settings.app_name, settings.app_version, settings.environment)
    owned = app.state.database is None
    if owned:
        app.state.database = Database.from_settings(settings)

    yield

    logger.info("Shutting down %s", settings.app_name)
    if owned:
        await app.state.database.dispose()
        app.state.database = None
    logger.info("Shutdown complete")


def create_app(settings: Optional[Settings] = None, database: Optional[Database] = None) -> FastAPI:
    settings = settings or get_settings()
    setup_logging(settings)

    app = FastAPI(
        title="Classroll API",
        description="Class sessions and attendance for recurring weekly classes",
        version=settings.app_version,
        lifespan=lifespan,
    )
    app.state.settings = settings
    # Built in the lifespan unless one is supplied
    app.state.database = database

    @app.middleware("http")
    async def add_process_time_header(request: Request, call_next):
        start_time = time.time()
        response = await call_next(request)
        process_time = time.time() - start_time
        response.headers["X-Process-Time"] = str(process_time)
        logger.info(f"{request.method} {request.url.path} - {process_time:.3f}s")
        return response

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.allowed_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        max_age=3600,
    )

    register_exception_handlers(app)

    app.include_router(health.router)
    app.include_router(classes.router)
    app.include_router(sessions.router)
    app.include_router(attendance.router)
    app.include_router(students.router)
    app.include_router(admin.router)

    @app.get("/")
    async def root():
        return {"message": "Classroll API", "version": settings.app_version, "status": "active"}

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn
    uvicorn.run("classroll.main:app", host="0.0.0.0", port=8000, reload=True)
