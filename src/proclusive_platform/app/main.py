"""FastAPI application entry point for the Proclusive Platform API."""

import asyncio
import logging
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from proclusive_platform.app.config import get_settings
from proclusive_platform.domain.schemas import HealthResponse
from proclusive_platform.infra.database import async_session, init_db
from proclusive_platform.services.reminder_service import ReminderScheduler

logger = logging.getLogger(__name__)


async def reminder_loop(interval_minutes: int):
    """Run an application reminder pass every ``interval_minutes``."""
    while True:
        try:
            async with async_session() as db:
                results = await ReminderScheduler(db).run_reminder_pass()
                if results["sent"]:
                    logger.info("Reminder loop: sent %d reminders", results["sent"])
        except Exception as e:
            logger.error("Reminder loop error: %s", e)
        await asyncio.sleep(interval_minutes * 60)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan: initialize database, optionally start the reminder loop."""
    await init_db()

    settings = get_settings()
    task = None
    if settings.reminder_loop_enabled:
        task = asyncio.create_task(reminder_loop(settings.reminder_loop_interval_minutes))
    yield
    if task is not None:
        task.cancel()


settings = get_settings()

# Configure logging
logging.basicConfig(
    level=logging.INFO if settings.debug else logging.WARNING,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    datefmt="%H:%M:%S",
)

app = FastAPI(
    title="Proclusive Platform API",
    lifespan=lifespan,
    debug=settings.debug,
)

# CORS middleware: allow all origins in debug mode
_cors_origins = settings.cors_origins_list
app.add_middleware(
    CORSMiddleware,
    allow_origins=_cors_origins,
    allow_credentials=("*" not in _cors_origins),
    allow_methods=["*"],
    allow_headers=["*"],
)

# ---------------------------------------------------------------------------
# Error bodies: every error is rendered as {"error": message}
# ---------------------------------------------------------------------------


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": exc.detail},
        headers=getattr(exc, "headers", None),
    )


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    errors = exc.errors()
    message = errors[0].get("msg", "Invalid request") if errors else "Invalid request"
    return JSONResponse(status_code=400, content={"error": message})


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    logger.exception("Unhandled exception on %s %s", request.method, request.url.path)
    return JSONResponse(status_code=500, content={"error": "Internal server error"})


# ---------------------------------------------------------------------------
# Route includes
# ---------------------------------------------------------------------------
from proclusive_platform.app.routes.auth import router as auth_router
from proclusive_platform.app.routes.referrals import router as referrals_router
from proclusive_platform.app.routes.applications import router as applications_router
from proclusive_platform.app.routes.admin import router as admin_router
from proclusive_platform.app.routes.cron import router as cron_router

app.include_router(auth_router)
app.include_router(referrals_router)
app.include_router(applications_router)
app.include_router(admin_router)
app.include_router(cron_router)


@app.get("/health", tags=["health"], response_model=HealthResponse)
async def health_check():
    """Return service health status."""
    return {"status": "ok", "service": "proclusive-platform"}


def run() -> None:
    """Run the application with uvicorn (used by project.scripts entry point)."""
    uvicorn.run(
        "proclusive_platform.app.main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.debug,
    )


if __name__ == "__main__":
    run()
