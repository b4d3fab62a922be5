from fastapi import FastAPI, Depends
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session
from sqlalchemy import text

from raidloot.db.base import get_db
from raidloot.core.config import settings
from raidloot.core.logging import setup_logging
from raidloot.routers import attendance as attendance_router
from raidloot.routers import config as config_router
from raidloot.routers import flps as flps_router
from raidloot.routers import loot as loot_router
from raidloot.routers import raids as raids_router
from raidloot.core.errors import (
    RaidLootError,
    raidloot_exception_handler,
    validation_exception_handler,
    unhandled_exception_handler,
)

setup_logging(settings.LOG_LEVEL)

app = FastAPI(
    title="RaidLoot API",
    description=(
        "**Final Loot Priority Score (FLPS) and raid roster service**\n\n"
        "Ranks raiders for each loot drop by merit, item priority and recency, "
        "and runs the raid lifecycle from scheduling to completion.\n\n"
        "All error responses follow the `{code, message, details}` envelope."
    ),
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
)

# --- CORS ---
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# --- Exception handlers (most specific first) ---
app.add_exception_handler(RaidLootError, raidloot_exception_handler)
app.add_exception_handler(RequestValidationError, validation_exception_handler)
app.add_exception_handler(Exception, unhandled_exception_handler)

# --- Routers ---
app.include_router(raids_router.router)
app.include_router(config_router.router)
app.include_router(flps_router.router)
app.include_router(loot_router.router)
app.include_router(attendance_router.router)


@app.get("/health", tags=["health"], summary="Health check")
def health(db: Session = Depends(get_db)):
    """
    Returns `{"status": "ok", "db": "ok"}` when both the API and the database
    are reachable. Returns HTTP 503 if the DB is down.
    """
    try:
        db.execute(text("SELECT 1"))
        db_status = "ok"
    except Exception:
        db_status = "unreachable"

    if db_status != "ok":
        return JSONResponse(
            status_code=503,
            content={"status": "error", "db": db_status},
        )
    return {"status": "ok", "db": "ok", "env": settings.APP_ENV}
