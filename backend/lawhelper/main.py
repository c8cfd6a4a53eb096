"""
FastAPI application entry point
"""
import asyncio

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from lawhelper.api.api import api_router
from lawhelper.api.errors import register_exception_handlers
from lawhelper.core.config import settings
from lawhelper.core.logger import logger
from lawhelper.db.database import SessionLocal, init_db
from lawhelper.services.session_service import delete_expired_sessions

app = FastAPI(
    title=settings.APP_NAME,
    version="1.0.0",
    docs_url="/docs" if settings.DEBUG else None,
    redoc_url="/redoc" if settings.DEBUG else None,
    openapi_url="/openapi.json" if settings.DEBUG else None,
)

# ── Routers ───────────────────────────────────────────────────────────────────
app.include_router(api_router, prefix="/api")

register_exception_handlers(app)

# ── Correlation ID middleware (must be added before CORS) ─────────────────────
try:
    from lawhelper.middleware.correlation import CorrelationMiddleware
    app.add_middleware(CorrelationMiddleware)
except ImportError as _mw_err:
    logger.warning("CorrelationMiddleware disabled: %s", _mw_err)

# ── CORS ──────────────────────────────────────────────────────────────────────
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
    expose_headers=["X-Correlation-ID", "Content-Disposition"],
)


@app.get("/")
def read_root():
    logger.info("Root endpoint accessed")
    return {"message": "LawHelper API is running", "version": "1.0.0", "docs": "/docs"}


@app.get("/health")
def health_check():
    return {"status": "healthy"}


# ── Startup / Shutdown ────────────────────────────────────────────────────────

async def _expired_session_cleanup_loop() -> None:
    """Delete expired user_sessions rows every hour."""
    while True:
        try:
            await asyncio.sleep(3600)
            db = SessionLocal()
            try:
                deleted = delete_expired_sessions(db)
                if deleted:
                    logger.info("session_cleanup: deleted %d expired rows", deleted)
            finally:
                db.close()
        except asyncio.CancelledError:
            break
        except Exception:
            logger.exception("_expired_session_cleanup_loop crashed")
            await asyncio.sleep(60)


@app.on_event("startup")
async def startup_event():
    logger.info("LawHelper API started")
    if settings.AUTO_CREATE_TABLES:
        init_db()
    app.state.session_cleanup_task = asyncio.create_task(_expired_session_cleanup_loop())


@app.on_event("shutdown")
async def shutdown_event():
    logger.info("LawHelper API shutdown")
    task = getattr(app.state, "session_cleanup_task", None)
    if task:
        task.cancel()
        try:
            await task
        except asyncio.CancelledError:
            pass
