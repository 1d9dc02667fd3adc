# app/main.py

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from loguru import logger
from sqlalchemy.exc import IntegrityError
import sys
import time
import psutil

from app.core.database import test_connection, init_db, AsyncSessionLocal
from app.core.config import settings
from app.models.user import UserRole
from app.services.auth_service import create_user, get_user_by_email
from app.services.document_store import DocumentNotFound, DocumentStore, StoreError
from app.services.identity_service import IdentityResolver
from app.services.notification_service import NotificationService

# Routers
from app.api.endpoints import (
    auth as auth_router,
    users as users_router,
    reports as reports_router,
    visitors as visitors_router,
    notices as notices_router,
    campaigns as campaigns_router,
    emergency as emergency_router,
    checklist as checklist_router,
    drills as drills_router,
    dashboard as dashboard_router,
)

# ------------------------------------------------------------
# LOGURU CONFIGURATION
# ------------------------------------------------------------
logger.remove()
logger.add(
    sys.stdout,
    format="<green>{time:YYYY-MM-DD HH:mm:ss}</green> | "
           "<level>{level}</level> | "
           "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - "
           "<level>{message}</level>",
    level="DEBUG" if settings.ENV == "dev" else "INFO",
    colorize=True,
    backtrace=True,
    diagnose=settings.ENV == "dev",
)

# ------------------------------------------------------------
# FASTAPI APP INIT
# ------------------------------------------------------------
app = FastAPI(
    title="School Safety Backend",
    version="1.0.0",
    description="Reports, visitors, alerts, notices, campaigns and dashboards for school safety.",
)

START_TIME = time.time()
DB_STATUS = "Connecting..."

# ------------------------------------------------------------
# SERVICES (one instance per app, handed out through deps)
# ------------------------------------------------------------
app.state.store = DocumentStore(AsyncSessionLocal)
app.state.resolver = IdentityResolver(app.state.store, demo_fallback=settings.DEMO_IDENTITY_FALLBACK)
app.state.notifications = NotificationService(enabled=settings.NOTIFICATIONS_ENABLED)

if settings.DEMO_IDENTITY_FALLBACK:
    logger.warning("DEMO_IDENTITY_FALLBACK is on: unknown accounts get e-mail based roles")


# ------------------------------------------------------------
# ERROR MAPPING
# ------------------------------------------------------------
@app.exception_handler(DocumentNotFound)
async def document_not_found_handler(request: Request, exc: DocumentNotFound):
    return JSONResponse(status_code=404, content={"detail": str(exc)})


@app.exception_handler(StoreError)
async def store_error_handler(request: Request, exc: StoreError):
    return JSONResponse(status_code=400, content={"detail": str(exc)})


@app.exception_handler(ValueError)
async def value_error_handler(request: Request, exc: ValueError):
    logger.info("Rejected {} {}: {}", request.method, request.url.path, exc)
    return JSONResponse(status_code=400, content={"detail": str(exc)})


@app.exception_handler(IntegrityError)
async def integrity_error_handler(request: Request, exc: IntegrityError):
    logger.warning("Integrity error on {} {}: {}", request.method, request.url.path, exc.orig)
    return JSONResponse(status_code=409, content={"detail": "Conflicts with an existing record"})


# ------------------------------------------------------------
# METRICS API
# ------------------------------------------------------------
@app.get("/api/metrics", tags=["System"])
async def metrics():
    uptime_seconds = int(time.time() - START_TIME)
    cpu_usage = psutil.cpu_percent(interval=None)
    ram_usage = psutil.virtual_memory().percent

    db_start = time.time()
    db_latency = 0
    try:
        await test_connection()
        current_db_status = "Connected"
        db_latency = round((time.time() - db_start) * 1000, 2)
    except Exception:
        logger.exception("Health check: database unreachable")
        current_db_status = "Error"

    return {
        "status": "Online",
        "version": app.version,
        "cpu": cpu_usage,
        "ram": ram_usage,
        "uptime": uptime_seconds,
        "database": current_db_status,
        "db_latency": db_latency,
    }


# ------------------------------------------------------------
# CORS CONFIGURATION
# ------------------------------------------------------------
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
    allow_headers=["Authorization", "Content-Type"],
)

# ------------------------------------------------------------
# REGISTER ROUTERS
# ------------------------------------------------------------
app.include_router(auth_router.router)
app.include_router(users_router.router)
app.include_router(reports_router.router)
app.include_router(visitors_router.router)
app.include_router(notices_router.router)
app.include_router(campaigns_router.router)
app.include_router(emergency_router.router)
app.include_router(checklist_router.router)
app.include_router(drills_router.router)
app.include_router(dashboard_router.router)


# ------------------------------------------------------------
# APPLICATION STARTUP EVENTS
# ------------------------------------------------------------
@app.on_event("startup")
async def on_startup():
    global DB_STATUS
    logger.info("Starting School Safety Backend...")

    # 1) Database connection test
    try:
        await test_connection()
        DB_STATUS = "Connected"
        logger.success("Database connection established.")
    except Exception:
        DB_STATUS = "Error"
        logger.exception("Startup aborted: Database connection failed.")
        return

    # 2) Initialize database tables
    try:
        await init_db()
        logger.success("Database tables ready.")
    except Exception as e:
        logger.warning(f"Table initialization encountered an issue: {e}")

    # 3) Seed the first Direction account
    if not settings.DIRECTION_EMAIL or not settings.DIRECTION_PASSWORD:
        logger.warning("No Direction credentials in settings; skipping seed.")
    else:
        try:
            async with AsyncSessionLocal() as session:
                existing = await get_user_by_email(session, settings.DIRECTION_EMAIL)
            if existing:
                logger.info("Direction account already exists. Skipping.")
            else:
                logger.info(f"Seeding Direction account: {settings.DIRECTION_EMAIL}")
                await create_user(
                    app.state.store,
                    name=settings.DIRECTION_NAME or "Direção",
                    email=settings.DIRECTION_EMAIL,
                    password=settings.DIRECTION_PASSWORD,
                    role=UserRole.Direction,
                )
                logger.success("Direction account created.")
        except Exception:
            logger.exception("Direction account seeding failed.")

    logger.success("Backend startup completed successfully.\n")


# ------------------------------------------------------------
# ROOT HEALTH CHECK
# ------------------------------------------------------------
@app.get("/", tags=["System"])
async def root():
    return {
        "status": "ok",
        "service": "School Safety Backend",
        "version": app.version,
        "database": DB_STATUS,
    }
