from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles
from fastapi.responses import JSONResponse
from typing import Optional
from config import Settings, settings as default_settings
from database import create_db_engine
from middleware.security import SecurityMiddleware
from repositories import FleetStore, InMemoryFleetStore, SqlFleetStore
from routers import auth, orders, drivers, sos, complaints, tally
from services.complaint_service import ComplaintService
from services.errors import FleetError
from services.order_service import OrderService
from services.seed import seed_demo_data, ensure_admin_user
from services.sos_service import AlertService
from services.tally_service import TallyClient
import os
import logging

logging.basicConfig(level=default_settings.log_level)
logger = logging.getLogger(__name__)

def build_store(settings: Settings) -> FleetStore:
    """SQL store when DATABASE_URL is set, otherwise the in-memory demo store"""
    if settings.database_url:
        return SqlFleetStore(create_db_engine(settings.database_url))
    logger.warning("DATABASE_URL not configured - using in-memory store, data is lost on restart")
    return InMemoryFleetStore()

def create_app(settings: Optional[Settings] = None, store: Optional[FleetStore] = None) -> FastAPI:
    settings = settings or default_settings
    store = store or build_store(settings)

    app = FastAPI(
        title=settings.app_name,
        description="Order lifecycle, driver queues, SOS alerts and customer complaints for the fleet dashboards",
        version="1.0.0",
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json"
    )

    @app.exception_handler(FleetError)
    async def fleet_error_handler(request: Request, exc: FleetError):
        return JSONResponse(status_code=exc.status_code, content={"detail": exc.detail})

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        """Global exception handler to prevent information leakage"""
        logger.error(f"Unhandled exception: {exc}", exc_info=True)
        return JSONResponse(
            status_code=500,
            content={"detail": "An internal error occurred. Please try again later."}
        )

    app.add_middleware(SecurityMiddleware, settings=settings)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["X-Request-ID"],
        max_age=600,
    )

    os.makedirs(os.path.join(settings.upload_dir, "returns"), exist_ok=True)
    app.mount("/uploads", StaticFiles(directory=settings.upload_dir), name="uploads")

    app.include_router(auth.router)
    app.include_router(orders.router)
    app.include_router(drivers.router)
    app.include_router(sos.router)
    app.include_router(complaints.router)
    app.include_router(tally.router)

    store.create_schema()
    if settings.seed_demo_data:
        seed_demo_data(store, upload_dir=settings.upload_dir)
    ensure_admin_user(store, settings)

    app.state.settings = settings
    app.state.store = store
    app.state.order_service = OrderService(store, upload_dir=settings.upload_dir)
    app.state.alert_service = AlertService(store)
    app.state.complaint_service = ComplaintService(store)
    app.state.tally_client = TallyClient(settings.tally_url, timeout=settings.tally_timeout_seconds)

    @app.get("/")
    def root():
        return {
            "message": settings.app_name,
            "version": "1.0.0",
            "docs": "/docs",
            "health": "/health"
        }

    @app.get("/health")
    def health_check():
        if not isinstance(store, SqlFleetStore):
            return {"status": "healthy", "storage": "memory", "database": "not configured"}
        return {
            "status": "healthy",
            "storage": "sql",
            "database": "connected" if store.is_healthy() else "not connected"
        }

    return app

app = create_app()
