import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI
from app.core.config import settings
from app.core.notification_handler import configure_notification_handler, reset_notification_handler
from app.core.scheduler import start_scheduler, shutdown_scheduler
from app.services.auth_observer import AuthStateObserver
from app.api.auth import router as auth_router
from app.api.notifications import router as notifications_router

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("Starting up FastAPI...")
    configure_notification_handler()
    await start_scheduler()
    app.state.auth_observer = AuthStateObserver()
    yield
    logger.info("Shutting down FastAPI...")
    await app.state.auth_observer.wait_idle()
    await shutdown_scheduler()
    reset_notification_handler()


app = FastAPI(
    title="Pet Care Reminders API",
    docs_url="/docs" if not settings.APP_DOMAIN else None,
    redoc_url=None,
    lifespan=lifespan,
)

# Include routers
app.include_router(auth_router)
app.include_router(notifications_router)


@app.get("/health")
async def health_check():
    return {"status": "ok"}


@app.get("/")
async def root():
    return {"message": "Pet Care Reminders API", "version": "1.0"}
