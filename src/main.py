"""
Main FastAPI application.
"""

import asyncio
from contextlib import asynccontextmanager

from dotenv import load_dotenv
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .core.api.exception_handlers import setup_exception_handlers
from .core.config.settings import settings
from .core.di.container import Container
from .core.utils import configure_logging, get_logger
from .modules.reminders.api import router as reminders_router
from .modules.reminders.workers.reconciliation_scheduler import \
    ReconciliationScheduler

configure_logging()
logger = get_logger(__name__)

# Initialize DI Container
container = Container()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Lifespan context manager for startup and shutdown events.
    """
    # Startup
    logger.info("Starting Reminder Sync application")
    logger.info(
        "API running",
        host=settings.api.host,
        port=settings.api.port,
        backend=settings.reminders.backend,
    )

    backend = container.reminder_backend()
    backend.start()

    scheduler = None
    scheduler_task = None
    if settings.reminders.reconcile_interval_seconds > 0:
        scheduler = ReconciliationScheduler(
            interval_seconds=settings.reminders.reconcile_interval_seconds,
            registry=container.reminder_sync_registry(),
        )
        scheduler_task = asyncio.create_task(
            scheduler.start(install_signal_handlers=False)
        )

    yield

    # Shutdown
    if scheduler is not None:
        await scheduler.stop()
        scheduler_task.cancel()
        try:
            await scheduler_task
        except asyncio.CancelledError:
            pass

    backend.shutdown()
    logger.info("Shutting down Reminder Sync application")


# Create FastAPI app
is_production = settings.api.environment == "production"

app = FastAPI(
    title="Reminder Sync API",
    description="Local task reminder scheduling and synchronization engine",
    version="1.0.0",
    lifespan=lifespan,
    debug=settings.api.debug,
    docs_url=None if is_production else "/docs",
    openapi_url=None if is_production else "/openapi.json",
)

# Setup Exception Handlers
setup_exception_handlers(app)

# Attach container to app
app.container = container

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # In production, specify actual origins
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(reminders_router.router)


@app.get("/")
async def root():
    """Root endpoint."""
    return {"name": "Reminder Sync API", "version": "1.0.0", "status": "running"}


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy", "service": "reminder-sync"}


if __name__ == "__main__":
    load_dotenv()
    import uvicorn

    uvicorn.run(
        "src.main:app",
        host=settings.api.host,
        port=settings.api.port,
        reload=settings.api.debug,
    )
