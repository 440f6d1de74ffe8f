"""Host application: runs the alert scheduler inside an ASGI lifespan."""
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Depends
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from . import __version__
from .config import settings
from .database import init_db, close_db, get_db
from .schemas import HealthResponse
from .services.alert_store import alert_store
from .services.scheduler import scheduler_service

# Configure logging
logging.basicConfig(
    level=getattr(logging, settings.log_level.upper(), logging.INFO),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan - startup and shutdown."""
    logger.info("Starting rental alert engine")
    
    await init_db()
    logger.info("Database initialized")
    
    if settings.scheduler_enabled:
        scheduler_service.start()
    else:
        logger.info("Scheduler disabled by configuration")
    
    yield
    
    scheduler_service.stop()
    await close_db()
    logger.info("Shutdown complete")


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    app = FastAPI(
        title="Rental Alert Engine",
        description="Scheduled detection of rentals, payments, vehicles, quotes and leads needing attention",
        version=__version__,
        lifespan=lifespan,
    )
    
    @app.get("/health", response_model=HealthResponse)
    async def health_check(db: AsyncSession = Depends(get_db)):
        alerts = None
        status = "healthy"
        try:
            alerts = await alert_store.unresolved_summary(db)
        except SQLAlchemyError as e:
            logger.error(f"Health check could not read alerts: {e}")
            status = "degraded"
        
        return HealthResponse(
            status=status,
            scheduler=scheduler_service.get_status(),
            alerts=alerts,
        )
    
    return app


# Create the application instance
app = create_app()


if __name__ == "__main__":
    import uvicorn
    
    uvicorn.run(app, host="0.0.0.0", port=settings.web_port)
