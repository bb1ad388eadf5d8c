from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from loguru import logger

from camp_agenda.api.agenda import router as agenda_router
from camp_agenda.api.camps import router as camps_router
from camp_agenda.api.errors import register_error_handlers
from camp_agenda.config.settings import settings
from camp_agenda.core.logger import setup_logger
from camp_agenda.db.models import Base
from camp_agenda.db.session import get_engine

setup_logger(level=settings.log_level, log_file=settings.log_file)


@asynccontextmanager
async def lifespan(_app: FastAPI):
    """Ensure database tables exist before serving requests."""
    logger.info("Ensuring database tables exist")
    Base.metadata.create_all(bind=get_engine())
    logger.info("Database tables verified")
    yield


app = FastAPI(title="Camp Agenda", lifespan=lifespan)

register_error_handlers(app)
app.include_router(camps_router)
app.include_router(agenda_router)

logger.info("FastAPI application initialized")


@app.get("/health")
def health():
    return {"status": "ok"}


@app.middleware("http")
async def log_requests(request: Request, call_next):
    """Log all HTTP requests."""
    logger.debug(f"Request: {request.method} {request.url.path}")
    response = await call_next(request)
    logger.debug(f"Response: {response.status_code} for {request.method} {request.url.path}")
    return response
