import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from prometheus_fastapi_instrumentator import Instrumentator

from hondenwedstrijd.config import settings
from hondenwedstrijd.database import async_session, init_db
from hondenwedstrijd.log import configure_logging
from hondenwedstrijd.routers import competitions, health, preferences
from hondenwedstrijd.services.calendar import CompetitionCalendar
from hondenwedstrijd.services.preferences import PreferenceStore, SqlPreferenceBackend
from hondenwedstrijd.services.scheduler import start_scheduler, stop_scheduler

configure_logging(settings.log_level)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("Starting Hondenwedstrijd")
    await init_db()
    app.state.preferences = PreferenceStore(SqlPreferenceBackend(async_session))
    calendar = CompetitionCalendar()
    app.state.calendar = calendar
    # Initial load; the API serves an empty, loading calendar until it lands
    calendar.start_refresh()
    start_scheduler(calendar)
    yield
    stop_scheduler()
    await calendar.shutdown()
    logger.info("Shutting down Hondenwedstrijd")


app = FastAPI(title="Hondenwedstrijd", lifespan=lifespan)

# Add Prometheus metrics instrumentation
Instrumentator(
    should_group_status_codes=True,
    should_ignore_untemplated=True,
    excluded_handlers=["/health", "/metrics"],
).instrument(app).expose(app, endpoint="/metrics")

app.include_router(health.router)
app.include_router(competitions.router)
app.include_router(preferences.router)
