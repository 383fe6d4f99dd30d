"""Main FastAPI application."""
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from wod_parser_api.api.parse_routes import router
from wod_parser_api.catalogue import load_catalogue
from wod_parser_api.config import settings
from wod_parser_api.parsers.workout_parser import WorkoutParser

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Catalogue errors are fatal: the app must not serve without it
    catalogue = load_catalogue(settings.CATALOGUE_PATH, settings.LIFTS_PATH)
    app.state.parser = WorkoutParser(catalogue, suggestion_limit=settings.SUGGESTION_LIMIT)
    logger.info(f"WOD parser ready ({settings.ENVIRONMENT})")
    yield
    app.state.parser = None


app = FastAPI(title="WOD Parser API", lifespan=lifespan)

# Configure CORS to allow requests from the UI
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(router)
