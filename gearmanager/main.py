"""FastAPI application entrypoint."""

from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI

from gearmanager.api.gear import router as gear_router
from gearmanager.api.health import router as health_router
from gearmanager.config import settings
from gearmanager.core.event_bus import EventBus
from gearmanager.core.item.registry import DefinitionRegistry
from gearmanager.core.logging import get_logger, setup_logging
from gearmanager.services.gear_service import GearService

setup_logging(settings.LOG_LEVEL, debug=settings.DEBUG)
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan handler for startup and shutdown events."""
    logger.info("Loading item catalog...")
    registry = DefinitionRegistry()
    registry.load_from_json(settings.CATALOG_PATH)
    app.state.registry = registry

    event_bus = EventBus()
    app.state.event_bus = event_bus

    gear_service = GearService(
        event_bus=event_bus,
        registry=registry,
        policy=settings.mutation_policy,
    )
    app.state.gear_service = gear_service
    logger.info(
        "GearService initialized (rotation=%s, strict_equip=%s)",
        settings.ROTATION_POLICY.value,
        settings.STRICT_EQUIP,
    )

    sample = settings.SAMPLE_CHARACTER_PATH
    if sample and sample.is_file():
        character = gear_service.load_character_from_json(sample)
        logger.info("Sample character loaded: %s", character.character_id)

    yield

    logger.info("Shutting down...")
    event_bus.clear()


app = FastAPI(title="Gear Manager", lifespan=lifespan)

app.include_router(health_router)
app.include_router(gear_router)
