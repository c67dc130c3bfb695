# backend/focusflow/main.py
import logging
from contextlib import asynccontextmanager

from dotenv import load_dotenv
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from focusflow.api.endpoints import focus, health
from focusflow.audio.channel import SilentChannel
from focusflow.audio.chime import SilentChime
from focusflow.coordinator import FocusCoordinator
from focusflow.core.config import settings
from focusflow.core.logging import setup_logging
from focusflow.db.mongo import close_mongo_connection

load_dotenv()
setup_logging(settings.LOG_LEVEL)

logger = logging.getLogger(__name__)

IS_PRODUCTION = settings.ENVIRONMENT == "production"


def build_audio_backend(name: str):
    """
    (channel, chime) for the configured backend. 'pygame' needs the audio
    extra installed; anything else is headless.
    """
    if name == "pygame":
        from focusflow.audio.pygame_backend import PygameChannel, PygameChime

        return PygameChannel(), PygameChime()
    return SilentChannel(), SilentChime()


# [lifespan] one coordinator per process
@asynccontextmanager
async def lifespan(app: FastAPI):
    channel, chime = build_audio_backend(settings.AUDIO_BACKEND)
    coordinator = FocusCoordinator(
        access_token=settings.FOCUS_ACCESS_TOKEN,
        channel=channel,
        chime=chime,
    )
    await coordinator.initialize()
    app.state.coordinator = coordinator
    yield
    await coordinator.close()
    app.state.coordinator = None
    await close_mongo_connection()


app = FastAPI(title="Focus Flow", lifespan=lifespan)

# CORS: the web UI polls and drives the coordinator
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

if not IS_PRODUCTION:
    logger.warning("Running in %s mode", settings.ENVIRONMENT)


@app.get("/")
async def read_root():
    return {"message": "Focus coordinator is running!"}


app.include_router(health.router)
app.include_router(focus.router)
