"""
FastAPI Application Entry Point
"""
import logging
from fastapi import FastAPI
from habitclub.core.config import settings
from habitclub.routes import habits, health, social, profiles, feed

# Configure logging
logging.basicConfig(
    level=settings.LOG_LEVEL,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    datefmt='%Y-%m-%d %H:%M:%S'
)

# Silence noisy third-party loggers
logging.getLogger('httpx').setLevel(logging.WARNING)
logging.getLogger('httpcore').setLevel(logging.WARNING)
logging.getLogger('hpack').setLevel(logging.WARNING)

logger = logging.getLogger(__name__)

app = FastAPI(
    title="Habit Club API",
    version="0.1.0"
)

# Register routes
app.include_router(health.router)
app.include_router(profiles.router)
app.include_router(habits.router)
app.include_router(social.router)
app.include_router(feed.router)

logger.info(f"Habit Club API ready (timezone={settings.APP_TIMEZONE}, streak policy={settings.STREAK_POLICY})")
