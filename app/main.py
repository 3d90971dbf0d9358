from contextlib import asynccontextmanager
from datetime import datetime, timezone

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.config import get_settings
from app.core.database import connect, get_songs_collection
from app.core.exceptions import register_exception_handlers
from app.core.logging import setup_logging, get_logger
from app.core.middleware import register_middleware
from app.routers import songs
from app.schemas.song import HealthResponse
from app.services.song_store import SongStore

# Configure logging before anything else
setup_logging()
logger = get_logger(__name__)

settings = get_settings()


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup: the store must be reachable before we accept requests
    logger.info("Application startup: connecting to MongoDB...")
    try:
        client = connect(settings)
    except Exception as e:
        logger.critical(f"Failed to start server: {e}")
        raise

    song_store = SongStore(get_songs_collection(client, settings))
    song_store.ensure_indexes()
    app.state.song_store = song_store
    logger.info(f"Health check: http://{settings.host}:{settings.port}/health")
    logger.info(f"API endpoint: http://{settings.host}:{settings.port}{settings.songs_prefix}")

    yield

    # Shutdown (uvicorn handles SIGINT/SIGTERM and runs this branch)
    logger.info("Application shutdown: closing MongoDB connection...")
    client.close()
    logger.info("MongoDB connection closed")


app = FastAPI(
    title=settings.app_name,
    description="Suggest songs for a playlist and moderate the suggestions",
    version="1.0.0",
    docs_url="/docs" if settings.is_development else None,
    redoc_url="/redoc" if settings.is_development else None,
    lifespan=lifespan
)

register_middleware(app, settings)

# CORS middleware, outermost so preflight, 413 and 500 responses carry the headers too
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_exception_handlers(app)

app.include_router(songs.router, prefix=settings.songs_prefix, tags=["Songs"])


@app.get("/health", response_model=HealthResponse)
async def health_check():
    return {
        "status": "OK",
        "message": f"{settings.app_name} is running",
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host=settings.host, port=settings.port)
