"""
FastAPI app

- One RecordStore created at startup and shared through app.state
- CORS configured for local front-end development
- Single router for all endpoints under /api/v1
- Basic health check
"""
import logging
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

# Load environment variables from .env file early (before config is read)
project_root = Path(__file__).parent.parent
load_dotenv(dotenv_path=project_root / '.env')

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from clinic.api import router
from clinic.api.middleware import TimingMiddleware
from clinic.core.config import CORS_ORIGINS, DATA_DIR, LOG_LEVEL
from clinic.database.store import RecordStore

logging.basicConfig(
    level=LOG_LEVEL,
    format="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)


def create_app(store: Optional[RecordStore] = None) -> FastAPI:
    """
    Build the application around a record store

    Args:
        store: Store to serve; defaults to one over the configured data directory
    """
    app = FastAPI(title="Clinic Management API")
    app.state.store = store if store is not None else RecordStore(DATA_DIR)

    # Logs method, path, duration and status for all requests
    app.add_middleware(TimingMiddleware)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(router, prefix="/api/v1")

    @app.get("/")
    async def root():
        """
        Basic health check
        """
        return {"status": "ok"}

    return app


app = create_app()
