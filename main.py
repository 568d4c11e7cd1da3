"""
Backend entry point for the cross-timezone meeting planner.

One FastAPI process serving the planner API. Holiday data is fetched on
demand and cached in memory for the life of the process.

Run with: python main.py [--port PORT]
"""

import logging
import os
import sys
from contextlib import asynccontextmanager
from pathlib import Path

project_root = Path(__file__).parent
sys.path.insert(0, str(project_root))

from dotenv import load_dotenv

# Load .env.local first (if exists), then .env as fallback
# .env.local is gitignored and used for local dev overrides
load_dotenv(project_root / ".env.local")  # Local overrides (gitignored)
load_dotenv()  # Fallback to .env

import sentry_sdk
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from planner.config import get_allowed_origins, get_api_port, get_sentry_dsn, is_dev_mode
from planner.holiday_fetcher import get_holiday_loader
from web_api.routes.planner import router as planner_router

logging.basicConfig(
    level=logging.DEBUG if is_dev_mode() else logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

if get_sentry_dsn():
    sentry_sdk.init(dsn=get_sentry_dsn(), traces_sample_rate=0.0)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Create the shared holiday cache before serving requests."""
    get_holiday_loader()
    logger.info("Holiday cache ready")
    yield
    logger.info("Shutting down")


app = FastAPI(
    title="Cross Timezone Meeting Planner API",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=get_allowed_origins(),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(planner_router)


@app.get("/")
async def root():
    return {"status": "ok"}


@app.get("/health")
async def health():
    """Health check endpoint with holiday cache status."""
    loader = get_holiday_loader()
    return {
        "status": "healthy",
        "last_fetch_key": loader.last_fetch_key,
    }


if __name__ == "__main__":
    import argparse
    import uvicorn

    parser = argparse.ArgumentParser(description="Cross Timezone Meeting Planner Server")
    parser.add_argument(
        "--port",
        type=int,
        default=get_api_port(),
        help="Port to run the server on (default: API_PORT or 8000)",
    )
    parser.add_argument(
        "--dev",
        action="store_true",
        help="Enable development mode (verbose logging)",
    )
    args = parser.parse_args()

    if args.dev:
        os.environ["DEV_MODE"] = "true"
        logging.getLogger().setLevel(logging.DEBUG)

    # Pass app object directly (not string) to avoid module reimport issues
    uvicorn.run(
        app,
        host="0.0.0.0",
        port=args.port,
    )
