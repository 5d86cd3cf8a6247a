import logging
import os
from contextlib import asynccontextmanager

from dotenv import load_dotenv
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from ryoko.api.routers.itineraries import router as itineraries_router
from ryoko.api.routers.places import router as places_router
from ryoko.api.routers.plans import router as plans_router
from ryoko.core.maps_client import maps_client_loader
from ryoko.core.settings import get_settings

load_dotenv()


def resolve_log_level(name: str) -> int:
    """Map a LOG_LEVEL name to a logging level, defaulting to INFO."""
    level = logging.getLevelName((name or "").strip().upper())
    return level if isinstance(level, int) else logging.INFO


@asynccontextmanager
async def lifespan(application: FastAPI):
    yield
    # Close the shared HTTP client on shutdown
    await maps_client_loader.reset()


def create_app() -> FastAPI:
    settings = get_settings()
    logging.basicConfig(
        level=resolve_log_level(settings.log_level),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    application = FastAPI(title="Ryoko Backend", lifespan=lifespan)

    # CORS: local dev servers plus the configured frontend
    allowed_origins = [
        "http://localhost:3000",
        "http://localhost:5173",
        "http://127.0.0.1:3000",
        "http://127.0.0.1:5173",
    ]
    if settings.frontend_url and settings.frontend_url not in allowed_origins:
        allowed_origins.append(settings.frontend_url)

    # For deployments: set ALLOWED_ORIGINS=https://a.example,https://b.example
    prod_origins = os.getenv("ALLOWED_ORIGINS", "")
    if prod_origins:
        allowed_origins.extend(
            [origin.strip() for origin in prod_origins.split(",") if origin.strip()]
        )

    application.add_middleware(
        CORSMiddleware,
        allow_origins=allowed_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["*"],
    )

    @application.get("/healthz")
    def healthz() -> dict[str, str]:
        return {"status": "ok"}

    application.include_router(itineraries_router)
    application.include_router(places_router)
    application.include_router(plans_router)
    return application


app = create_app()
