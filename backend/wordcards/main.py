import os
from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from dotenv import load_dotenv

from wordcards.db import close_client, ensure_containers, get_settings, verify_connection
from wordcards.routers import folders_router, cards_router, review_router
from wordcards.srs import get_scheduler_policy

load_dotenv()


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup
    settings = get_settings()
    policy = get_scheduler_policy()

    print(
        f"✓ Review scheduler: default ease {policy.default_ease}, min ease {policy.min_ease}, "
        f"hard x{policy.hard_interval_multiplier}, easy bonus x{policy.easy_bonus}"
    )

    if settings.is_configured():
        if verify_connection():
            print("✓ Connected to Cosmos DB")
            if settings.create_if_missing:
                ensure_containers()
        else:
            print("✗ Failed to connect to Cosmos DB - check configuration")
    else:
        print("⚠ Cosmos DB not configured (COSMOS_ENDPOINT not set, COSMOS_EMULATOR not enabled)")

    yield

    # Shutdown
    close_client()
    print("✓ Cosmos DB connection closed")


app = FastAPI(
    title="Wordcards API",
    description="Flashcard folders, cards and spaced-repetition review",
    version="1.0.0",
    lifespan=lifespan,
)

DEFAULT_CORS_ORIGINS = "http://localhost:3000,http://localhost:5173"


def cors_origins() -> list[str]:
    """Origins allowed by CORS, from the comma-separated CORS_ORIGINS variable."""
    raw = os.getenv("CORS_ORIGINS", DEFAULT_CORS_ORIGINS)
    return [origin.strip() for origin in raw.split(",") if origin.strip()]


app.add_middleware(
    CORSMiddleware,
    allow_origins=cors_origins(),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(folders_router)
app.include_router(cards_router)
app.include_router(review_router)


@app.get("/")
async def root():
    """Root endpoint with API info."""
    return {
        "name": "Wordcards API",
        "version": "1.0.0",
        "endpoints": {
            "health": "/healthz",
            "folders": "/folders",
            "cards": "/cards/{folder_id}",
            "save": "/api/save",
            "review": "/review",
            "next": "/review/next?folderId={folder_id}",
        },
    }


@app.get("/healthz")
async def healthz():
    """Health check endpoint."""
    return {"status": "healthy"}
