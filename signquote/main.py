from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
import logging

from .config import settings
from .database import engine, Base, SessionLocal
from . import catalog_store
from .routers import quotes, settings as settings_router

logger = logging.getLogger("signquote")

# Create tables (handles new tables but won't add columns to existing ones)
Base.metadata.create_all(bind=engine)

app = FastAPI(
    title="Signquote",
    description="Quoting engine for vinyl and substrate signage",
    version="1.0.0"
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# API routes
app.include_router(quotes.router, prefix="/api")
app.include_router(settings_router.router, prefix="/api")


@app.get("/health")
def health():
    return {"status": "ok", "app": "signquote"}


@app.on_event("startup")
def auto_seed():
    """Seed the built-in media, substrates and cost settings on first run."""
    if not settings.SEED_DEFAULT_CATALOG:
        return
    db = SessionLocal()
    try:
        seeded = catalog_store.seed_defaults(db)
        if any(seeded.values()):
            logger.info("Seeded default catalog: %s", seeded)
    finally:
        db.close()
