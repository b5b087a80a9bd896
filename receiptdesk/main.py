"""
receiptdesk — FastAPI application entry‑point.
"""
import logging
import os
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from receiptdesk import __version__
from receiptdesk.config import settings
from receiptdesk.a.database import Base, engine

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s  %(name)-30s  %(levelname)-5s  %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup: ensure data dir + storage table exist
    os.makedirs(settings.DATA_DIR, exist_ok=True)
    # Import models so Base.metadata knows about them
    import receiptdesk.a.models  # noqa: F401
    Base.metadata.create_all(bind=engine)
    logger.info(
        "Storage ready (%s); mode=%s backend=%s",
        settings.DATABASE_URL,
        "local" if settings.mock_enabled else "backend",
        settings.BACKEND_URL,
    )
    yield
    logger.info("Shutting down")


app = FastAPI(
    title="receiptdesk",
    description="Consent receipts → normalized cards → risk dashboard",
    version=__version__,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.get("/")
async def root():
    return {
        "service": "receiptdesk",
        "version": __version__,
        "status": "running",
        "mode": "local" if settings.mock_enabled else "backend",
    }


@app.get("/health")
async def health_check():
    return {"status": "healthy"}


# ── Register API routers ─────────────────────────────────────────────────
from receiptdesk.a.routers.receipts import router as receipts_router  # noqa: E402
from receiptdesk.a.routers.cookies import router as cookies_router  # noqa: E402
from receiptdesk.b.routers.dashboard import router as dashboard_router  # noqa: E402
from receiptdesk.b.routers.revocation import router as revocation_router  # noqa: E402

app.include_router(receipts_router, prefix="/api", tags=["Receipts"])
app.include_router(cookies_router, prefix="/api", tags=["Cookie Receipts"])
app.include_router(dashboard_router, prefix="/api", tags=["Dashboard"])
app.include_router(revocation_router, prefix="/api", tags=["Revocation Requests"])
