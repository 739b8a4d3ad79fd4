"""
Palimpsest FastAPI Application

Hosts the scratch reconciler as a background task and exposes its status,
so editors' writers can check the autosave flag before saving directly
into the permanent archive.
"""

from contextlib import asynccontextmanager
from typing import Any

from fastapi import FastAPI, HTTPException, Query
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel

from src.config import Config
from src.core.document_store.base import DocumentStore
from src.core.factory import DocumentStoreFactory, MergeEngineFactory
from src.models.reconciliation import SchedulerState
from src.services.reconciler import ReconciliationScheduler
from src.utils.exceptions import DocumentStoreError
from src.utils.logger import get_logger, setup_logging

# Global instances
reconciler: ReconciliationScheduler | None = None
store: DocumentStore | None = None
logger = get_logger(__name__)


class HealthResponse(BaseModel):
    """Health check response."""

    status: str
    reconciler_running: bool
    store_backend: str
    merge_engine: str


class ReconcilerStatusResponse(BaseModel):
    """Reconciler status response."""

    state: str
    busy: bool
    holder: str | None = None
    restarts: int
    last_error: str | None = None
    last_report: dict[str, Any] | None = None


class ArchiveListResponse(BaseModel):
    """Committed documents in one archive collection."""

    collection: str
    pattern: str
    docids: list[str]


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Lifespan context manager for startup/shutdown."""
    global reconciler, store

    # Load configuration from environment or use defaults
    config = Config.from_env()

    # Initialize logging with config
    setup_logging(
        level=config.logging.level,
        log_to_file=config.logging.log_to_file,
        log_dir=config.logging.log_dir,
        file_rotation=config.logging.file_rotation,
        file_retention=config.logging.file_retention,
        compression=config.logging.compression,
        serialize=config.logging.serialize,
    )

    logger.info("Starting Palimpsest server")
    logger.info(
        f"Configuration: Store={config.store.backend}, Merge={config.merge.engine}, "
        f"Poll={config.reconciler.poll_interval}s"
    )

    logger.info("Creating document store")
    store = DocumentStoreFactory.create(config.store)
    await store.initialize()

    logger.info("Creating merge engine")
    engine = MergeEngineFactory.create(config.merge)

    reconciler = ReconciliationScheduler(store=store, engine=engine, config=config)
    reconciler.start()
    logger.info("Reconciler running")

    app.state.config = config

    yield

    # Cleanup
    logger.info("Shutting down Palimpsest server")
    await reconciler.stop()
    await store.close()
    reconciler = None
    store = None
    logger.info("Cleanup complete")


# Create FastAPI app
app = FastAPI(
    title="Palimpsest API",
    description="Scratch reconciliation for versioned manuscript archives",
    version="1.0.0",
    lifespan=lifespan,
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# Health check endpoint
@app.get("/health", response_model=HealthResponse)
async def health_check():
    """Health check endpoint."""
    config: Config | None = getattr(app.state, "config", None)
    return HealthResponse(
        status="healthy" if reconciler else "initializing",
        reconciler_running=reconciler is not None and reconciler.state != SchedulerState.STOPPED,
        store_backend=config.store.backend if config else "unknown",
        merge_engine=config.merge.engine if config else "unknown",
    )


@app.get("/reconciler/status", response_model=ReconcilerStatusResponse)
async def reconciler_status():
    """
    Reconciler state and the autosave flag.

    Writers saving straight into cortex or corcode should hold off while
    `busy` is true.
    """
    if not reconciler:
        raise HTTPException(status_code=503, detail="Reconciler not initialized")

    return ReconcilerStatusResponse(**reconciler.status())


@app.get("/archives/{collection}", response_model=ArchiveListResponse)
async def list_archives(
    collection: str,
    pattern: str = Query(default=".*", description="Regex the whole docid must match"),
):
    """List committed docids in the cortex or corcode collection."""
    if not reconciler:
        raise HTTPException(status_code=503, detail="Reconciler not initialized")

    allowed = {
        reconciler.config.store.cortex_collection,
        reconciler.config.store.corcode_collection,
    }
    if collection not in allowed:
        raise HTTPException(status_code=404, detail=f"Unknown archive collection: {collection}")

    try:
        docids = await reconciler.repository.list_documents(collection, pattern)
    except DocumentStoreError as e:
        raise HTTPException(status_code=400, detail=e.message) from e

    return ArchiveListResponse(collection=collection, pattern=pattern, docids=docids)


# Root endpoint
@app.get("/")
async def root():
    """Root endpoint with API information."""
    return {
        "name": "Palimpsest API",
        "version": "1.0.0",
        "description": "Scratch reconciliation for versioned manuscript archives",
        "docs": "/docs",
        "health": "/health",
    }


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("app:app", host="0.0.0.0", port=8000, reload=True, log_level="info")
