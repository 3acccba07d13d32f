import asyncio
import logging
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

from msa_lending.config import settings
from msa_lending.services.pipeline import run_pipeline
from msa_lending.api.routes import aggregates, health

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


def log_pipeline_outcome(task: asyncio.Task) -> None:
    """Done-callback for the startup pipeline task."""
    if task.cancelled():
        logger.warning("Startup pipeline task was cancelled")
        return
    exc = task.exception()
    if exc is not None:
        logger.error("Startup pipeline raised: %s", exc, exc_info=exc)
    elif task.result() is False:
        logger.warning("Startup pipeline finished without publishing aggregates")


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup: build aggregates off the event loop so queries answer empty meanwhile
    task = None
    if settings.RUN_PIPELINE_ON_STARTUP:
        task = asyncio.create_task(asyncio.to_thread(run_pipeline))
        task.add_done_callback(log_pipeline_outcome)
    app.state.pipeline_task = task
    yield
    # Shutdown: the worker thread cannot be interrupted
    if task is not None and not task.done():
        logger.warning("Shutting down while the aggregation pipeline is still running")


app = FastAPI(title="MSA Lending Aggregates", version="0.1.0", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(aggregates.router)
app.include_router(health.router, prefix="/api")

# Front-end assets; mounted last so the API routes win
if Path(settings.PUBLIC_DIR).is_dir():
    app.mount("/", StaticFiles(directory=settings.PUBLIC_DIR, html=True), name="public")
else:
    logger.info("Public directory %s not found; static files disabled", settings.PUBLIC_DIR)


if __name__ == "__main__":
    import uvicorn

    logger.info("Server starting @ http://localhost:%d", settings.PORT)
    uvicorn.run(app, host=settings.HOST, port=settings.PORT)
