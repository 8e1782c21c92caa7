import logging

from fastapi import FastAPI

from dpm_registry.api.registry import router as registry_router
from dpm_registry.core.dependencies import get_registry_store

# Configure logging
logging.basicConfig(
    level=logging.DEBUG,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)


app = FastAPI(
    title="dpm package registry",
    version="0.1.0",
    description="Publishes a JSON package registry and accepts edits to it.",
)


@app.on_event("startup")
async def startup_event() -> None:
    """
    Resolve the data directory, load the configuration and the registry
    document before the first request.
    """
    store = get_registry_store()
    logger.info(f"Serving {store.get_config().display_name} from {store.data_dir}")


@app.get("/health")
async def health() -> dict:
    """
    Lightweight health check endpoint.
    """
    return {"status": "ok"}


app.include_router(registry_router, tags=["registry"])


if __name__ == "__main__":
    """
    Allow running `python -m dpm_registry.main` to start the Uvicorn
    development server.
    """
    import uvicorn

    uvicorn.run(
        "dpm_registry.main:app",
        host="0.0.0.0",
        port=8000,
        reload=True,
    )
