import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from registry_ui.core.dependencies import get_orchestrator
from registry_ui.api.auth import router as auth_router
from registry_ui.api.browser import router as browser_router

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Restore the persisted session and load the package catalog before
    serving requests.
    """
    logger.info("Running bootstrap")
    await get_orchestrator().run()
    yield


app = FastAPI(
    title="Registry UI",
    version="0.1.0",
    description="Session, catalog and search core of a package registry web client.",
    lifespan=lifespan,
)


@app.get("/health")
async def health() -> dict:
    """
    Lightweight health check endpoint.
    """
    return {"status": "ok"}


app.include_router(browser_router, prefix="/api", tags=["browser"])
app.include_router(auth_router, prefix="/api", tags=["auth"])


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "registry_ui.main:app",
        host="127.0.0.1",
        port=8000,
        reload=True,
    )
