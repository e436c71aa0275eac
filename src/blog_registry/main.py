"""
# Blog Registry Application

FastAPI application hosting the blog registry.

## Lifespan

**Startup:**
1.  Build the `RegistryState` for the configured backend. With MongoDB, connect and
    ensure indexes first.
2.  Create the `BlogRegistryManager` once, seeding the denylist from
    `settings.INITIAL_DENYLIST`, and attach it to `app.state.registry`.

**Shutdown:**
1.  Disconnect from MongoDB when it was used.

## Running

```bash
uvicorn blog_registry.main:app --host 127.0.0.1 --port 8000
# or
blog-registry
```
"""

import time
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI

from blog_registry.config import settings
from blog_registry.database import RegistryState, db_manager
from blog_registry.managers.blog_registry_manager import BlogRegistryManager
from blog_registry.managers.logging_manager import get_logger, log_application_lifecycle
from blog_registry.models.blog_models import HealthResponse
from blog_registry.routes.blog import router as blog_router

logger = get_logger()


async def build_registry_state() -> RegistryState:
    """Create the registry collections for the configured storage backend."""
    if settings.uses_mongodb:
        await db_manager.connect()
        await db_manager.create_indexes()
        return RegistryState.from_database(db_manager)
    return RegistryState.in_memory()


@asynccontextmanager
async def lifespan(_app: FastAPI):
    """
    Application lifespan manager.

    Raises:
        Exception: If the storage backend cannot be initialized; startup is aborted.
    """
    startup_start_time = time.time()
    log_application_lifecycle(
        "startup_initiated",
        {
            "registry_account": settings.REGISTRY_ACCOUNT_ID,
            "storage_backend": settings.STORAGE_BACKEND,
            "debug_mode": settings.DEBUG,
        },
    )

    try:
        state = await build_registry_state()
        _app.state.registry = await BlogRegistryManager.init(state, denylist=settings.INITIAL_DENYLIST)
    except Exception as e:
        logger.error("Failed to initialize registry state: %s", e, exc_info=True)
        log_application_lifecycle("startup_failed", {"error": str(e)})
        raise

    log_application_lifecycle("startup_completed", {"duration": f"{time.time() - startup_start_time:.3f}s"})

    yield

    shutdown_start_time = time.time()
    log_application_lifecycle("shutdown_initiated")
    if settings.uses_mongodb:
        await db_manager.disconnect()
    log_application_lifecycle("shutdown_completed", {"duration": f"{time.time() - shutdown_start_time:.3f}s"})


def create_app() -> FastAPI:
    app = FastAPI(
        title="Blog Registry API",
        description="""
    ## Blog Registry API

    Persistent registry of a decentralized blogging platform: authors, moderators,
    a denylist, and blog posts whose content lives in an external content-addressed store.

    ### Calling convention
    - Mutating procedures are `POST /registry/<name>` with one JSON body object.
    - Views are `GET /registry/<name>` with query parameters.
    - The caller is identified by `X-Signer-Account-Id`; payable procedures also need
      `X-Attached-Deposit`.
    """,
        version="1.0.0",
        lifespan=lifespan,
        redirect_slashes=False,
        openapi_tags=[
            {"name": "registry", "description": "Moderators, authors and blog posts"},
            {"name": "health", "description": "Service health"},
        ],
    )

    @app.get("/health", response_model=HealthResponse, tags=["health"])
    async def health():
        storage_healthy = await db_manager.health_check() if settings.uses_mongodb else True
        return HealthResponse(
            status="healthy" if storage_healthy else "degraded",
            storage_backend=settings.STORAGE_BACKEND,
            storage_healthy=storage_healthy,
        )

    app.include_router(blog_router)
    return app


app = create_app()


def run() -> None:
    """Console entry point: serve the application with uvicorn."""
    uvicorn.run("blog_registry.main:app", host=settings.HOST, port=settings.PORT, reload=settings.DEBUG)


if __name__ == "__main__":
    run()
