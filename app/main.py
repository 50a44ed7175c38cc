from fastapi import Depends, FastAPI
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import Optional
import logging
import uvicorn

from .core.config import Settings, settings
from .core.dependencies import get_product_store
from .core.di_config import configure_dependencies, validate_container_setup
from .core.middleware import RequestLoggingMiddleware
from .domains.products.repository import InMemoryProductStore
from .domains.products.router import router as products_router
from .shared.exceptions.handlers import register_exception_handlers

# Logging setup
logging.basicConfig(
    level=getattr(logging, settings.log_level),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)

logger = logging.getLogger(__name__)

HEALTH_MESSAGE = "The application is working correctly!"


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifecycle management"""
    logger.info("Starting application...")

    container = app.state.container
    if app.state.settings.debug:
        logger.info("Validating dependency registrations...")
        validation_results = validate_container_setup(container)
        failed = [name for name, result in validation_results.items() if result["status"] == "error"]
        if failed:
            for name in failed:
                logger.error(f"{name}: {validation_results[name]['error']}")
            raise RuntimeError(f"Dependency validation failed: {failed}")
        logger.info("All dependency registrations resolved")

    logger.info("Application started")

    yield

    logger.info("Shutting down application...")
    store = container.resolve(InMemoryProductStore)
    logger.info(f"Discarding {store.count()} in-memory products")
    logger.info("Application shut down")


def create_app(
    app_settings: Optional[Settings] = None,
    store: Optional[InMemoryProductStore] = None
) -> FastAPI:
    """
    Build the application.

    Each call gets its own container, so its own product store unless one
    is passed in.
    """
    app_settings = app_settings or settings

    app = FastAPI(
        title=app_settings.app_name,
        description="""
    Minimal CQRS service over an in-memory product store.

    Every request is turned into a command or a query and dispatched by the
    mediator to the single handler bound to its type.

    - `POST /api/products` creates a product and returns its id
    - `GET /api/products/{id}` returns a product or 404
    - `GET /test` is a static health check
    """,
        version=app_settings.api_version,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        debug=app_settings.debug,
        lifespan=lifespan
    )

    app.state.settings = app_settings
    app.state.container = configure_dependencies(app_settings, store=store)

    app.add_middleware(RequestLoggingMiddleware)
    register_exception_handlers(app)

    app.include_router(products_router, prefix=app_settings.api_prefix)

    @app.get(
        "/test",
        tags=["Health"],
        summary="Static health check",
        response_model=str
    )
    def test_endpoint() -> str:
        """Confirms the application is up"""
        return HEALTH_MESSAGE

    @app.get(
        "/health",
        tags=["Health"],
        summary="Service status"
    )
    def health_check(store: InMemoryProductStore = Depends(get_product_store)):
        """Status, version and number of stored products"""
        return {
            "status": "healthy",
            "timestamp": datetime.now(timezone.utc).isoformat().replace('+00:00', 'Z'),
            "version": app_settings.api_version,
            "products": store.count()
        }

    return app


app = create_app()


if __name__ == "__main__":
    uvicorn.run(
        "app.main:app",
        host=settings.app_host,
        port=settings.app_port,
        reload=settings.debug,
        log_level=settings.log_level.lower()
    )
