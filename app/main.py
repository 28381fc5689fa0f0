from typing import Optional
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from contextlib import asynccontextmanager
import uvicorn

from app.core.config import Settings, get_settings
from app.core.database import Database
from app.core.exceptions import register_exception_handlers
from app.core.logging import setup_logging
from app.controllers import product_controller
from app.dao.product_dao import ProductDAO
from app.middleware.logging_middleware import LoggingMiddleware
from app.services.product_service import ProductService

API_VERSION = "1.0.0"


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or get_settings()
    logger = setup_logging(settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info("Application startup", environment=settings.environment)
        database = Database(settings)
        try:
            await database.create_tables()
            logger.info("Database initialized successfully")
        except Exception as e:
            logger.error("Failed to initialize database", error=str(e))
            await database.close()
            raise

        app.state.database = database
        yield

        logger.info("Application shutdown")
        await database.close()
        logger.info("Database connections closed")

    app = FastAPI(
        title="Products API",
        description="CRUD API for products with JWT-authenticated writes",
        version=API_VERSION,
        lifespan=lifespan,
        docs_url="/docs" if settings.environment == "local" else None,
        redoc_url="/redoc" if settings.environment == "local" else None,
    )
    app.state.settings = settings
    app.state.product_service = ProductService(
        ProductDAO(), enforce_ownership=settings.enforce_ownership
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_middleware(LoggingMiddleware)

    register_exception_handlers(app)

    app.include_router(product_controller.router, prefix=settings.api_prefix)

    @app.get("/")
    async def root():
        return {
            "message": "Products API is running",
            "version": API_VERSION,
            "environment": settings.environment,
            "docs_url": "/docs" if settings.environment == "local" else "Documentation disabled in production"
        }

    @app.get("/health")
    async def health_check():
        return {
            "status": "healthy",
            "environment": settings.environment,
        }

    return app


app = create_app()


if __name__ == "__main__":
    uvicorn.run(
        "app.main:app",
        host="0.0.0.0",
        port=8000,
        reload=get_settings().environment == "local",
        log_config=None
    )
