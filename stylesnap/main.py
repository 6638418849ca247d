import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from stylesnap.api.routes import catalog, tryon
from stylesnap.core.config import ConfigurationError, get_settings
from stylesnap.middleware.logging import LoggingMiddleware

logger = logging.getLogger(__name__)


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings = get_settings()
    logger.info("Starting %s v%s (%s)", settings.project_name, settings.version, settings.environment)
    if not settings.gemini_api_key:
        logger.warning("GEMINI_API_KEY is not set; validation and try-on calls will fail")
    yield
    logger.info("Shutting down...")


async def configuration_error_handler(request: Request, exc: ConfigurationError):
    logger.error("Configuration error on %s: %s", request.url.path, exc)
    return JSONResponse(status_code=503, content={"detail": str(exc)})


def create_app() -> FastAPI:
    settings = get_settings()
    configure_logging(settings.log_level)

    app = FastAPI(
        title=settings.project_name,
        version=settings.version,
        description="Catalog and AI virtual try-on API",
        lifespan=lifespan,
    )
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_middleware(LoggingMiddleware)
    app.add_exception_handler(ConfigurationError, configuration_error_handler)

    app.include_router(catalog.router, prefix="/api", tags=["catalog"])
    app.include_router(tryon.router, prefix="/api", tags=["try-on"])

    @app.get("/health")
    async def health():
        return {"status": "ok", "version": settings.version, "environment": settings.environment}

    @app.get("/")
    async def root():
        return {"name": settings.project_name, "version": settings.version, "docs": "/docs"}

    return app


if __name__ == "__main__":
    import uvicorn

    s = get_settings()
    uvicorn.run("stylesnap.main:create_app", factory=True, host=s.host, port=s.port)
