import uvicorn
from fastapi import FastAPI

from farmconnect.api.routes.health import router as health_router
from farmconnect.api.routes.internal_offers import router as internal_offers_router
from farmconnect.core.config import get_settings
from farmconnect.core.logging import configure_logging


def create_app() -> FastAPI:
    settings = get_settings()
    configure_logging(settings.log_level)

    app = FastAPI(
        title="FarmConnect Offers API",
        version="0.1.0",
        docs_url="/docs" if settings.app_env == "dev" else None,
        redoc_url="/redoc" if settings.app_env == "dev" else None,
    )
    app.include_router(health_router)
    app.include_router(internal_offers_router)
    return app


app = create_app()


def run() -> None:
    settings = get_settings()
    uvicorn.run(
        "farmconnect.main:app",
        host=settings.app_host,
        port=settings.app_port,
        reload=settings.app_env == "dev",
    )


if __name__ == "__main__":
    run()
