from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from okr.api.routes import api_router
from okr.core.config import get_settings
from okr.core.logging import setup_logging
import okr.models  # noqa: F401
from okr.services.bootstrap import bootstrap


def create_app() -> FastAPI:
    settings = get_settings()
    setup_logging(settings.log_level)

    app = FastAPI(
        title=settings.app_name,
        debug=settings.debug,
        docs_url="/docs",
        redoc_url="/redoc",
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.allowed_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(api_router, prefix=settings.api_prefix)

    @app.on_event("startup")
    def _startup() -> None:
        bootstrap()

    return app


app = create_app()
