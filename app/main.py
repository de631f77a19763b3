import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from sqlalchemy import select

from app.api.router import api_router
from app.core.config import get_settings
from app.core.security import hash_password
from app.db.session import create_schema, get_session_factory
from app.models.operator import Operator

logger = logging.getLogger(__name__)


def _bootstrap_operator(login: str, password: str) -> None:
    with get_session_factory()() as db:
        existing = db.scalar(select(Operator).where(Operator.login == login))
        if not existing:
            db.add(Operator(login=login, password_hash=hash_password(password)))
            db.commit()
            logger.info("Bootstrap operator %s created.", login)


def create_app() -> FastAPI:
    settings = get_settings()

    @asynccontextmanager
    async def lifespan(_: FastAPI):
        if settings.auto_create_schema:
            create_schema()
        if settings.auto_create_operator:
            _bootstrap_operator(settings.bootstrap_operator_login, settings.bootstrap_operator_password)
        yield

    app = FastAPI(title=settings.app_name, version=settings.app_version, lifespan=lifespan)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(Exception)
    async def internal_error_handler(request: Request, exc: Exception):
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        return JSONResponse(status_code=500, content={"success": False, "error": "Internal server error"})

    app.include_router(api_router, prefix=settings.api_v1_prefix)
    # dashboard assets; mounted last so API routes take precedence
    if settings.static_path.is_dir():
        app.mount("/", StaticFiles(directory=str(settings.static_path), html=True), name="static")

    return app


app = create_app()
