# followgraph/main.py
from fastapi import FastAPI, HTTPException, Request
from fastapi.responses import JSONResponse
import logging
import traceback

from followgraph.api.v1.api import api_router
from followgraph.core.config import settings
from followgraph.core.exceptions import InvalidFollowArgument
from followgraph.core.logging_config import setup_api_logger, setup_logging
from followgraph.db.base import engine
from followgraph.db.base_class import Base

setup_logging(settings.LOG_LEVEL)
logger = logging.getLogger(__name__)
api_logger = setup_api_logger(settings.API_LOG_PATH or None)


def create_app(create_tables: bool = True) -> FastAPI:
    app = FastAPI(title=settings.APP_NAME)

    if create_tables:
        # Alembic owns the schema in production; this covers local sqlite runs
        Base.metadata.create_all(bind=engine)

    @app.exception_handler(InvalidFollowArgument)
    async def invalid_argument_handler(request: Request, exc: InvalidFollowArgument):
        api_logger.warning("Invalid follow argument on %s %s | %s", request.method, request.url.path, str(exc))
        return JSONResponse(status_code=422, content={"detail": str(exc)})

    @app.exception_handler(HTTPException)
    async def http_exception_handler(request: Request, exc: HTTPException):
        api_logger.warning("HTTPException on %s %s | status=%s | detail=%s",
                           request.method, request.url.path, exc.status_code, str(exc.detail))
        return JSONResponse(status_code=exc.status_code, content={"detail": exc.detail})

    @app.exception_handler(Exception)
    async def generic_exception_handler(request: Request, exc: Exception):
        api_logger.error("Unhandled exception on %s %s | error=%s\n%s",
                         request.method, request.url.path, str(exc), traceback.format_exc())
        return JSONResponse(status_code=500, content={"detail": "Internal Server Error"})

    @app.get("/health")
    async def health():
        return {"status": "ok"}

    app.include_router(api_router, prefix="/api/v1")
    logger.info(f"{settings.APP_NAME} started (cache backend: {settings.CACHE_BACKEND})")
    return app


app = create_app()
