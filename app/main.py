"""FastAPI application entrypoint. No business logic; only wiring, middleware and error pages."""

from dotenv import load_dotenv

load_dotenv()

import logging

from fastapi import FastAPI, Request, status
from fastapi.responses import PlainTextResponse

from app.api import router
from app.core.config import get_settings
from app.core.errors import InternalError, PostNotFoundError
from app.core.middleware import MethodOverrideMiddleware
from app.core.templating import render

# Fails fast (pydantic ValidationError) when JWT_SECRET is missing.
settings = get_settings()

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s %(message)s",
    datefmt="%Y-%m-%dT%H:%M:%SZ",
)
logger = logging.getLogger(__name__)

app = FastAPI(
    title=settings.SITE_TITLE,
    version="0.1.0",
    docs_url="/docs" if settings.APP_ENV == "dev" else None,
    redoc_url=None,
)

app.add_middleware(MethodOverrideMiddleware)

app.include_router(router)


@app.exception_handler(PostNotFoundError)
async def post_not_found(request: Request, exc: PostNotFoundError):
    return render(
        request,
        "404",
        get_settings(),
        title="Not Found",
        message=exc.message,
        status_code=status.HTTP_404_NOT_FOUND,
    )


@app.exception_handler(InternalError)
async def internal_error(request: Request, exc: InternalError):
    logger.error(
        "Request failed: %s",
        exc.message,
        exc_info=exc.cause or exc,
        extra={"path": request.url.path},
    )
    return PlainTextResponse("Internal server error.", status_code=status.HTTP_500_INTERNAL_SERVER_ERROR)


@app.exception_handler(Exception)
async def unhandled_error(request: Request, exc: Exception):
    logger.error("Unhandled error", exc_info=exc, extra={"path": request.url.path})
    return PlainTextResponse("Internal server error.", status_code=status.HTTP_500_INTERNAL_SERVER_ERROR)
