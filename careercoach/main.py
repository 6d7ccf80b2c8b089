"""
Main FastAPI application entry point.
"""
from contextlib import asynccontextmanager
import logging

from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from careercoach.core.config import settings
from careercoach.core.database import init_db
from careercoach.core.errors import GENERATION_ERRORS, ConflictRetryExhausted, NotFound
from careercoach.core.log_config import configure_logging
from careercoach.services.generative import get_generative_client
from careercoach.api.auth import router as auth_router
from careercoach.api.insights import router as insights_router
from careercoach.api.assessments import router as assessments_router
from careercoach.api.users import router as users_router
from careercoach.api.documents import resume_router, letters_router
from careercoach.api.admin import router as admin_router

logger = logging.getLogger(__name__)

GENERATION_RETRY_MESSAGE = "Could not generate content, please try again."


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan manager.
    """
    configure_logging()
    logger.info("Starting %s %s", settings.APP_NAME, settings.APP_VERSION)
    init_db()
    # one shared generative client for the whole process
    client = get_generative_client()
    yield
    client.close()
    logger.info("Shutdown complete")


app = FastAPI(title=settings.APP_NAME, version=settings.APP_VERSION, lifespan=lifespan)
app.add_middleware(CORSMiddleware, allow_origins=settings.cors_origins(), allow_credentials=True, allow_methods=["*"], allow_headers=["*"])


def _error(status_code: int, message: str, type_: str, **extra) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": {"message": message, "type": type_, **extra}})


async def generation_failure_handler(request: Request, exc):
    """Generation and validation failures: generic retry message."""
    logger.warning("Generation failed on %s: %s (%s)", request.url.path, exc.kind, exc.detail or exc.message)
    return _error(status.HTTP_502_BAD_GATEWAY, GENERATION_RETRY_MESSAGE, exc.kind)


for _exc in GENERATION_ERRORS:
    app.add_exception_handler(_exc, generation_failure_handler)


@app.exception_handler(NotFound)
async def not_found_handler(request: Request, exc: NotFound):
    return _error(status.HTTP_404_NOT_FOUND, exc.message, exc.kind)


@app.exception_handler(ConflictRetryExhausted)
async def conflict_handler(request: Request, exc: ConflictRetryExhausted):
    logger.error("Insight creation did not settle: %s", exc.message)
    return _error(status.HTTP_409_CONFLICT, exc.message, exc.kind)


@app.exception_handler(ValueError)
async def value_error_handler(request: Request, exc: ValueError):
    return _error(status.HTTP_400_BAD_REQUEST, str(exc), "invalid_request")


@app.exception_handler(SQLAlchemyError)
async def persistence_error_handler(request: Request, exc: SQLAlchemyError):
    logger.error("Persistence error on %s: %s", request.url.path, exc, exc_info=True)
    return _error(status.HTTP_503_SERVICE_UNAVAILABLE, "Could not save your data, please try again.", "persistence_error")


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    return _error(status.HTTP_422_UNPROCESSABLE_ENTITY, "Validation error", "validation_error", details=jsonable_encoder(exc.errors()))


app.include_router(auth_router, prefix=f"{settings.API_V1_PREFIX}/auth", tags=["auth"])
app.include_router(users_router, prefix=f"{settings.API_V1_PREFIX}/users", tags=["users"])
app.include_router(insights_router, prefix=f"{settings.API_V1_PREFIX}/insights", tags=["insights"])
app.include_router(assessments_router, prefix=f"{settings.API_V1_PREFIX}/assessments", tags=["assessments"])
app.include_router(resume_router, prefix=f"{settings.API_V1_PREFIX}/resume", tags=["resume"])
app.include_router(letters_router, prefix=f"{settings.API_V1_PREFIX}/cover-letters", tags=["cover-letters"])
app.include_router(admin_router, prefix=f"{settings.API_V1_PREFIX}/admin", tags=["admin"])


@app.get("/health")
def health(): return {"status": "ok", "version": settings.APP_VERSION}


if __name__ == "__main__":
    import uvicorn
    uvicorn.run("careercoach.main:app", host="0.0.0.0", port=8000, log_level=settings.LOG_LEVEL.lower())
