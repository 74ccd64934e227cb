import logging
from typing import AsyncGenerator
from contextlib import asynccontextmanager

from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession
from fastapi import FastAPI, Depends, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException

from app import API_PREFIX
from app.core.config import settings
from app.core.database import engine, get_session, create_db_and_tables
from app.core.exceptions import Fatal
from app.core.logging import setup_logging

from app.domains.shared.routers import router as shared_router
from app.domains.usr.routers import router as usr_router
from app.domains.inv.routers import router as inv_router

logger = logging.getLogger(__name__)


# -- application lifespan --
@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Configures logging and makes sure the tables exist on start-up; releases
    the connection pool on shutdown.
    """
    setup_logging()
    logger.info("Starting %s %s (%s)", settings.APP_NAME, settings.APP_VERSION, settings.APP_ENV)
    try:
        await create_db_and_tables()
    except Exception:
        logger.exception("Database initialisation failed")
        raise

    yield

    logger.info("Shutting down %s", settings.APP_NAME)
    await engine.dispose()


app = FastAPI(
    title=settings.APP_NAME,
    description=settings.APP_DESCRIPTION,
    version=settings.APP_VERSION,
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# -- error rendering --
def _field_name(loc) -> str:
    parts = [str(part) for part in loc if part not in ("body", "query", "path", "header", "form")]
    return ".".join(parts) or "body"


def _error_message(message: str) -> str:
    # pydantic prefixes errors raised inside validators
    return message.removeprefix("Value error, ")


@app.exception_handler(HTTPException)
async def http_exception_handler(request: Request, exc: HTTPException):
    """Every AppError and HTTPException leaves as {"error": message}."""
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": exc.detail},
        headers=getattr(exc, "headers", None),
    )


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    errors = [
        {"field": _field_name(error.get("loc", ())), "message": _error_message(error.get("msg", ""))}
        for error in exc.errors()
    ]
    logger.debug("Rejected %s %s: %s", request.method, request.url.path, errors)
    return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content={"errors": errors})


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"error": "Internal server error"},
    )


# -- domain routers --
app.include_router(shared_router, prefix=f"{API_PREFIX}/shared")
app.include_router(usr_router, prefix=f"{API_PREFIX}/usr")
app.include_router(inv_router, prefix=f"{API_PREFIX}/inv")


@app.get("/", summary="API Root", response_description="Welcome message and documentation link.")
async def read_root():
    return {"message": f"Welcome to {settings.APP_NAME}. Visit /docs for interactive API documentation."}


@app.get("/health-check", summary="Health Check", response_description="Status of the application and database connection.")
async def health_check(session: AsyncSession = Depends(get_session)):
    """
    Runs a trivial query to confirm the database answers.
    """
    try:
        result = await session.exec(select(1))
        row = result.first()
    except Exception as e:
        logger.error("Health check failed: %s", e)
        raise Fatal(f"Database connection error during health check: {e}")
    if not row:
        raise Fatal("Database health check failed: No result from test query")
    return {"status": "ok", "database_connection": "successful"}
