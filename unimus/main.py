from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from structlog import get_logger

import unimus.logging  # noqa  # import to ensure logger is configured
from unimus.api.dependencies.database import async_init, get_engine
from unimus.api.routes import (
    curation_reviews,
    dashboard,
    dataset_files,
    datasets,
    profiles,
    reports,
    users,
)
from unimus.config import get_settings
from unimus.errors import UnimusError
from unimus.middleware.logging import (
    ErrorHandlingMiddleware,
    LogProcessTimeMiddleware,
    LogRequestIdMiddleware,
)
from unimus.models.base import utcnow

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings = get_settings()
    engine = get_engine(settings.SQLALCHEMY_DATABASE_URL)

    # create any missing tables
    await async_init(engine)
    logger.info("Started", environment=settings.UNIMUS_ENV)

    yield

    await engine.dispose()


app = FastAPI(title="Unimus", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=get_settings().CORS_ORIGINS,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.add_middleware(ErrorHandlingMiddleware)
app.add_middleware(LogProcessTimeMiddleware)
app.add_middleware(LogRequestIdMiddleware)

app.include_router(users.router)
app.include_router(profiles.router)
app.include_router(datasets.router)
app.include_router(dataset_files.router)
app.include_router(curation_reviews.router)
app.include_router(reports.router)
app.include_router(dashboard.router)


@app.exception_handler(UnimusError)
async def handle_domain_error(request: Request, exc: UnimusError) -> JSONResponse:
    logger.info(
        "Request rejected",
        error=type(exc).__name__,
        detail=exc.detail,
        path=request.url.path,
    )
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.detail})


@app.get("/")
@app.get("/healthcheck")
async def healthcheck():
    return {"status": "ok", "timestamp": utcnow().isoformat()}
