"""
HTTP API: job listing and statistics endpoints.

Both endpoints are read-only and stateless. The JobStore is built by
create_app() and reached from handlers through a FastAPI dependency.
"""

from contextlib import asynccontextmanager
from typing import Optional

from fastapi import APIRouter, Depends, FastAPI, Request
from fastapi.responses import JSONResponse, Response
from starlette.exceptions import HTTPException as StarletteHTTPException

from .config import Settings, load_settings
from .database import JobStore
from .env import load_env
from .logger import StructuredLogger, get_logger
from .models import JobListResponse, JobPostingOut, Pagination, StatisticsResponse
from .queries import fetch_job_page, fetch_statistics
from .schema import parse_listing_params

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "GET, POST, PUT, DELETE, OPTIONS",
    "Access-Control-Allow-Headers": "Content-Type, Authorization",
}

JOBS_ERROR = "Failed to fetch job postings"
STATISTICS_ERROR = "Failed to fetch statistics"
METHOD_NOT_ALLOWED = "Method not allowed"

router = APIRouter(prefix="/api")


def get_store(request: Request) -> JobStore:
    return request.app.state.store


def get_api_logger(request: Request) -> StructuredLogger:
    return request.app.state.logger


def error_response(status_code: int, message: str, headers: Optional[dict] = None) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message}, headers=headers)


@router.get("/jobs", response_model=JobListResponse)
def list_jobs(
    request: Request,
    store: JobStore = Depends(get_store),
    logger: StructuredLogger = Depends(get_api_logger),
):
    """Return one page of job postings plus pagination metadata."""
    endpoint = "/api/jobs"
    logger.record_request_attempt(endpoint)
    params = parse_listing_params(request.query_params)

    try:
        with store.session() as session:
            page = fetch_job_page(session, params)
            body = JobListResponse(
                job_postings=[JobPostingOut.model_validate(p) for p in page.postings],
                pagination=Pagination(
                    page=page.page,
                    limit=page.limit,
                    total=page.total,
                    total_pages=page.total_pages,
                ),
            )
    except Exception as e:
        logger.error(
            f"Error fetching jobs: {e}",
            endpoint=endpoint,
            error_type=type(e).__name__,
            page=params.page,
            limit=params.limit,
            sort_by=params.sort_by.value,
        )
        logger.record_request_failure(endpoint, type(e).__name__)
        return error_response(500, JOBS_ERROR)

    logger.record_request_success(endpoint)
    logger.debug(
        "Served job page",
        page=page.page,
        limit=page.limit,
        returned=len(page.postings),
        total=page.total,
    )
    return body


@router.get("/statistics", response_model=StatisticsResponse)
def get_statistics(
    store: JobStore = Depends(get_store),
    logger: StructuredLogger = Depends(get_api_logger),
):
    """Return total, urgent, new and distinct-ministry counts."""
    endpoint = "/api/statistics"
    logger.record_request_attempt(endpoint)

    try:
        with store.session() as session:
            stats = fetch_statistics(session)
    except Exception as e:
        logger.error(f"Error fetching statistics: {e}", endpoint=endpoint, error_type=type(e).__name__)
        logger.record_request_failure(endpoint, type(e).__name__)
        return error_response(500, STATISTICS_ERROR)

    logger.record_request_success(endpoint)
    return StatisticsResponse(
        total_jobs=stats.total_jobs,
        urgent_jobs=stats.urgent_jobs,
        new_jobs=stats.new_jobs,
        ministries=stats.ministries,
    )


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    message = METHOD_NOT_ALLOWED if exc.status_code == 405 else str(exc.detail)
    return error_response(exc.status_code, message, headers=exc.headers)


def create_app(
    settings: Settings,
    store: Optional[JobStore] = None,
    logger: Optional[StructuredLogger] = None,
) -> FastAPI:
    """
    Build the API application.

    Args:
        settings: Loaded settings
        store: Store to query (default: built from settings.database_url)
        logger: Logger to use (default: the global logger configured from settings)

    Returns:
        FastAPI application
    """
    if store is None:
        store = JobStore(settings.database_url)
    if logger is None:
        logger = get_logger(
            level=settings.log_level,
            log_dir=settings.log_dir,
            enable_file=settings.log_dir is not None,
        )

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info("API starting", host=settings.host, port=settings.port)
        yield
        logger.log_metrics_summary()
        store.dispose()

    app = FastAPI(title="jobboard", lifespan=lifespan)
    app.state.store = store
    app.state.logger = logger
    app.state.settings = settings

    @app.middleware("http")
    async def cors(request: Request, call_next):
        # Pre-flight: answered for any path, no body.
        if request.method == "OPTIONS":
            response = Response(status_code=200)
        else:
            response = await call_next(request)
        response.headers.update(CORS_HEADERS)
        return response

    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.include_router(router)
    return app


def create_app_from_env() -> FastAPI:
    """Application factory for ASGI servers; fails if DATABASE_URL is unset."""
    load_env()
    return create_app(load_settings())
