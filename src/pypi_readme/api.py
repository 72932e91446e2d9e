# -*- coding: utf-8 -*-
"""
FastAPI API for the PyPI README service.
"""
import asyncio
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Query, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse

from . import __version__
from .cache import cache
from .config import settings
from .errors import InvalidParameterError, NetworkError, PackageReadmeError
from .github_client import github_client
from .logging_config import setup_logging
from .middleware import RequestIDMiddleware
from .models import (
    BatchReadmeRequest,
    ExtractExamplesRequest,
    ExtractExamplesResponse,
    HealthResponse,
    PackageInfoResponse,
    PackageReadmeResponse,
    SearchPackagesResponse,
)
from .service import package_service

# Setup structured logging
setup_logging()
logger = logging.getLogger(__name__)


# noinspection PyUnusedLocal
@asynccontextmanager
async def lifespan(_app: FastAPI):
    """Application lifecycle management."""
    logger.info("Starting PyPI README service", extra={"version": __version__})

    await cache.initialize()
    await cache.cleanup_expired()
    if settings.GITHUB_TOKEN and not await github_client.validate_token():
        logger.warning("GITHUB_TOKEN rejected by GitHub, README fallback is rate limited")

    yield

    logger.info("Shutting down PyPI README service")
    await cache.close()


app = FastAPI(
    title="PyPI README Service",
    description="Package metadata and usage examples mined from PyPI documentation",
    version=__version__,
    lifespan=lifespan,
    docs_url="/docs" if settings.DOCS_ENABLED else None,
    redoc_url="/redoc" if settings.DOCS_ENABLED else None,
)

# Middleware stack (order matters: last added = first executed)
app.add_middleware(GZipMiddleware, minimum_size=settings.GZIP_MIN_SIZE)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=settings.CORS_ALLOW_CREDENTIALS,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.add_middleware(RequestIDMiddleware)


@app.exception_handler(PackageReadmeError)
async def package_readme_error_handler(_request: Request, exc: PackageReadmeError):
    """Render domain errors as JSON with their HTTP status."""
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": exc.code, "message": exc.message, "details": exc.details},
    )


@app.get("/health", response_model=HealthResponse)
async def health_check() -> HealthResponse:
    """Service health endpoint."""
    return HealthResponse(
        status="healthy",
        version=__version__,
        cache_ready=cache.is_initialized,
    )


# Must be registered before /packages/{package_name}
@app.get("/packages/search", response_model=SearchPackagesResponse)
async def search_packages(
        q: str = Query(..., description="Search text"),
        limit: int = Query(default=settings.SEARCH_DEFAULT_LIMIT, description="Maximum results"),
        quality: float | None = Query(default=None, description="Minimum quality score (0-1)"),
        popularity: float | None = Query(default=None, description="Minimum popularity score (0-1)"),
) -> SearchPackagesResponse:
    """
    Search PyPI packages through libraries.io.

    - **quality**, **popularity**: Minimum scores; results below are dropped
    """
    return await package_service.search_packages(
        q, limit=limit, quality=quality, popularity=popularity
    )


@app.get("/packages/{package_name}", response_model=PackageInfoResponse)
async def get_package_info(
        package_name: str,
        include_dependencies: bool = True,
        include_dev_dependencies: bool = False,
) -> PackageInfoResponse:
    """
    Metadata of the latest release of a package.

    - **include_dependencies**: Include runtime requirements
    - **include_dev_dependencies**: Include requirements guarded by extras
    """
    return await package_service.get_package_info(
        package_name,
        include_dependencies=include_dependencies,
        include_dev_dependencies=include_dev_dependencies,
    )


@app.get("/packages/{package_name}/readme", response_model=PackageReadmeResponse)
async def get_package_readme(
        package_name: str,
        version: str = Query(default="latest", description="Release or 'latest'"),
        include_examples: bool = Query(default=True, description="Mine usage examples"),
) -> PackageReadmeResponse:
    """
    README content and ranked usage examples of a package.

    Unknown packages or versions return `exists: false` rather than 404.
    """
    return await package_service.get_package_readme(
        package_name, version=version, include_examples=include_examples
    )


@app.post("/packages/readme/batch")
async def get_package_readme_batch(request: BatchReadmeRequest) -> list[PackageReadmeResponse]:
    """
    Fetch READMEs of several packages concurrently.

    A failing package yields an `exists: false` entry instead of failing the batch.
    """
    if len(request.package_names) > settings.MAX_BATCH_SIZE:
        raise InvalidParameterError(
            f"At most {settings.MAX_BATCH_SIZE} packages per batch",
            "INVALID_PARAMETER",
            details={"max_batch_size": settings.MAX_BATCH_SIZE},
        )

    logger.info("Batch README request", extra={"package_count": len(request.package_names)})

    tasks = [
        package_service.get_package_readme(name, include_examples=request.include_examples)
        for name in request.package_names
    ]
    results = await asyncio.gather(*tasks, return_exceptions=True)

    responses = []
    for name, result in zip(request.package_names, results):
        if isinstance(result, PackageReadmeResponse):
            responses.append(result)
        else:
            logger.warning(f"Batch README failed for {name}: {result}")
            responses.append(package_service.failed_response(name, str(result)))
    return responses


@app.post("/readme/examples", response_model=ExtractExamplesResponse)
async def extract_examples(request: ExtractExamplesRequest) -> ExtractExamplesResponse:
    """Clean caller-supplied markdown and mine its usage examples."""
    return package_service.extract_from_text(request.text)


@app.get("/cache/stats")
async def cache_stats() -> dict:
    """Response cache counters."""
    return await cache.get_stats()


@app.get("/github/rate-limit")
async def github_rate_limit() -> dict:
    """Remaining GitHub API quota used by the README fallback."""
    info = await github_client.get_rate_limit_info()
    if info is None:
        raise NetworkError("GitHub rate limit unavailable")
    return info
