# -*- coding: utf-8 -*-
"""
Entry point to run the service via python -m pypi_readme.
"""
import uvicorn

from pypi_readme.config import settings


def main():
    """Start the Uvicorn server."""
    uvicorn.run(
        "pypi_readme.api:app",
        host=settings.HOST,
        port=settings.PORT,
        reload=False,
        log_level=settings.LOG_LEVEL.lower(),
    )


if __name__ == "__main__":
    main()
