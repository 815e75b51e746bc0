"""
storefront_api.api.__main__

Serve the storefront API with uvicorn (`python -m storefront_api.api` or the
`storefront-api` console script). `build_app` is also usable as a uvicorn factory:
`uvicorn --factory storefront_api.api.__main__:build_app`.
"""

from __future__ import annotations

import uvicorn
from fastapi import FastAPI

from storefront_api.api.app import create_app
from storefront_api.observability.logging import get_logger
from storefront_api.settings import get_settings

log = get_logger(__name__)


def build_app() -> FastAPI:
    return create_app(settings=get_settings())


def main() -> None:
    settings = get_settings()
    app = create_app(settings=settings)
    log.info("serving", host=settings.api_host, port=settings.api_port, env=settings.env)

    # structlog owns log formatting; keep uvicorn from installing its own config.
    uvicorn.run(app, host=settings.api_host, port=settings.api_port, log_config=None)


if __name__ == "__main__":
    main()
