"""Entry point: python -m logs_api"""

from __future__ import annotations

import logging

import uvicorn

from common.config import get_settings


def main() -> None:
    settings = get_settings()
    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=[logging.StreamHandler()],
    )

    from .main import create_app

    logging.getLogger(__name__).info(
        "TideLogs backend starting on %s:%s", settings.api_host, settings.api_port
    )
    uvicorn.run(create_app(settings=settings), host=settings.api_host, port=settings.api_port)


if __name__ == "__main__":
    main()
