"""Demo application serving typed JSON responses with uvicorn."""

import os
from typing import Annotated

import uvicorn
from fastapi import Depends, FastAPI
from fastapi.responses import Response
from loguru import logger

from safejson import (
    JSON_TYPE_INT,
    JSON_TYPE_STRING,
    BoundRenderer,
    install,
    register_exception_handlers,
    render_json_dependency,
)
from safejson.core.config import Settings, get_settings
from safejson.core.logging import setup_logging

HELLO_WORLD = {
    "message": JSON_TYPE_STRING,
}

API_STATUS = {
    "status": JSON_TYPE_INT,
    "message": JSON_TYPE_STRING,
}


def create_app(settings: Settings | None = None) -> FastAPI:
    """Create the demo application.

    Args:
        settings: Optional settings instance. If not provided, will use get_settings().

    Returns:
        FastAPI: Application with the JSON renderer installed.
    """
    if settings is None:
        settings = get_settings()

    setup_logging(settings)

    application = FastAPI(title=settings.app_name, debug=settings.debug)
    renderer = install(application, settings.render_config.model_dump())
    register_exception_handlers(application, renderer.name)

    render_dependency = Depends(render_json_dependency(renderer.name))
    RenderJSON = Annotated[BoundRenderer, render_dependency]  # noqa: N806

    @application.get("/")
    def hello(render_json: RenderJSON) -> Response:
        return render_json({"message": "HELLO!"}, HELLO_WORLD)

    @application.get("/missing")
    def missing(render_json: RenderJSON) -> Response:
        return render_json({"status": 404, "message": "not found"}, API_STATUS, 404)

    return application


def main() -> None:
    """Main entry point for the demo application."""
    settings = get_settings()

    setup_logging(settings)

    # PORT set by the hosting platform takes precedence
    port = int(os.environ.get("PORT", settings.api_port))

    log_config = {
        "version": 1,
        "disable_existing_loggers": False,
        "handlers": {
            "default": {
                "class": "safejson.core.logging.InterceptHandler",
            },
        },
        "loggers": {
            "uvicorn": {"handlers": ["default"], "level": "INFO", "propagate": False},
            "uvicorn.error": {
                "handlers": ["default"],
                "level": "INFO",
                "propagate": False,
            },
            "uvicorn.access": {
                "handlers": ["default"],
                "level": "INFO",
                "propagate": False,
            },
        },
    }

    logger.info(f"Starting Uvicorn on http://{settings.api_host}:{port}")
    uvicorn.run(
        create_app(settings),
        host=settings.api_host,
        port=port,
        log_config=log_config,
    )


if __name__ == "__main__":
    main()
