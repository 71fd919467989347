"""Install the JSON renderer into a FastAPI or Starlette application.

The renderer is registered on ``app.state`` under its configured name
(``render_json`` by default). Handlers receive it bound to the current
request through a dependency:

    app = FastAPI()
    install(app, status_code_field="status")

    @app.get("/")
    def hello(render_json: RenderJSON) -> Response:
        return render_json({"message": "HELLO!"}, {"message": JSON_TYPE_STRING})
"""

from collections.abc import Callable, Mapping
from typing import Annotated, Any

from fastapi import Depends
from loguru import logger
from starlette.requests import Request

from safejson.api.renderer import BoundRenderer, JSONRenderer
from safejson.core.config import RenderConfig, resolve_config
from safejson.core.constants import DEFAULT_METHOD_NAME
from safejson.core.exceptions import ConfigurationError


def install(
    app: Any,
    config: RenderConfig | Mapping[str, Any] | None = None,
    **overrides: Any,
) -> JSONRenderer:
    """Install a JSON renderer on an application.

    Installation is a no-op when a renderer is already registered under the
    configured name; the existing renderer is returned.

    Args:
        app: Application exposing a ``state`` namespace.
        config: A resolved configuration or a partial configuration mapping.
        **overrides: Individual options merged over ``config``.

    Returns:
        JSONRenderer: The renderer registered under the configured name.

    Raises:
        ConfigurationError: If the configuration is invalid.
    """
    if isinstance(config, RenderConfig):
        resolved = (
            resolve_config(config.model_dump(), **overrides) if overrides else config
        )
    else:
        resolved = resolve_config(config, **overrides)

    existing = getattr(app.state, resolved.name, None)
    if existing is not None:
        logger.debug("JSON renderer {} already installed", resolved.name)
        return existing

    renderer = JSONRenderer(resolved)
    setattr(app.state, resolved.name, renderer)

    logger.info(
        "Installed JSON renderer {}",
        resolved.name,
        ascii=resolved.ascii,
        utf8=resolved.utf8,
        canonical=resolved.canonical,
        require_types=resolved.require_types,
        secure_headers=resolved.secure_headers is not None,
        json_escape_filter=resolved.json_escape_filter is not None,
        status_code_field=resolved.status_code_field,
    )
    return renderer


def get_renderer(app: Any, name: str = DEFAULT_METHOD_NAME) -> JSONRenderer:
    """Look up an installed renderer.

    Args:
        app: The application the renderer was installed on.
        name: Name the renderer was installed under.

    Returns:
        JSONRenderer: The installed renderer.

    Raises:
        ConfigurationError: If no renderer is installed under ``name``.
    """
    renderer = getattr(app.state, name, None)
    if not isinstance(renderer, JSONRenderer):
        msg = f"No JSON renderer installed under '{name}'"
        raise ConfigurationError(msg, context={"name": name})
    return renderer


def render_json_dependency(
    name: str = DEFAULT_METHOD_NAME,
) -> Callable[[Request], BoundRenderer]:
    """Create a dependency yielding the named renderer bound to the request.

    Args:
        name: Name the renderer was installed under.

    Returns:
        Callable[[Request], BoundRenderer]: A FastAPI dependency.
    """

    def dependency(request: Request) -> BoundRenderer:
        return get_renderer(request.app, name).bind(request)

    return dependency


RenderJSON = Annotated[BoundRenderer, Depends(render_json_dependency())]
