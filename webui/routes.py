"""Wire the web UI onto a FastAPI application."""

from typing import Any, Mapping, Optional

from fastapi import APIRouter, FastAPI
from fastapi.routing import APIRoute
from starlette.middleware.gzip import GZipMiddleware

from webui import config
from webui.assets import AssetTree, load_bundled
from webui.handler import ServingHandler, create_handler
from webui.models import UIConfig, VersionInfo
from utils.logging_utils import get_tagged_logger

logger = get_tagged_logger(__name__, tag="routes")


def gzip_route_class(minimum_size: int, compresslevel: int) -> type[APIRoute]:
    """Build an APIRoute subclass whose endpoint app is wrapped in GZipMiddleware."""

    class GZipRoute(APIRoute):
        def __init__(self, *args: Any, **kwargs: Any) -> None:
            super().__init__(*args, **kwargs)
            self.app = GZipMiddleware(self.app, minimum_size=minimum_size, compresslevel=compresslevel)

    return GZipRoute


def register(
    app: FastAPI,
    version: VersionInfo | Mapping[str, Any],
    allow_registration: bool,
    *,
    assets: Optional[AssetTree] = None,
    settings: Optional[config.Settings] = None,
) -> ServingHandler:
    """
    Register the UI routes on the root path.

    Only the five UI routes are compressed; the host app's other routes and
    middleware stack are left alone. Call once during startup. Raises
    StartupError when the config cannot be serialized or the bundle has no
    index page.
    """
    settings = settings or config.settings
    ui_config = UIConfig(register=allow_registration, version=version)
    handler = create_handler(ui_config.to_json_bytes(), assets if assets is not None else load_bundled())

    router = APIRouter(
        include_in_schema=False,
        route_class=gzip_route_class(settings.gzip_minimum_size, settings.gzip_compresslevel),
    )
    router.add_api_route("/", handler.serve_index, methods=["GET"])
    router.add_api_route("/index.html", handler.serve_index, methods=["GET"])

    router.add_api_route("/manifest.json", handler.serve_other, methods=["GET"])
    router.add_api_route("/asset-manifest.json", handler.serve_other, methods=["GET"])
    router.add_api_route("/static/{path:path}", handler.serve_other, methods=["GET"])
    app.include_router(router)

    logger.info(f"Registered UI routes (registration {'enabled' if allow_registration else 'disabled'})")
    return handler
