"""FastAPI application setup for the web UI server."""

from fastapi import FastAPI

from webui import config
from webui.assets import build_asset_tree
from webui.models import VersionInfo
from webui.routes import register


def create_app(settings: config.Settings | None = None) -> FastAPI:
    """Build the application and register the UI on it."""
    settings = settings or config.settings
    app = FastAPI(title="Web UI", version=settings.version)

    version = VersionInfo(
        version=settings.version,
        commit=settings.commit,
        build_date=settings.build_date,
    )
    register(app, version, settings.allow_registration, assets=build_asset_tree(settings), settings=settings)
    return app


app = create_app()
