"""Choose where the asset bundle is loaded from at startup."""

from __future__ import annotations

from webui import config
from webui.assets.loaders import load_archive, load_bundled, load_directory
from webui.assets.tree import AssetTree
from utils.logging_utils import get_tagged_logger

logger = get_tagged_logger(__name__, tag="assets/factory")


def build_asset_tree(settings: config.Settings | None = None) -> AssetTree:
    """Load the configured asset bundle: archive, then directory, then the bundled snapshot."""
    settings = settings or config.settings

    if settings.asset_archive:
        if settings.asset_dir:
            logger.warning("Both asset_archive and asset_dir are set; using asset_archive")
        logger.info(f"Using asset archive {settings.asset_archive}")
        return load_archive(settings.asset_archive)

    if settings.asset_dir:
        logger.info(f"Using asset directory {settings.asset_dir}")
        return load_directory(settings.asset_dir)

    logger.info("Using bundled assets")
    return load_bundled()
