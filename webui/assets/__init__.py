"""Read-only asset bundles and the loaders that produce them."""

from .tree import AssetEntry, AssetFile, AssetInfo, AssetTree, build_entries, valid_path
from .loaders import BUNDLE_DIR, load_archive, load_bundled, load_directory
from .factory import build_asset_tree

__all__ = [
    "AssetEntry",
    "AssetFile",
    "AssetInfo",
    "AssetTree",
    "BUNDLE_DIR",
    "build_asset_tree",
    "build_entries",
    "load_archive",
    "load_bundled",
    "load_directory",
    "valid_path",
]
