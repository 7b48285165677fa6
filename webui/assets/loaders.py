"""Loaders that turn an asset bundle on disk (or zipped) into an AssetTree."""

from __future__ import annotations

import atexit
import os
import shutil
import tempfile
import zipfile
from datetime import datetime, timezone
from pathlib import Path
from typing import BinaryIO, Optional

from webui.assets.tree import AssetTree, build_entries, valid_path
from webui.errors import AssetBundleError, InvalidAssetPathError
from utils.logging_utils import get_tagged_logger

logger = get_tagged_logger(__name__, tag="assets/loaders")

BUNDLE_DIR = Path(__file__).resolve().parent.parent / "bundle"


def load_directory(path: str | os.PathLike) -> AssetTree:
    """Record every file under `path`; contents are read from disk on open."""
    root = Path(path)
    if not root.is_dir():
        raise AssetBundleError(f"asset directory does not exist: {root}")
    try:
        tree = AssetTree(build_entries(root))
    except InvalidAssetPathError as exc:
        raise AssetBundleError(str(exc)) from exc
    logger.info(f"Loaded {len(tree)} assets from directory {root}")
    return tree


def _member_name(info: zipfile.ZipInfo) -> str:
    name = info.filename
    if name.startswith("./"):
        name = name[2:]
    return name.rstrip("/") if info.is_dir() else name


def load_archive(source: str | os.PathLike | BinaryIO, extract_to: Optional[str | os.PathLike] = None) -> AssetTree:
    """
    Extract a zip bundle and load it as a directory.

    Without `extract_to` the archive goes to a private temporary directory
    that is removed at interpreter exit. Member timestamps are kept (read as
    UTC). A member whose name would escape the bundle root is fatal.
    """
    try:
        archive = zipfile.ZipFile(source)
    except FileNotFoundError as exc:
        raise AssetBundleError(f"asset archive does not exist: {source}") from exc
    except zipfile.BadZipFile as exc:
        raise AssetBundleError(f"asset archive is not a valid zip file: {source}") from exc

    if extract_to is None:
        target = Path(tempfile.mkdtemp(prefix="webui-assets-"))
        atexit.register(shutil.rmtree, target, True)
    else:
        target = Path(extract_to)
        target.mkdir(parents=True, exist_ok=True)

    with archive:
        members = archive.infolist()
        for info in members:
            name = _member_name(info)
            if name and not valid_path(name):
                raise AssetBundleError(f"invalid member name in asset archive: {info.filename!r}")
        for info in members:
            name = _member_name(info)
            if not name or info.is_dir():
                continue
            destination = target / name
            destination.parent.mkdir(parents=True, exist_ok=True)
            destination.write_bytes(archive.read(info))
            mtime = datetime(*info.date_time, tzinfo=timezone.utc).timestamp()
            os.utime(destination, (mtime, mtime))

    logger.info(f"Extracted asset archive to {target}")
    return load_directory(target)


def load_bundled() -> AssetTree:
    """Load the bundle shipped inside the package."""
    return load_directory(BUNDLE_DIR)
