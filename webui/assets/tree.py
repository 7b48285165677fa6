"""Read-only asset tree with an open/stat/read interface over a bundle on disk."""

from __future__ import annotations

import os
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from types import MappingProxyType
from typing import Iterator, Mapping

from webui.errors import AssetNotFoundError, InvalidAssetPathError


@dataclass(frozen=True)
class AssetEntry:
    """A file or directory recorded when the bundle was loaded."""
    name: str
    path: Path
    stat_result: os.stat_result
    is_dir: bool = False


@dataclass(frozen=True)
class AssetInfo:
    """Metadata returned by AssetFile.stat()."""
    name: str
    path: Path
    size: int
    mtime: datetime
    is_dir: bool
    stat_result: os.stat_result


def valid_path(name: str) -> bool:
    """
    Report whether `name` is a valid tree path.

    "." names the root. Any other path is a slash-separated list of elements
    with no leading or trailing slash, no empty elements and no "." or "..".
    """
    if name == ".":
        return True
    if not name:
        return False
    return all(elem not in ("", ".", "..") for elem in name.split("/"))


class AssetFile:
    """An open handle onto an AssetEntry."""

    def __init__(self, entry: AssetEntry) -> None:
        self._entry = entry
        self._closed = False

    def stat(self) -> AssetInfo:
        e = self._entry
        return AssetInfo(
            name=e.name,
            path=e.path,
            size=e.stat_result.st_size,
            mtime=datetime.fromtimestamp(e.stat_result.st_mtime, tz=timezone.utc),
            is_dir=e.is_dir,
            stat_result=e.stat_result,
        )

    def read(self) -> bytes:
        if self._closed:
            raise ValueError("read from closed asset file")
        if self._entry.is_dir:
            raise IsADirectoryError(self._entry.name)
        return self._entry.path.read_bytes()

    def close(self) -> None:
        self._closed = True

    @property
    def closed(self) -> bool:
        return self._closed

    def __enter__(self) -> "AssetFile":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()


class AssetTree:
    """
    Immutable mapping from relative path to AssetEntry.

    Keys are slash-separated paths relative to the bundle root; "." is the
    root directory itself. The set of entries and their stat results are
    fixed when the tree is built, so files added to the bundle directory
    later are never reachable. A tree may be a view onto a subdirectory of a
    larger bundle (see `sub`); paths then resolve relative to that
    subdirectory and nothing outside it is reachable.
    """

    def __init__(self, entries: Mapping[str, AssetEntry], root: str = ".") -> None:
        if "." not in entries:
            raise InvalidAssetPathError("asset tree has no root entry")
        self._entries = entries if isinstance(entries, MappingProxyType) else MappingProxyType(dict(entries))
        self._root = root

    @property
    def root(self) -> str:
        return self._root

    @property
    def path(self) -> Path:
        """On-disk directory this view is rooted at."""
        return self._entries[self._root].path

    def _full(self, name: str) -> str:
        if not valid_path(name):
            raise InvalidAssetPathError(f"invalid asset path: {name!r}")
        if self._root == ".":
            return name
        if name == ".":
            return self._root
        return f"{self._root}/{name}"

    def open(self, name: str) -> AssetFile:
        """Open `name` for reading, raising AssetNotFoundError if absent."""
        entry = self._entries.get(self._full(name))
        if entry is None:
            raise AssetNotFoundError(f"asset not found: {name!r}")
        return AssetFile(entry)

    def stat(self, name: str) -> AssetInfo:
        with self.open(name) as f:
            return f.stat()

    def sub(self, directory: str) -> "AssetTree":
        """Return a view of the tree rooted at `directory`."""
        full = self._full(directory)
        entry = self._entries.get(full)
        if entry is None:
            raise AssetNotFoundError(f"asset directory not found: {directory!r}")
        if not entry.is_dir:
            raise NotADirectoryError(directory)
        return AssetTree(self._entries, root=full)

    def walk(self) -> Iterator[str]:
        """Yield every file path in this view, relative to its root, sorted."""
        prefix = "" if self._root == "." else self._root + "/"
        for key in sorted(self._entries):
            entry = self._entries[key]
            if entry.is_dir or not key.startswith(prefix):
                continue
            yield key[len(prefix):]

    def __contains__(self, name: object) -> bool:
        if not isinstance(name, str) or not valid_path(name):
            return False
        entry = self._entries.get(self._full(name))
        return entry is not None and not entry.is_dir

    def __len__(self) -> int:
        return sum(1 for _ in self.walk())

    def __repr__(self) -> str:
        return f"AssetTree(root={self._root!r}, files={len(self)})"


def build_entries(root: str | os.PathLike) -> dict[str, AssetEntry]:
    """
    Record every regular file and directory under `root`.

    Entries are keyed by their slash-separated path relative to `root`,
    which itself is recorded as ".".
    """
    base = Path(root)
    entries: dict[str, AssetEntry] = {".": AssetEntry(name=".", path=base, stat_result=base.stat(), is_dir=True)}
    for dirpath, dirnames, filenames in os.walk(base):
        current = Path(dirpath)
        for dirname in dirnames:
            dir_path = current / dirname
            rel = dir_path.relative_to(base).as_posix()
            entries[rel] = AssetEntry(name=dirname, path=dir_path, stat_result=dir_path.stat(), is_dir=True)
        for filename in filenames:
            file_path = current / filename
            if not file_path.is_file():
                continue
            rel = file_path.relative_to(base).as_posix()
            if not valid_path(rel):
                raise InvalidAssetPathError(f"invalid asset path in bundle: {rel!r}")
            entries[rel] = AssetEntry(name=filename, path=file_path, stat_result=file_path.stat())
    return entries
