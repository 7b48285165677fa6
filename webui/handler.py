"""Request handlers for the single-page app: a cached index page plus static assets."""

from email.utils import formatdate

from starlette.requests import Request
from starlette.responses import Response
from starlette.staticfiles import StaticFiles

from webui.assets import AssetTree
from webui.errors import AssetNotFoundError, StartupError
from utils.logging_utils import get_tagged_logger

logger = get_tagged_logger(__name__, tag="handler")

BUILD_DIR = "build"
INDEX_FILE = "index.html"
CONFIG_PLACEHOLDER = b"%CONFIG%"


class ServingHandler:
    """
    Holds the pre-rendered index page and the asset view used for everything else.

    Nothing on the handler changes after construction, so a single instance
    is shared by all concurrent requests without locking.
    """

    __slots__ = ("_assets", "_static", "_index_bytes", "_index_mod_time")

    def __init__(self, assets: AssetTree, index_bytes: bytes, index_mod_time: str) -> None:
        self._assets = assets
        # only used for its file_response(): lookups go through the asset tree
        self._static = StaticFiles(directory=assets.path)
        self._index_bytes = index_bytes
        self._index_mod_time = index_mod_time

    @property
    def assets(self) -> AssetTree:
        return self._assets

    @property
    def index_bytes(self) -> bytes:
        return self._index_bytes

    @property
    def index_mod_time(self) -> str:
        return self._index_mod_time

    def serve_index(self, request: Request) -> Response:
        """Return the cached index page."""
        return Response(
            self._index_bytes,
            status_code=200,
            headers={"last-modified": self._index_mod_time},
            media_type="text/html",
        )

    def serve_other(self, request: Request) -> Response:
        """Serve `request.url.path` from the asset view, or a bare 404."""
        name = _asset_name(request.url.path)
        try:
            asset = self._assets.open(name)
        except AssetNotFoundError as exc:
            # missing files and malformed paths look the same to the client
            logger.debug(f"Asset lookup failed for {request.url.path!r}: {exc}")
            return Response(status_code=404)

        with asset:
            info = asset.stat()
        if info.is_dir:
            logger.debug(f"Refusing to list directory {request.url.path!r}")
            return Response(status_code=404)
        # content type, Last-Modified/ETag, 304 and Range handling
        return self._static.file_response(info.path, info.stat_result, request.scope)


def _asset_name(url_path: str) -> str:
    """Translate a URL path into a tree path: "/" is the root, otherwise drop the leading slash."""
    if url_path == "/":
        return "."
    return url_path[1:] if url_path.startswith("/") else url_path


def create_handler(config_bytes: bytes, assets: AssetTree) -> ServingHandler:
    """
    Render the index page once and build the handler around it.

    The first %CONFIG% in build/index.html is replaced with `config_bytes`;
    a page without the placeholder is served unchanged. A bundle without a
    build/ directory or without build/index.html raises StartupError.
    """
    try:
        build = assets.sub(BUILD_DIR)
        index = build.open(INDEX_FILE)
    except (AssetNotFoundError, NotADirectoryError) as exc:
        raise StartupError(f"asset bundle has no {BUILD_DIR}/{INDEX_FILE}") from exc

    with index:
        info = index.stat()
        if info.is_dir:
            raise StartupError(f"{BUILD_DIR}/{INDEX_FILE} is a directory")
        raw = index.read()

    if CONFIG_PLACEHOLDER not in raw:
        logger.warning(f"{INDEX_FILE} has no {CONFIG_PLACEHOLDER.decode()} placeholder; serving it unchanged")
    index_bytes = raw.replace(CONFIG_PLACEHOLDER, config_bytes, 1)

    logger.info(f"Prepared {INDEX_FILE} ({len(index_bytes)} bytes, {len(build)} assets)")
    return ServingHandler(build, index_bytes, formatdate(info.stat_result.st_mtime, usegmt=True))
