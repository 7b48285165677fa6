"""Exception hierarchy for the web UI asset server."""


class WebUIError(Exception):
    """Base class for all web UI errors."""


class StartupError(WebUIError, RuntimeError):
    """Unrecoverable condition hit while wiring the UI; the process must not serve."""


class AssetBundleError(StartupError):
    """The asset bundle could not be loaded."""


class AssetNotFoundError(WebUIError, FileNotFoundError):
    """No asset exists at the requested path."""


class InvalidAssetPathError(AssetNotFoundError):
    """The requested path is malformed (empty element, '.', '..', stray slash)."""
