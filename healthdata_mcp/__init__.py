# healthdata_mcp/__init__.py
__all__ = ["get_app", "__version__"]

__version__ = "0.1.0"

from importlib.metadata import version, PackageNotFoundError

try:                      # If installed as a package
    __version__ = version("healthdata-mcp")
except PackageNotFoundError:
    pass


def get_app():
    """Return the plain HTTP application (used by uvicorn)."""
    from .config import get_settings  # pylint: disable=import-outside-toplevel
    from .dispatch import ToolDispatcher  # pylint: disable=import-outside-toplevel
    from .http_app import create_http_app  # pylint: disable=import-outside-toplevel

    return create_http_app(ToolDispatcher(get_settings()))
