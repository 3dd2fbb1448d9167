"""Application and router configuration.

Both are frozen dataclasses: immutable after creation,
IDE-autocompletable, no string-key dict lookups.
"""

from dataclasses import dataclass
from urllib.parse import quote

from switchyard.errors import ConfigurationError


@dataclass(frozen=True, slots=True)
class AppConfig:
    """Host application configuration. Immutable after creation.

    All fields have sensible defaults. Override what you need::

        config = AppConfig(debug=True, port=3000)
    """

    # Server
    host: str = "127.0.0.1"
    port: int = 8000

    # Show exception detail in 500 responses
    debug: bool = False


@dataclass(frozen=True, slots=True)
class RouterConfig:
    """Router configuration.

    ``base_path`` is the mount point of the router. It is prefixed to
    every redirect target the router formats, so redirects stay inside
    the mount point::

        router = Router(RouterConfig(base_path="/admin/"))
    """

    base_path: str = "/"

    def __post_init__(self) -> None:
        if not self.base_path.startswith("/"):
            msg = f"base_path must start with '/', got {self.base_path!r}"
            raise ConfigurationError(msg)

    def prefix(self, path: str) -> str:
        """Prefix a formatted path with the base path.

        The default base path leaves *path* unchanged. The base path is
        percent-encoded like formatted segments, so the result is always
        safe to send in a ``Location`` header.
        """
        base = quote(self.base_path.rstrip("/"), safe="/")
        if not base:
            return path
        return f"{base}{path}"
