"""Server configuration.

ServerOptions is a frozen dataclass — fixed at construction, read-only
during dispatch, no string-key dict lookups.
"""

from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType

from xebec._internal.types import ErrorHandler
from xebec.errors import ConfigurationError

DEFAULT_MAX_BODY_SIZE = 1024 * 1024  # 1 MiB


@dataclass(frozen=True, slots=True)
class ServerOptions:
    """Server options. Immutable after creation.

    All fields have sensible defaults. Override what you need::

        options = ServerOptions(
            debug=True,
            max_body_size=2 * 1024 * 1024,
            default_headers={"X-Powered-By": "Xebec"},
        )
    """

    # Log every dispatched request and expose fault detail in 500 bodies
    debug: bool = False

    # Requests declaring a larger Content-Length are rejected with 413
    max_body_size: int = DEFAULT_MAX_BODY_SIZE

    # Added to every response leaving dispatch unless already present
    default_headers: Mapping[str, str] = field(default_factory=dict)

    # Called as error_handler(error, ctx) for any fault during dispatch
    error_handler: ErrorHandler | None = None

    def __post_init__(self) -> None:
        if self.max_body_size < 0:
            msg = f"max_body_size must be >= 0, got {self.max_body_size}"
            raise ConfigurationError(msg)
        # Read-only copy, detached from the caller's dict
        object.__setattr__(
            self, "default_headers", MappingProxyType(dict(self.default_headers))
        )
