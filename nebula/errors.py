"""Error taxonomy for the marketplace.

Every fault that reaches an HTTP boundary is one of these, so routers can
turn it into a status code and a short human-readable message without
leaking internals.
"""

from __future__ import annotations


class MarketplaceError(Exception):
    """Base class for marketplace errors carrying an HTTP status."""

    status_code: int = 500

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class MarketplaceDisabledError(MarketplaceError):
    """Write endpoints were called while the marketplace flag is off."""

    status_code = 500


class UnauthorizedError(MarketplaceError):
    """The supplied pre-shared key does not match the configured secret."""

    status_code = 403


class BadRequestError(MarketplaceError):
    status_code = 400


class PackageNotFoundError(MarketplaceError):
    status_code = 404


class PackageConflictError(MarketplaceError):
    """A record or asset directory already exists for the identifier."""

    status_code = 409


class AssetWriteError(MarketplaceError):
    """A file could not be written into a package's asset directory."""

    status_code = 500


class InternalFailureError(MarketplaceError):
    status_code = 500


# ---------------------------------------------------------------------------
# Non-HTTP errors
# ---------------------------------------------------------------------------


class ConfigError(Exception):
    """The configuration document is malformed."""


class CatalogUnavailableError(Exception):
    """The catalog API could not be reached or answered unexpectedly."""


class InvalidTransitionError(Exception):
    """An install/uninstall action was requested from the wrong state."""
