"""Errors raised while resolving and scheduling an addon build.

Every error carries the HTTP status used by the API and a human-readable
message that is passed back to the caller unchanged.
"""

NOT_FOUND_PREFIX = "Version or package not found or not a valid addon, error details: "


class AddonError(Exception):
    """Base class for all failures of the addon pipeline."""

    status: int = 500
    title: str = "Internal Server Error"

    def __init__(self, detail: str):
        super().__init__(detail)
        self.detail = detail

    def to_dict(self) -> dict:
        return {
            "status": self.status,
            "title": self.title,
            "detail": self.detail,
        }


class RegistryError(AddonError):
    """The registry could not be queried for the package."""

    status = 404
    title = "Not Found"

    def __init__(self, reason: str):
        super().__init__(NOT_FOUND_PREFIX + reason)
        self.reason = reason


class RegistryParseError(RegistryError):
    """The registry answered with something that is not JSON."""


class InvalidAddon(RegistryError):
    """The package exists but is not tagged as an addon."""


class UnsupportedVersion(AddonError):
    """No builder supports the requested Ember version."""

    status = 400
    title = "Bad Request"


class StorageWriteError(AddonError):
    """The placeholder status document could not be written."""

    status = 502
    title = "Bad Gateway"


class DispatchError(AddonError):
    """The build function could not be invoked."""

    status = 502
    title = "Bad Gateway"


class UnknownError(AddonError):
    """Anything the pipeline did not anticipate."""

    def __init__(self, error: Exception):
        super().__init__(f"An unknown error occurred: {error}")


class InvalidEvent(AddonError):
    """The invocation event is missing fields or has malformed values."""

    status = 422
    title = "Unprocessable Entity"
