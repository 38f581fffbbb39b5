"""Exception taxonomy for rotation setup and runtime failures."""


class RotationError(Exception):
    """Base class for every error raised by logroll."""


class InvalidConfiguration(RotationError, ValueError):
    """Raised at startup when a size, frequency or limit spec is malformed."""


class PathUnavailable(RotationError, OSError):
    """Raised at startup when the target directory cannot be listed or created."""


class DestinationError(RotationError):
    """A write or reopen failure reported by the destination after startup."""

    def __init__(self, message: str, cause: BaseException | None = None):
        super().__init__(message)
        self.cause = cause


class ResourceExhaustion(DestinationError):
    """A retryable write condition such as EAGAIN on a non-blocking descriptor."""
