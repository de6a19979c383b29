"""Exception types raised by the image layer.

Error handling strategy:
    Missing data (unknown size names, unresolvable references, absent metadata)
    never raises; those paths degrade to empty results. Only programmer-facing
    misuse and an unreachable transformation engine surface as exceptions.
"""


class ImagesError(Exception):
    """Base class for image layer failures."""


class UnsupportedOperationError(ImagesError, AttributeError):
    """Raised when the legacy adapter is asked for an operation it does not know."""

    def __init__(self, name: str):
        super().__init__(f"Method {name} does not exist")
        self.name = name


class EngineUnavailableError(ImagesError, RuntimeError):
    """Raised when no transformation engine is configured or it cannot be reached."""
