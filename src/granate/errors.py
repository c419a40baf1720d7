class GranateError(Exception):
    """Base class for all errors raised by granate."""


class AnnotationError(GranateError, ValueError):
    """A schema annotation is misconfigured.

    Raised while extracting, building or applying annotations, and from REST
    resolvers when a call-time value (e.g. a URL template parameter) is missing.
    """


class MockCollisionError(AnnotationError):
    """A field mock is declared twice for the same type."""


class RestRequestError(GranateError):
    """An outbound REST request answered with a non-success status."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code
