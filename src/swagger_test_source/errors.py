"""Exceptions raised while loading and mapping API documents."""


class SwaggerSourceError(Exception):
    """Base class for all swagger-test-source errors."""


class InvalidHttpMethodError(SwaggerSourceError):
    """Raised when an operation's verb is not a supported HTTP method."""

    def __init__(self, path: str, verb: str):
        self.path = path
        self.verb = verb
        super().__init__(f"HttpMethod invalid: '{verb}' on path '{path}'")


class DocumentLoadError(SwaggerSourceError):
    """Raised when a document cannot be read or parsed."""

    def __init__(self, source: str, reason: str):
        self.source = source
        self.reason = reason
        super().__init__(f"Failed to load API document '{source}': {reason}")
